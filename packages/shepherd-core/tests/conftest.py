"""Shared test fixtures."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make _helpers importable from test files
sys.path.insert(0, str(Path(__file__).parent))

from _helpers import ControlledUsersApi, FakeNotificationsApi, TransportRecorder  # noqa: E402

from shepherd.auth.session import StaticIdentityProvider  # noqa: E402
from shepherd.config import ReconnectPolicy  # noqa: E402


@pytest.fixture
def provider() -> StaticIdentityProvider:
    return StaticIdentityProvider()


@pytest.fixture
def users_api() -> ControlledUsersApi:
    return ControlledUsersApi()


@pytest.fixture
def notifications_api() -> FakeNotificationsApi:
    return FakeNotificationsApi()


@pytest.fixture
def transports() -> TransportRecorder:
    return TransportRecorder()


@pytest.fixture
def no_reconnect() -> ReconnectPolicy:
    return ReconnectPolicy(max_attempts=0)
