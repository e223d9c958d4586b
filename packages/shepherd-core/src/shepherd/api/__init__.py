"""Backend REST API client and resource wrappers."""

from __future__ import annotations

from shepherd.api.client import ApiClient, ApiError, TokenProvider
from shepherd.api.members import MembersApi
from shepherd.api.notifications import NotificationsApi
from shepherd.api.settings import SettingsApi
from shepherd.api.users import UsersApi

__all__ = [
    "ApiClient",
    "ApiError",
    "MembersApi",
    "NotificationsApi",
    "SettingsApi",
    "TokenProvider",
    "UsersApi",
]
