"""Console server test fixtures with a mocked backend."""

from __future__ import annotations

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from shepherd_web.auth.tokens import create_session_token
from shepherd_web.rest.app import create_app
from shepherd_web.settings import WebSettings


class FakeBackend:
    """httpx MockTransport handler standing in for the backend REST API."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.fail_connect = False

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_connect:
            raise httpx.ConnectError("backend down", request=request)
        if request.url.path != "/users/sync":
            return httpx.Response(404, json={"message": "not found"})
        if self.status_code >= 400:
            return httpx.Response(self.status_code, json={"message": "rejected"})
        body = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "id": "u1",
                "email": body.get("email", ""),
                "firstName": body.get("firstName", ""),
                "lastName": body.get("lastName", ""),
                "role": "admin",
                "isActive": True,
            },
        )


@pytest.fixture
def settings() -> WebSettings:
    return WebSettings(_env_file=None, session_key="test-session-key", sign_in_url="/sign-in")


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def client(settings: WebSettings, backend: FakeBackend):
    app = create_app(settings, backend_transport=httpx.MockTransport(backend))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def token(settings: WebSettings) -> str:
    return create_session_token(
        "clerk_1", settings, email="grace@example.org", first_name="Grace", last_name="Hopper"
    )
