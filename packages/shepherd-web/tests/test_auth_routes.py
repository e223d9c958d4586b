"""Session relay endpoint tests."""

import json

SYNC_BODY = {"clerkId": "clerk_1", "email": "grace@example.org", "firstName": "Grace", "lastName": "Hopper"}


def test_sync_requires_session(client, backend):
    response = client.post("/api/auth/sync", json=SYNC_BODY)
    assert response.status_code == 401
    assert backend.requests == []


def test_sync_relays_with_caller_token(client, backend, token):
    response = client.post("/api/auth/sync", json=SYNC_BODY, headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["role"] == "admin"
    assert response.json()["firstName"] == "Grace"

    relayed = backend.requests[0]
    assert relayed.method == "POST"
    assert relayed.headers["Authorization"] == f"Bearer {token}"
    assert json.loads(relayed.content) == SYNC_BODY


def test_sync_passes_backend_status_through(client, backend, token):
    backend.status_code = 403
    response = client.post("/api/auth/sync", json=SYNC_BODY, headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 403
    assert response.json() == {"detail": "Failed to sync with backend"}


def test_sync_unreachable_backend_is_internal_error(client, backend, token):
    backend.fail_connect = True
    response = client.post("/api/auth/sync", json=SYNC_BODY, headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 500


def test_signout_clears_session_cookie(client):
    response = client.post("/api/auth/signout")
    assert response.status_code == 200
    assert response.json() == {"success": True, "redirectUrl": "/sign-in"}
    cookie = response.headers["set-cookie"]
    assert cookie.startswith("__session=")
    assert "Max-Age=0" in cookie
    assert "HttpOnly" in cookie
    assert "SameSite=lax" in cookie
