"""End-to-end tests for the composition root."""

from __future__ import annotations

import httpx
import pytest
from _helpers import TransportRecorder, eventually

from shepherd.auth.session import Session, StaticIdentityProvider
from shepherd.config import ReconnectPolicy, ShepherdSettings
from shepherd.context import ShepherdContext
from shepherd.notifications.channel import ConnectionState


def _backend(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/users/sync":
        return httpx.Response(200, json={"id": "u1", "email": "g@example.org", "role": "admin"})
    if request.url.path == "/notifications/clerk_1":
        return httpx.Response(200, json=[{"id": "n1", "isRead": False}])
    if request.url.path == "/members":
        return httpx.Response(200, json=[{"id": "1", "firstName": "John", "lastName": "Doe", "memberNumber": "M001"}])
    return httpx.Response(404)


@pytest.fixture
def settings() -> ShepherdSettings:
    return ShepherdSettings(
        api_url="http://backend.test",
        search_debounce_ms=20,
        reconnect=ReconnectPolicy(max_attempts=0),
    )


@pytest.mark.asyncio
async def test_context_wires_sync_feed_and_search(settings: ShepherdSettings):
    provider = StaticIdentityProvider()
    transports = TransportRecorder()
    ctx = ShepherdContext(settings, provider, transport_factory=transports, http_transport=httpx.MockTransport(_backend))

    async with ctx:
        assert ctx.session_sync.user is None
        assert ctx.feed.connection_state is ConnectionState.DISCONNECTED

        await provider.set_session(Session.signed_in("clerk_1", primary_email="g@example.org"), token="tok")
        await ctx.session_sync.settle()
        assert ctx.session_sync.user is not None
        assert ctx.session_sync.user.role == "admin"

        await eventually(lambda: ctx.feed.unread_count == 1)

        picked = []
        search = ctx.new_member_search(on_select=picked.append)
        search.set_query("john")
        await search.wait_idle()
        assert search.candidates == ["John Doe — M001"]
        search.select(search.results[0])
        assert picked[0].id == "1"

        await provider.set_session(Session.signed_out())
        await ctx.session_sync.settle()
        assert ctx.session_sync.user is None
        assert ctx.feed.connection_state is ConnectionState.DISCONNECTED

    assert all(t.closed for t in transports.created)


@pytest.mark.asyncio
async def test_start_with_existing_session(settings: ShepherdSettings):
    provider = StaticIdentityProvider(Session.signed_in("clerk_1"), token="tok")
    transports = TransportRecorder()
    ctx = ShepherdContext(settings, provider, transport_factory=transports, http_transport=httpx.MockTransport(_backend))
    await ctx.start()
    try:
        assert ctx.session_sync.user is not None
        await eventually(lambda: ctx.feed.connection_state is ConnectionState.CONNECTED)
    finally:
        await ctx.aclose()
    assert ctx.feed.connection_state is ConnectionState.DISCONNECTED
