"""Composition root for a console client session.

Builds the API client, SessionSync and NotificationFeed from settings and an
identity provider, and owns their start/stop lifecycle. Nothing here is a
module-level global; create one ``ShepherdContext`` per signed-in console.

Usage::

    provider = StaticIdentityProvider()
    async with ShepherdContext(ShepherdSettings(), provider) as ctx:
        await provider.set_session(Session.signed_in("user_123"), token="...")
        await ctx.session_sync.settle()
        print(ctx.session_sync.user)
"""

from __future__ import annotations

from collections.abc import Callable

import httpx
import structlog

from shepherd.api import ApiClient, MembersApi, NotificationsApi, SettingsApi, UsersApi
from shepherd.api.schemas import Member
from shepherd.auth.session import IdentityProvider
from shepherd.auth.sync import SessionSync
from shepherd.config import ShepherdSettings
from shepherd.notifications.channel import TransportFactory, socketio_factory
from shepherd.notifications.feed import NotificationFeed
from shepherd.search.incremental import MemberSearch

log = structlog.get_logger(__name__)


class ShepherdContext:
    def __init__(
        self,
        settings: ShepherdSettings,
        provider: IdentityProvider,
        transport_factory: TransportFactory | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.provider = provider
        self.api = ApiClient(
            settings.api_url,
            token_provider=provider.get_token,
            timeout=settings.request_timeout,
            transport=http_transport,
        )
        self.users = UsersApi(self.api)
        self.members = MembersApi(self.api)
        self.notifications_api = NotificationsApi(self.api)
        self.church_settings = SettingsApi(self.api)

        self.session_sync = SessionSync(provider, self.users)
        self.feed = NotificationFeed(
            self.notifications_api,
            transport_factory or socketio_factory(settings.socket_url),
            reconnect=settings.reconnect,
        )
        self._searches: list[MemberSearch] = []
        self._unsubscribe_feed: Callable[[], None] | None = None
        self._started = False

    async def start(self) -> None:
        """Follow session transitions and reconcile the current session once."""
        if self._started:
            return
        self._started = True
        self.session_sync.attach()
        self._unsubscribe_feed = self.provider.subscribe(self.feed.on_session_changed)
        await self.session_sync.sync_user()
        await self.feed.on_session_changed(self.provider.session)
        log.info("context_started", api_url=self.settings.api_url)

    def new_member_search(
        self,
        on_select: Callable[[Member], None] | None = None,
        default_query: str = "",
    ) -> MemberSearch:
        search = MemberSearch(
            self.members,
            on_select=on_select,
            debounce=self.settings.search_debounce,
            limit=self.settings.search_limit,
            default_query=default_query,
        )
        self._searches.append(search)
        return search

    async def aclose(self) -> None:
        if self._unsubscribe_feed is not None:
            self._unsubscribe_feed()
            self._unsubscribe_feed = None
        for search in self._searches:
            await search.aclose()
        self._searches.clear()
        await self.feed.close()
        await self.session_sync.aclose()
        await self.api.aclose()
        self._started = False
        log.info("context_closed")

    async def __aenter__(self) -> ShepherdContext:
        await self.start()
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()
