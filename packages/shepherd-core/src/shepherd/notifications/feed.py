"""LiveNotificationFeed: one push channel per signed-in identity."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import structlog
from pydantic import ValidationError

from shepherd.api.client import ApiError
from shepherd.api.notifications import NotificationsApi
from shepherd.api.schemas import Notification
from shepherd.auth.session import Session
from shepherd.config import ReconnectPolicy
from shepherd.notifications.channel import (
    JOIN_ROOM_EVENT,
    NOTIFICATION_EVENT,
    ChannelError,
    ConnectionState,
    PushTransport,
    TransportFactory,
)

log = structlog.get_logger(__name__)


class NotificationFeed:
    """Merges an initial fetch and pushed events into a newest-first log.

    The feed owns at most one channel. Binding a new identity closes the
    previous channel completely before the next one is opened. Read
    receipts are applied locally first and never rolled back; ids marked
    read here stay read when a later fetch still reports them unread.

    After an unexpected drop the channel reconnects with bounded
    exponential backoff; explicit teardown never reconnects.
    """

    def __init__(
        self,
        api: NotificationsApi,
        transport_factory: TransportFactory,
        reconnect: ReconnectPolicy | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._api = api
        self._transport_factory = transport_factory
        self._reconnect = reconnect or ReconnectPolicy()
        self._sleep = sleep

        self.notifications: list[Notification] = []
        self.unread_count = 0
        self.connection_state = ConnectionState.DISCONNECTED

        self._user_id: str | None = None
        self._transport: PushTransport | None = None
        self._runner: asyncio.Task[None] | None = None
        self._fetches: set[asyncio.Task[None]] = set()
        self._read_locally: set[str] = set()
        self._pushed_since_fetch: set[str] = set()
        self._lock = asyncio.Lock()

    @property
    def user_id(self) -> str | None:
        return self._user_id

    async def on_session_changed(self, session: Session) -> None:
        await self.bind(session.identity)

    async def bind(self, user_id: str | None) -> None:
        """Point the feed at ``user_id``; ``None`` just tears down."""
        async with self._lock:
            if user_id is not None and user_id == self._user_id and self._runner is not None and not self._runner.done():
                return
            await self._teardown()
            self._user_id = user_id
            self.notifications = []
            self.unread_count = 0
            self._read_locally.clear()
            self._pushed_since_fetch.clear()
            if user_id is None:
                return
            self._runner = asyncio.create_task(self._run(user_id), name=f"notifications-{user_id}")

    async def close(self) -> None:
        await self.bind(None)

    async def refresh(self) -> None:
        if self._user_id is not None:
            await self._fetch(self._user_id)

    async def mark_as_read(self, notification_id: str) -> None:
        flipped = False
        for i, n in enumerate(self.notifications):
            if n.id == notification_id:
                if not n.is_read:
                    self.notifications[i] = n.model_copy(update={"is_read": True})
                    self.unread_count = max(0, self.unread_count - 1)
                    flipped = True
                break
        self._read_locally.add(notification_id)
        if not flipped:
            return

        try:
            await self._api.mark_as_read(notification_id)
        except (ApiError, ValidationError) as exc:
            log.warning("mark_read_failed", notification_id=notification_id, error=str(exc))

    async def mark_all_as_read(self) -> None:
        self.notifications = [
            n if n.is_read else n.model_copy(update={"is_read": True}) for n in self.notifications
        ]
        self._read_locally.update(n.id for n in self.notifications)
        self.unread_count = 0

        user_id = self._user_id
        if user_id is None:
            return
        try:
            await self._api.mark_all_as_read(user_id)
        except (ApiError, ValidationError) as exc:
            log.warning("mark_all_read_failed", user_id=user_id, error=str(exc))

    # ------------------------------------------------------------------
    # Channel lifecycle
    # ------------------------------------------------------------------

    async def _run(self, user_id: str) -> None:
        attempt = 0
        while True:
            transport = self._transport_factory()
            self._transport = transport
            self.connection_state = ConnectionState.CONNECTING
            try:
                await transport.connect()
                self.connection_state = ConnectionState.CONNECTED
                attempt = 0
                log.info("notification_channel_connected", user_id=user_id)
                await transport.emit(JOIN_ROOM_EVENT, user_id)
                self._spawn_fetch(user_id)
                async for event, data in transport.events():
                    if event == NOTIFICATION_EVENT:
                        self._on_push(data)
                log.info("notification_channel_dropped", user_id=user_id)
            except ChannelError as exc:
                log.warning("notification_channel_error", user_id=user_id, error=str(exc))
            finally:
                self.connection_state = ConnectionState.DISCONNECTED
                if self._transport is transport:
                    self._transport = None
                await transport.close()

            if attempt >= self._reconnect.max_attempts:
                log.warning("notification_channel_gave_up", user_id=user_id, attempts=attempt)
                return
            delay = self._reconnect.delay_for(attempt)
            attempt += 1
            log.info("notification_channel_reconnecting", user_id=user_id, attempt=attempt, delay=delay)
            await self._sleep(delay)

    async def _teardown(self) -> None:
        runner, self._runner = self._runner, None
        if runner is not None:
            runner.cancel()
            await asyncio.gather(runner, return_exceptions=True)

        fetches = list(self._fetches)
        for task in fetches:
            task.cancel()
        await asyncio.gather(*fetches, return_exceptions=True)
        self._fetches.clear()

        transport, self._transport = self._transport, None
        if transport is not None:
            await transport.close()
        if self.connection_state is not ConnectionState.DISCONNECTED:
            log.info("notification_channel_closed", user_id=self._user_id)
        self.connection_state = ConnectionState.DISCONNECTED

    # ------------------------------------------------------------------
    # Merging
    # ------------------------------------------------------------------

    def _on_push(self, data: Any) -> None:
        try:
            incoming = Notification.model_validate(data)
        except ValidationError as exc:
            log.warning("notification_push_invalid", error=str(exc))
            return
        if any(n.id == incoming.id for n in self.notifications):
            return
        self.notifications.insert(0, incoming)
        self._pushed_since_fetch.add(incoming.id)
        if not incoming.is_read:
            self.unread_count += 1

    def _spawn_fetch(self, user_id: str) -> None:
        task = asyncio.create_task(self._fetch(user_id), name=f"notifications-fetch-{user_id}")
        self._fetches.add(task)
        task.add_done_callback(self._fetches.discard)

    async def _fetch(self, user_id: str) -> None:
        try:
            fetched = await self._api.get_all(user_id)
        except (ApiError, ValidationError) as exc:
            log.warning("notification_fetch_failed", user_id=user_id, error=str(exc))
            return
        if user_id != self._user_id:
            return
        self._merge(fetched)

    def _merge(self, fetched: list[Notification]) -> None:
        fetched_ids = {n.id for n in fetched}
        # only pushes the server has not reported yet stay on top; other entries the
        # server no longer returns are dropped
        pushed = [
            n for n in self.notifications if n.id in self._pushed_since_fetch and n.id not in fetched_ids
        ]
        self._pushed_since_fetch.clear()
        read = self._read_locally | {n.id for n in self.notifications if n.is_read}

        merged: list[Notification] = list(pushed)
        seen = {n.id for n in pushed}
        for n in fetched:
            if n.id in seen:
                continue
            seen.add(n.id)
            if n.id in read and not n.is_read:
                n = n.model_copy(update={"is_read": True})
            merged.append(n)

        self.notifications = merged
        self.unread_count = sum(1 for n in merged if not n.is_read)
