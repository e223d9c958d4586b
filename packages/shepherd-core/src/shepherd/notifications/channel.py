"""Push channel transport for live notifications."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable
from enum import Enum
from typing import Any, Protocol

import socketio
import structlog
from socketio.exceptions import ConnectionError as SocketConnectError
from socketio.exceptions import SocketIOError

log = structlog.get_logger(__name__)

JOIN_ROOM_EVENT = "joinUserRoom"
NOTIFICATION_EVENT = "notification"


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class ChannelError(Exception):
    """The push channel could not be opened or written to."""


class PushTransport(Protocol):
    """One persistent connection to the notification service."""

    async def connect(self) -> None: ...

    async def emit(self, event: str, data: Any) -> None: ...

    def events(self) -> AsyncIterator[tuple[str, Any]]:
        """Yield ``(event, data)`` pairs until the connection drops."""
        ...

    async def close(self) -> None:
        """Release the connection. Safe to call more than once."""
        ...


TransportFactory = Callable[[], PushTransport]

_CLOSED = None


class SocketIOTransport:
    """Socket.IO client for the backend notification gateway.

    The client's own reconnection is switched off; ``NotificationFeed``
    decides when to reconnect. Subscribed events are queued and handed out
    by :meth:`events` until the server or :meth:`close` disconnects.
    """

    def __init__(
        self,
        url: str,
        subscribed: tuple[str, ...] = (NOTIFICATION_EVENT,),
        socketio_path: str = "socket.io",
        client_factory: Callable[..., Any] = socketio.AsyncClient,
    ) -> None:
        self._url = url
        self._subscribed = subscribed
        self._socketio_path = socketio_path
        self._client_factory = client_factory
        self._sio: Any = None
        self._queue: asyncio.Queue[tuple[str, Any] | None] = asyncio.Queue()

    async def connect(self) -> None:
        sio = self._client_factory(reconnection=False)
        for event in self._subscribed:
            sio.on(event, self._forwarder(event))
        sio.on("disconnect", self._on_disconnect)
        try:
            await sio.connect(self._url, socketio_path=self._socketio_path)
        except SocketConnectError as exc:
            raise ChannelError(f"Could not connect to {self._url}: {exc}") from exc
        self._sio = sio

    def _forwarder(self, event: str) -> Callable[[Any], Any]:
        async def _forward(data: Any = None) -> None:
            self._queue.put_nowait((event, data))

        return _forward

    async def _on_disconnect(self, *args: Any) -> None:
        log.info("push_channel_closed_by_peer", reason=args[0] if args else None)
        self._queue.put_nowait(_CLOSED)

    async def emit(self, event: str, data: Any) -> None:
        if self._sio is None:
            raise ChannelError("Channel is not connected")
        try:
            await self._sio.emit(event, data)
        except SocketIOError as exc:
            raise ChannelError(f"Channel closed while sending {event!r}") from exc

    async def events(self) -> AsyncIterator[tuple[str, Any]]:
        if self._sio is None:
            return
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                return
            yield item

    async def close(self) -> None:
        sio, self._sio = self._sio, None
        if sio is not None:
            await sio.disconnect()
            self._queue.put_nowait(_CLOSED)


def socketio_factory(url: str) -> TransportFactory:
    return lambda: SocketIOTransport(url)
