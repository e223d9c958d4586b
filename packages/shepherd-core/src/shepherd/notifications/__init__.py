"""Live notification feed and its push transport."""

from __future__ import annotations

from shepherd.notifications.channel import (
    ChannelError,
    ConnectionState,
    PushTransport,
    SocketIOTransport,
    socketio_factory,
)
from shepherd.notifications.feed import NotificationFeed

__all__ = [
    "ChannelError",
    "ConnectionState",
    "NotificationFeed",
    "PushTransport",
    "SocketIOTransport",
    "socketio_factory",
]
