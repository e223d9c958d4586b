"""Identity-provider session state and the provider seam."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol

import structlog

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Session:
    """Authenticated identity as reported by the identity provider.

    Immutable: every provider transition produces a new ``Session``.
    """

    is_loaded: bool = False
    is_signed_in: bool = False
    external_id: str | None = None
    primary_email: str = ""
    first_name: str = ""
    last_name: str = ""

    @classmethod
    def loading(cls) -> Session:
        return cls()

    @classmethod
    def signed_out(cls) -> Session:
        return cls(is_loaded=True)

    @classmethod
    def signed_in(
        cls,
        external_id: str,
        primary_email: str = "",
        first_name: str = "",
        last_name: str = "",
    ) -> Session:
        return cls(
            is_loaded=True,
            is_signed_in=True,
            external_id=external_id,
            primary_email=primary_email,
            first_name=first_name,
            last_name=last_name,
        )

    @property
    def identity(self) -> str | None:
        """External id when loaded and signed in, else ``None``."""
        if self.is_loaded and self.is_signed_in:
            return self.external_id
        return None


SessionListener = Callable[[Session], Awaitable[None]]


class IdentityProvider(Protocol):
    """What the console needs from the third-party identity provider."""

    @property
    def session(self) -> Session: ...

    async def get_token(self) -> str | None: ...

    async def sign_out(self) -> None: ...

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener for session transitions; returns an unsubscribe callable."""
        ...


class StaticIdentityProvider:
    """In-process identity provider.

    Holds a session and a bearer token set by the host (a test, a script, or
    the console server relaying a verified session cookie) and publishes
    every change to subscribers in registration order.
    """

    def __init__(self, session: Session | None = None, token: str | None = None) -> None:
        self._session = session or Session.loading()
        self._token = token
        self._listeners: list[SessionListener] = []

    @property
    def session(self) -> Session:
        return self._session

    async def get_token(self) -> str | None:
        if self._session.identity is None:
            return None
        return self._token

    async def set_session(self, session: Session, token: str | None = None) -> None:
        self._session = session
        self._token = token
        log.debug("session_transition", loaded=session.is_loaded, signed_in=session.is_signed_in)
        for listener in list(self._listeners):
            await listener(session)

    async def sign_out(self) -> None:
        await self.set_session(Session.signed_out())

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe
