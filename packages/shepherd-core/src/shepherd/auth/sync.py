"""SessionSync: keeps the backend user record in step with the identity provider."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace

import structlog
from pydantic import ValidationError

from shepherd.api.client import ApiError
from shepherd.api.schemas import AppUser, SyncUserRequest
from shepherd.api.users import UsersApi
from shepherd.auth.session import IdentityProvider, Session

log = structlog.get_logger(__name__)

SYNC_FAILED = "Failed to sync user with backend"
SIGN_OUT_FAILED = "Failed to sign out"


@dataclass(frozen=True)
class SyncState:
    user: AppUser | None = None
    is_loading: bool = False
    error: str | None = None


class SessionSync:
    """Reconciles identity-provider sessions with backend ``AppUser`` records.

    Each sync takes a generation number when it starts. A sync only writes
    state while its generation is still the latest, so an older, slower
    reconciliation can never overwrite the outcome of a newer one and a
    sign-out always wins over an in-flight sign-in.
    """

    def __init__(self, provider: IdentityProvider, users: UsersApi) -> None:
        self._provider = provider
        self._users = users
        self._state = SyncState()
        self._generation = 0
        self._tasks: set[asyncio.Task[None]] = set()
        self._unsubscribe = None

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def user(self) -> AppUser | None:
        return self._state.user

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def error(self) -> str | None:
        return self._state.error

    def attach(self) -> None:
        """Start following provider session transitions."""
        if self._unsubscribe is None:
            self._unsubscribe = self._provider.subscribe(self.on_session_changed)

    async def on_session_changed(self, session: Session) -> None:
        task = asyncio.create_task(self.sync_user(), name="session-sync")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def sync_user(self) -> None:
        session = self._provider.session
        if not session.is_loaded:
            return

        self._generation += 1
        generation = self._generation

        if not session.is_signed_in:
            self._state = SyncState()
            log.debug("session_sync_signed_out", generation=generation)
            return

        self._state = replace(self._state, is_loading=True, error=None)
        payload = SyncUserRequest(
            clerk_id=session.external_id or "",
            email=session.primary_email,
            first_name=session.first_name,
            last_name=session.last_name,
        )
        try:
            user = await self._users.sync(payload)
        except (ApiError, ValidationError) as exc:
            log.error("session_sync_failed", external_id=payload.clerk_id, error=str(exc))
            if generation == self._generation:
                self._state = replace(self._state, error=SYNC_FAILED)
        else:
            if generation == self._generation:
                self._state = replace(self._state, user=user, error=None)
                log.info("session_sync_complete", user_id=user.id, role=user.role)
            else:
                log.debug("session_sync_superseded", generation=generation, latest=self._generation)
        finally:
            if generation == self._generation:
                self._state = replace(self._state, is_loading=False)

    async def sign_out(self) -> None:
        """Ask the provider to end the session. Never raises."""
        try:
            await self._provider.sign_out()
        except Exception as exc:
            log.error("sign_out_failed", error=str(exc))
            self._state = replace(self._state, error=SIGN_OUT_FAILED)

    async def settle(self) -> None:
        """Wait for every scheduled sync to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*list(self._tasks), return_exceptions=True)
        self._tasks.clear()
