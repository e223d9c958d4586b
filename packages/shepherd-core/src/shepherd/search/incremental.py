"""Debounced type-ahead search with stale-response rejection."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Protocol

import structlog
from pydantic import ValidationError

from shepherd.api.client import ApiError
from shepherd.api.schemas import Member, PaginatedMembers

log = structlog.get_logger(__name__)

DEFAULT_DEBOUNCE = 0.3
DEFAULT_LIMIT = 10


class MemberSearchBackend(Protocol):
    async def search(self, query: str, skip: int = 0, take: int = 50) -> PaginatedMembers: ...


class MemberSearch:
    """Type-ahead member look-up for a single input field.

    ``set_query`` is called on every keystroke. A request goes out only once
    the text has been unchanged for the quiet period, and each request is
    tagged with a sequence number. A response is applied only if it belongs
    to the newest request and its query still equals the live text, so a
    slow answer for an older query never replaces a newer one. Superseded
    requests are not aborted; their results are simply discarded.
    """

    def __init__(
        self,
        backend: MemberSearchBackend,
        on_select: Callable[[Member], None] | None = None,
        debounce: float = DEFAULT_DEBOUNCE,
        limit: int = DEFAULT_LIMIT,
        default_query: str = "",
    ) -> None:
        self._backend = backend
        self._on_select = on_select
        self._debounce = debounce
        self._limit = limit

        self.query = default_query
        self.results: list[Member] = []
        self.is_loading = False
        self.is_open = False

        self._seq = 0
        self._timer: asyncio.Task[None] | None = None
        self._inflight: set[asyncio.Task[None]] = set()

    def set_query(self, text: str) -> None:
        self.query = text
        self.is_open = True
        self._cancel_timer()

        if not text.strip():
            # nothing to look up; also invalidates any request still in flight
            self._seq += 1
            self.results = []
            self.is_loading = False
            return

        self._timer = asyncio.create_task(self._wait_quiet(text), name="member-search-debounce")

    def select(self, member: Member) -> None:
        """Accept a candidate: fill the field, close the list, notify the owner."""
        self._cancel_timer()
        self._seq += 1
        self.query = member.full_name
        self.is_open = False
        self.is_loading = False
        if self._on_select is not None:
            self._on_select(member)

    @property
    def candidates(self) -> list[str]:
        """Row labels for the visible result list (empty while closed)."""
        if not self.is_open:
            return []
        return [m.display_label for m in self.results]

    async def _wait_quiet(self, query: str) -> None:
        await asyncio.sleep(self._debounce)
        self._timer = None
        task = asyncio.create_task(self._run(query), name="member-search-request")
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _run(self, query: str) -> None:
        self._seq += 1
        seq = self._seq
        self.is_loading = True
        try:
            page = await self._backend.search(query, skip=0, take=self._limit)
        except (ApiError, ValidationError) as exc:
            log.warning("member_search_failed", query=query, error=str(exc))
        else:
            if seq == self._seq and query == self.query:
                self.results = list(page.data[: self._limit])
                log.debug("member_search_applied", query=query, count=len(self.results))
            else:
                log.debug("member_search_stale", query=query, live_query=self.query)
        finally:
            if seq == self._seq:
                self.is_loading = False

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def wait_idle(self) -> None:
        """Wait until no quiet period is pending and no request is in flight."""
        while self._timer is not None or self._inflight:
            pending = [*self._inflight]
            if self._timer is not None:
                pending.append(self._timer)
            await asyncio.gather(*pending, return_exceptions=True)

    async def aclose(self) -> None:
        self._cancel_timer()
        for task in list(self._inflight):
            task.cancel()
        await asyncio.gather(*list(self._inflight), return_exceptions=True)
        self._inflight.clear()
