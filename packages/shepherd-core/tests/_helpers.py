"""Shared test helpers - importable from test modules."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

from shepherd.api.client import ApiError
from shepherd.api.schemas import AppUser, Member, Notification, PaginatedMembers, SyncUserRequest
from shepherd.notifications.channel import ChannelError


async def eventually(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
    """Poll ``predicate`` on the event loop until it holds or ``timeout`` passes."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(0.005)


def make_user(user_id: str = "u1", role: str = "admin") -> AppUser:
    return AppUser(id=user_id, email=f"{user_id}@example.org", first_name="Grace", last_name="Hopper", role=role)


def make_member(member_id: str, first: str, last: str, number: str | None = None) -> Member:
    return Member(id=member_id, first_name=first, last_name=last, member_number=number)


def make_notification(nid: str, is_read: bool = False, user_id: str = "user_a") -> Notification:
    return Notification(id=nid, user_id=user_id, title=f"title {nid}", message="m", type="info", is_read=is_read)


class ControlledUsersApi:
    """UsersApi stand-in whose calls settle only when the test says so."""

    def __init__(self) -> None:
        self.calls: list[SyncUserRequest] = []
        self._pending: list[asyncio.Future[AppUser]] = []

    async def sync(self, payload: SyncUserRequest) -> AppUser:
        future: asyncio.Future[AppUser] = asyncio.get_running_loop().create_future()
        self.calls.append(payload)
        self._pending.append(future)
        return await future

    def resolve(self, index: int, user: AppUser) -> None:
        self._pending[index].set_result(user)

    def fail(self, index: int, exc: Exception) -> None:
        self._pending[index].set_exception(exc)


class ControlledSearchBackend:
    """Member search backend with per-query release gates."""

    def __init__(self, results: dict[str, list[Member]] | None = None) -> None:
        self.results = results or {}
        self.calls: list[tuple[str, int, int]] = []
        self.gates: dict[str, asyncio.Event] = {}
        self.errors: dict[str, Exception] = {}

    def hold(self, query: str) -> asyncio.Event:
        gate = asyncio.Event()
        self.gates[query] = gate
        return gate

    async def search(self, query: str, skip: int = 0, take: int = 50) -> PaginatedMembers:
        self.calls.append((query, skip, take))
        gate = self.gates.get(query)
        if gate is not None:
            await gate.wait()
        if query in self.errors:
            raise self.errors[query]
        data = self.results.get(query, [])
        return PaginatedMembers(data=data, total=len(data), skip=skip, take=take)


class FakeTransport:
    """In-memory push transport driven by the test."""

    def __init__(self, name: str, journal: list[tuple[str, str]], fail_connect: bool = False) -> None:
        self.name = name
        self.journal = journal
        self.fail_connect = fail_connect
        self.connected = False
        self.closed = False
        self.emitted: list[tuple[str, Any]] = []
        self._queue: asyncio.Queue[tuple[str, Any] | None] = asyncio.Queue()

    async def connect(self) -> None:
        if self.fail_connect:
            self.journal.append(("refused", self.name))
            raise ChannelError("connection refused")
        self.journal.append(("open", self.name))
        self.connected = True

    async def emit(self, event: str, data: Any) -> None:
        self.emitted.append((event, data))

    async def events(self):
        while True:
            item = await self._queue.get()
            if item is None:
                return
            yield item

    def push(self, event: str, data: Any) -> None:
        self._queue.put_nowait((event, data))

    def drop(self) -> None:
        self._queue.put_nowait(None)

    async def close(self) -> None:
        if not self.closed:
            self.journal.append(("close", self.name))
        self.closed = True
        self.connected = False


class TransportRecorder:
    """Transport factory that remembers every transport it built."""

    def __init__(self, fail_first: int = 0) -> None:
        self.journal: list[tuple[str, str]] = []
        self.created: list[FakeTransport] = []
        self._fail_first = fail_first

    def __call__(self) -> FakeTransport:
        index = len(self.created)
        transport = FakeTransport(f"t{index}", self.journal, fail_connect=index < self._fail_first)
        self.created.append(transport)
        return transport

    @property
    def live(self) -> list[FakeTransport]:
        return [t for t in self.created if t.connected and not t.closed]


class FakeNotificationsApi:
    """In-memory notifications backend."""

    def __init__(self, items: list[Notification] | None = None) -> None:
        self.items = list(items or [])
        self.fetch_gate: asyncio.Event | None = None
        self.fail_writes = False
        self.fetches: list[str] = []
        self.read_calls: list[str] = []
        self.read_all_calls: list[str] = []

    async def get_all(self, user_id: str) -> list[Notification]:
        self.fetches.append(user_id)
        if self.fetch_gate is not None:
            await self.fetch_gate.wait()
        return [n.model_copy() for n in self.items]

    async def mark_as_read(self, notification_id: str) -> Notification | None:
        self.read_calls.append(notification_id)
        if self.fail_writes:
            raise ApiError("boom", status_code=500)
        return None

    async def mark_all_as_read(self, user_id: str):
        self.read_all_calls.append(user_id)
        if self.fail_writes:
            raise ApiError("boom", status_code=500)
        return None
