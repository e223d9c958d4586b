"""Members resource client."""

from __future__ import annotations

from shepherd.api.client import ApiClient
from shepherd.api.schemas import Member, MemberCount, MemberFields, MemberUpdate, PaginatedMembers


class MembersApi:
    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def list(self, skip: int = 0, take: int = 50) -> PaginatedMembers:
        data = await self._client.get("/members", params={"skip": skip, "take": take})
        return _as_page(data, skip, take)

    async def get(self, member_id: str) -> Member:
        data = await self._client.get(f"/members/{member_id}")
        return Member.model_validate(data)

    async def create(self, member: MemberFields) -> Member:
        data = await self._client.post("/members", json=member.to_wire(exclude_none=True))
        return Member.model_validate(data)

    async def update(self, member_id: str, changes: MemberUpdate) -> Member:
        data = await self._client.put(f"/members/{member_id}", json=changes.to_wire(exclude_unset=True))
        return Member.model_validate(data)

    async def delete(self, member_id: str) -> None:
        await self._client.delete(f"/members/{member_id}")

    async def count(self) -> MemberCount:
        """Total members plus the previous period's count for comparison."""
        data = await self._client.get("/members/count")
        return MemberCount.model_validate(data)

    async def search(self, query: str, skip: int = 0, take: int = 50) -> PaginatedMembers:
        """Search members by name, email, phone, or member number.

        The backend has no search endpoint, so this lists a page and filters
        it locally, case-insensitively. Relevance order is the backend's
        listing order.
        """
        page = await self.list(skip=skip, take=take)
        matched = [m for m in page.data if m.matches(query)]
        return PaginatedMembers(data=matched, total=len(matched), skip=skip, take=take)


def _as_page(data: object, skip: int, take: int) -> PaginatedMembers:
    # /members answers with either a bare list or a paginated envelope
    if isinstance(data, list):
        return PaginatedMembers(data=data, total=len(data), skip=skip, take=take)
    if data is None:
        return PaginatedMembers(skip=skip, take=take)
    return PaginatedMembers.model_validate(data)
