"""Backend user reconciliation endpoint."""

from __future__ import annotations

from shepherd.api.client import ApiClient
from shepherd.api.schemas import AppUser, SyncUserRequest


class UsersApi:
    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def sync(self, payload: SyncUserRequest) -> AppUser:
        """Create or refresh the backend record for an identity-provider user."""
        data = await self._client.post("/users/sync", json=payload.to_wire())
        return AppUser.model_validate(data)
