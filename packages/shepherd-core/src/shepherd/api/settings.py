"""Church settings resource client."""

from __future__ import annotations

from shepherd.api.client import ApiClient
from shepherd.api.schemas import ChurchSettings, SettingsUpdate


class SettingsApi:
    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def get(self) -> ChurchSettings:
        data = await self._client.get("/settings")
        return ChurchSettings.model_validate(data)

    async def update(self, changes: SettingsUpdate) -> ChurchSettings:
        data = await self._client.post("/settings", json=changes.to_wire(exclude_unset=True))
        return ChurchSettings.model_validate(data)
