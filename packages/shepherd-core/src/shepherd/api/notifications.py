"""Notifications resource client."""

from __future__ import annotations

from shepherd.api.client import ApiClient
from shepherd.api.schemas import MarkAllReadResponse, Notification


class NotificationsApi:
    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def get_all(self, user_id: str) -> list[Notification]:
        data = await self._client.get(f"/notifications/{user_id}")
        return [Notification.model_validate(item) for item in data or []]

    async def mark_as_read(self, notification_id: str) -> Notification | None:
        data = await self._client.patch(f"/notifications/{notification_id}/read")
        return Notification.model_validate(data) if data else None

    async def mark_all_as_read(self, user_id: str) -> MarkAllReadResponse:
        data = await self._client.patch(f"/notifications/user/{user_id}/read-all")
        return MarkAllReadResponse.model_validate(data or {})
