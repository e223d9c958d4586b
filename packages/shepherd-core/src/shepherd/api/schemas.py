"""Pydantic models for backend wire payloads.

The backend speaks camelCase JSON; models expose snake_case attributes and
accept either spelling on input.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_wire(self, **kwargs: Any) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, **kwargs)


class UserRole(str, Enum):
    """Known roles. The backend owns the set, so unknown values are kept as strings."""
    ADMIN = "admin"
    STAFF = "staff"
    VIEWER = "viewer"


class AppUser(WireModel):
    id: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    role: str = UserRole.VIEWER.value
    is_active: bool = True


class SyncUserRequest(WireModel):
    clerk_id: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""


class Gender(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"
    PREFER_NOT_TO_SAY = "PREFER_NOT_TO_SAY"


class MaritalStatus(str, Enum):
    SINGLE = "SINGLE"
    MARRIED = "MARRIED"
    DIVORCED = "DIVORCED"
    WIDOWED = "WIDOWED"
    SEPARATED = "SEPARATED"
    OTHER = "OTHER"


class MembershipStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    PENDING = "PENDING"


class MemberFields(WireModel):
    first_name: str = ""
    last_name: str = ""
    email: str | None = None
    phone: str | None = None
    member_number: str | None = None
    date_of_birth: str | None = None
    gender: Gender | None = None
    marital_status: MaritalStatus | None = None
    membership_status: MembershipStatus | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    postal_code: str | None = None
    join_date: str | None = None
    baptized: bool | None = None
    baptism_date: str | None = None
    occupation: str | None = None
    emergency_contact: str | None = None
    emergency_phone: str | None = None
    notes: str | None = None


class Member(MemberFields):
    id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    created_by_id: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def display_label(self) -> str:
        """Row label for a search candidate: name plus the first known identifier."""
        detail = self.member_number or self.email or self.phone
        return f"{self.full_name} — {detail}" if detail else self.full_name

    def matches(self, query: str) -> bool:
        q = query.lower()
        return any(
            q in (value or "").lower()
            for value in (self.full_name, self.email, self.phone, self.member_number)
        )


class MemberUpdate(MemberFields):
    """Partial update; only fields explicitly set are sent."""


class Page(WireModel, Generic[T]):
    data: list[T] = Field(default_factory=list)
    total: int = 0
    skip: int = 0
    take: int = 0


PaginatedMembers = Page[Member]


class MemberCount(WireModel):
    count: int
    previous_count: int = 0


class Notification(WireModel):
    id: str
    user_id: str = ""
    title: str = ""
    message: str = ""
    type: str = ""
    is_read: bool = False
    link: str | None = None
    metadata: dict[str, Any] | None = None
    created_at: datetime | None = None
    read_at: datetime | None = None


class MarkAllReadResponse(WireModel):
    count: int = 0


class ChurchSettings(WireModel):
    id: str
    church_name: str = ""
    pastor_name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    email_notifications: bool = True
    maintenance_mode: bool = False
    timezone: str = "UTC"
    currency: str = "USD"
    date_format: str = "YYYY-MM-DD"
    time_format: str = "HH:mm"
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SettingsUpdate(WireModel):
    church_name: str | None = None
    pastor_name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    email_notifications: bool | None = None
    maintenance_mode: bool | None = None
    timezone: str | None = None
    currency: str | None = None
    date_format: str | None = None
    time_format: str | None = None
