"""Salon domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any
from uuid import UUID, uuid4


class SalonStatus(StrEnum):
    """Listing status of a salon."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING_APPROVAL = "pending_approval"
    SUSPENDED = "suspended"


# Plain fields an admin may set on a salon; ownership goes through assign_owner
SALON_PLAIN_FIELDS = frozenset(
    {
        "name",
        "description",
        "address",
        "phone_number",
        "email",
        "website",
        "image_urls",
        "status",
    }
)


@dataclass
class Salon:
    """Domain entity for a salon listing."""

    name: str
    description: str
    address: dict[str, Any]
    id: UUID = field(default_factory=uuid4)
    owner_id: UUID | None = None
    phone_number: str | None = None
    email: str | None = None
    website: str | None = None
    image_urls: list[str] = field(default_factory=list)
    status: SalonStatus = SalonStatus.ACTIVE
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at
