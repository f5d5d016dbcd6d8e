"""Profile domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class UserRole(StrEnum):
    """Marketplace-wide account roles.

    ``salon_owner`` is granted as a side effect of salon ownership transfer;
    only ``admin`` passes the access guard.
    """

    CUSTOMER = "customer"
    SALON_OWNER = "salon_owner"
    ADMIN = "admin"


ROLE_RANK: dict[UserRole, int] = {
    UserRole.CUSTOMER: 10,
    UserRole.SALON_OWNER: 20,
    UserRole.ADMIN: 30,
}


def has_privilege(role: UserRole, required: UserRole) -> bool:
    """Check if a role is at least as privileged as the required one."""
    return ROLE_RANK[role] >= ROLE_RANK[required]


class SalonJobRole(StrEnum):
    """Role an account holds at a salon it works for."""

    STYLIST = "stylist"
    MANAGER = "manager"
    RECEPTIONIST = "receptionist"
    OTHER = "other"


@dataclass
class AssociatedSalon:
    """Employment-style link between an account and a salon."""

    salon_id: UUID
    role: SalonJobRole
    start_date: datetime
    end_date: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.end_date is None


@dataclass
class Address:
    """Postal address attached to a profile."""

    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None


@dataclass
class Profile:
    """Per-account record holding role and relationship state.

    ``created_at`` is written once. ``last_login_at`` is refreshed on every
    login and ``updated_at`` stays ``None`` until the first mutation.
    """

    id: UUID
    email: str | None = None
    display_name: str | None = None
    photo_url: str | None = None
    phone_number: str | None = None
    role: UserRole = UserRole.CUSTOMER
    created_at: datetime = field(default_factory=datetime.utcnow)
    last_login_at: datetime | None = None
    updated_at: datetime | None = None
    owned_salons: list[UUID] = field(default_factory=list)
    associated_salons: list[AssociatedSalon] = field(default_factory=list)
    favorite_salons: list[UUID] = field(default_factory=list)
    address: Address | None = None

    def __post_init__(self) -> None:
        """A profile has logged in no earlier than it was created."""
        if self.last_login_at is None or self.last_login_at < self.created_at:
            self.last_login_at = self.created_at

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


@dataclass
class DirectoryEntry:
    """Minimal projection of a profile returned by email search."""

    id: UUID
    email: str | None
    display_name: str | None


# Fields a profile patch may never carry
IMMUTABLE_PROFILE_FIELDS = frozenset({"id", "created_at", "last_login_at", "updated_at"})

# Fields a profile patch may carry
MUTABLE_PROFILE_FIELDS = frozenset(
    {
        "email",
        "display_name",
        "photo_url",
        "phone_number",
        "role",
        "owned_salons",
        "associated_salons",
        "favorite_salons",
        "address",
    }
)
