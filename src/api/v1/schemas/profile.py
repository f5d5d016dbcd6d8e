"""Pydantic schemas for Profile API."""

from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from api.v1.schemas.common import CamelModel, to_wire_timestamp
from domain.entities.profile import Address, AssociatedSalon, DirectoryEntry, Profile, SalonJobRole


class AddressSchema(CamelModel):
    """Postal address of a profile."""

    street: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=255)
    state: Optional[str] = Field(None, max_length=255)
    zip_code: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, max_length=100)


class AssociatedSalonSchema(CamelModel):
    """Salon an account works at."""

    salon_id: UUID
    role: SalonJobRole
    start_date: datetime
    end_date: Optional[datetime] = None

    @field_serializer("start_date", "end_date")
    def _serialize_dates(self, value: Optional[datetime]) -> Optional[str]:
        return to_wire_timestamp(value)


class ProfileResponse(CamelModel):
    """Schema for Profile response. Timestamps are ISO strings."""

    model_config = ConfigDict(
        alias_generator=CamelModel.model_config["alias_generator"],
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "email": "jane@example.com",
                "displayName": "Jane",
                "photoURL": None,
                "phoneNumber": None,
                "role": "customer",
                "createdAt": "2026-02-01T10:00:00.000Z",
                "lastLoginAt": "2026-02-01T10:00:00.000Z",
                "updatedAt": None,
                "ownedSalons": [],
                "associatedSalons": [],
                "favoriteSalons": [],
                "address": None,
            }
        },
    )

    id: UUID
    email: Optional[str]
    display_name: Optional[str]
    photo_url: Optional[str] = Field(None, alias="photoURL")
    phone_number: Optional[str] = None
    role: str
    created_at: datetime
    last_login_at: datetime
    updated_at: Optional[datetime] = None
    owned_salons: List[UUID] = Field(default_factory=list)
    associated_salons: List[AssociatedSalonSchema] = Field(default_factory=list)
    favorite_salons: List[UUID] = Field(default_factory=list)
    address: Optional[AddressSchema] = None

    @field_serializer("created_at", "last_login_at", "updated_at")
    def _serialize_timestamps(self, value: Optional[datetime]) -> Optional[str]:
        return to_wire_timestamp(value)

    @classmethod
    def from_entity(cls, profile: Profile) -> "ProfileResponse":
        """Build a response from a domain Profile."""
        return cls(
            id=profile.id,
            email=profile.email,
            display_name=profile.display_name,
            photo_url=profile.photo_url,
            phone_number=profile.phone_number,
            role=profile.role.value,
            created_at=profile.created_at,
            last_login_at=profile.last_login_at or profile.created_at,
            updated_at=profile.updated_at,
            owned_salons=profile.owned_salons,
            associated_salons=[
                AssociatedSalonSchema(
                    salon_id=a.salon_id,
                    role=a.role,
                    start_date=a.start_date,
                    end_date=a.end_date,
                )
                for a in profile.associated_salons
            ],
            favorite_salons=profile.favorite_salons,
            address=(
                AddressSchema(
                    street=profile.address.street,
                    city=profile.address.city,
                    state=profile.address.state,
                    zip_code=profile.address.zip_code,
                    country=profile.address.country,
                )
                if profile.address
                else None
            ),
        )


class ProfileDetailResponse(BaseModel):
    """Schema for single Profile response (``data`` is null when absent)."""

    data: Optional[ProfileResponse]


class ProfileListResponse(BaseModel):
    """Schema for list of Profiles response."""

    data: List[ProfileResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class ProfileUpdate(CamelModel):
    """Partial profile update. ``targetUid`` selects another account (admin only)."""

    model_config = ConfigDict(
        alias_generator=CamelModel.model_config["alias_generator"],
        populate_by_name=True,
        extra="forbid",
    )

    target_uid: Optional[UUID] = None
    email: Optional[str] = Field(None, max_length=255)
    display_name: Optional[str] = Field(None, max_length=255)
    # Validated by ProfileService
    photo_url: Any = Field(None, alias="photoURL")
    phone_number: Optional[str] = Field(None, max_length=50)
    role: Optional[str] = None
    owned_salons: Optional[List[UUID]] = None
    associated_salons: Optional[List[AssociatedSalonSchema]] = None
    favorite_salons: Optional[List[UUID]] = None
    address: Optional[AddressSchema] = None

    def to_patch(self) -> dict[str, Any]:
        """Return only the fields the client sent, as domain values."""
        patch: dict[str, Any] = {}
        for name in self.model_fields_set - {"target_uid"}:
            value = getattr(self, name)
            if name == "associated_salons" and value is not None:
                value = [
                    AssociatedSalon(
                        salon_id=a.salon_id,
                        role=a.role,
                        start_date=a.start_date,
                        end_date=a.end_date,
                    )
                    for a in value
                ]
            elif name == "address" and value is not None:
                value = Address(**value.model_dump())
            patch[name] = value
        return patch


class UpdateProfileResponse(BaseModel):
    """Acknowledgement of a profile update."""

    success: bool
    message: str


class DirectoryEntryResponse(CamelModel):
    """Email search hit."""

    id: UUID
    email: Optional[str]
    display_name: Optional[str]

    @classmethod
    def from_entity(cls, entry: DirectoryEntry) -> "DirectoryEntryResponse":
        return cls(id=entry.id, email=entry.email, display_name=entry.display_name)


class DirectoryEntryListResponse(BaseModel):
    """Schema for list of email search hits."""

    data: List[DirectoryEntryResponse]
    meta: dict[str, Any] = Field(default_factory=dict)
