"""Pydantic schemas for Salon API."""

from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from api.v1.schemas.common import CamelModel
from domain.entities.salon import SalonStatus


def _normalize_email(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip().lower()
    if "@" not in v or "." not in v.split("@")[-1]:
        raise ValueError("Invalid email address")
    return v


class SalonAddress(CamelModel):
    """Street address and optional coordinates of a salon."""

    street: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=255)
    state: str = Field(..., min_length=1, max_length=255)
    zip_code: str = Field(..., min_length=1, max_length=20)
    country: Optional[str] = Field(None, max_length=100)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


class _SalonExtras(CamelModel):
    phone_number: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = Field(None, min_length=3, max_length=255)
    website: Optional[str] = Field(None, max_length=2048)
    image_urls: Optional[List[str]] = None
    status: Optional[SalonStatus] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        """Basic email validation."""
        return _normalize_email(v)

    def extras(self) -> dict[str, Any]:
        return {
            name: getattr(self, name)
            for name in ("phone_number", "email", "website", "image_urls", "status")
            if getattr(self, name) is not None
        }


class SalonCreate(_SalonExtras):
    """Schema for creating a salon."""

    model_config = ConfigDict(
        alias_generator=CamelModel.model_config["alias_generator"],
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "name": "Clip & Curl",
                "address": {
                    "street": "1 Main St",
                    "city": "Springfield",
                    "state": "IL",
                    "zipCode": "62701",
                },
                "description": "Neighbourhood salon",
                "ownerEmail": "owner@example.com",
            }
        },
    )

    name: str = Field(..., min_length=1, max_length=255)
    address: SalonAddress
    description: str = Field(..., min_length=1, max_length=5000)
    owner_email: str = Field(..., min_length=3, max_length=255)

    @field_validator("owner_email")
    @classmethod
    def validate_owner_email(cls, v: str) -> str:
        return _normalize_email(v)


class SalonUpdate(_SalonExtras):
    """Schema for updating a salon. ``ownerEmail`` transfers ownership."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    address: Optional[SalonAddress] = None
    description: Optional[str] = Field(None, min_length=1, max_length=5000)
    owner_email: Optional[str] = Field(None, min_length=3, max_length=255)

    @field_validator("owner_email")
    @classmethod
    def validate_owner_email(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_email(v)

    def to_fields(self) -> dict[str, Any]:
        """Plain salon fields that were provided."""
        values = self.extras()
        if self.name is not None:
            values["name"] = self.name
        if self.description is not None:
            values["description"] = self.description
        if self.address is not None:
            values["address"] = self.address.model_dump(exclude_none=True)
        return values


class SalonCreatedResponse(BaseModel):
    """Acknowledgement of a salon creation."""

    id: UUID
    message: str
