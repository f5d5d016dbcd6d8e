"""SQLAlchemy ORM models."""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import JSON, CheckConstraint, DateTime, Index, String, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONDocument = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class ProfileModel(Base):
    """Per-account profile document, scoped by application id."""

    __tablename__ = "profiles"
    __table_args__ = (
        CheckConstraint(
            "role IN ('customer', 'salon_owner', 'admin')",
            name="ck_profiles_role",
        ),
        Index("ix_profiles_app_email", "app_id", "email"),
    )

    app_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    email: Mapped[str | None] = mapped_column(String(255))
    display_name: Mapped[str | None] = mapped_column(String(255))
    photo_url: Mapped[str | None] = mapped_column(String(2048))
    phone_number: Mapped[str | None] = mapped_column(String(50))
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="customer")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    last_login_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime)
    owned_salons: Mapped[list[str]] = mapped_column(JSONDocument, nullable=False, default=list)
    associated_salons: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONDocument, nullable=False, default=list
    )
    favorite_salons: Mapped[list[str]] = mapped_column(JSONDocument, nullable=False, default=list)
    address: Mapped[dict[str, Any] | None] = mapped_column(JSONDocument)


class SalonModel(Base):
    """Salon listing, scoped by application id."""

    __tablename__ = "salons"
    __table_args__ = (
        CheckConstraint(
            "status IN ('active', 'inactive', 'pending_approval', 'suspended')",
            name="ck_salons_status",
        ),
        Index("ix_salons_app_owner", "app_id", "owner_id"),
    )

    app_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    address: Mapped[dict[str, Any]] = mapped_column(JSONDocument, nullable=False)
    owner_id: Mapped[UUID | None] = mapped_column(Uuid)
    phone_number: Mapped[str | None] = mapped_column(String(50))
    email: Mapped[str | None] = mapped_column(String(255))
    website: Mapped[str | None] = mapped_column(String(2048))
    image_urls: Mapped[list[str]] = mapped_column(JSONDocument, nullable=False, default=list)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
