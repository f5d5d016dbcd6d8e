"""SQLAlchemy implementation of Profile repository."""

from dataclasses import asdict
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import ProfileAlreadyExistsError, ProfileNotFoundError
from domain.entities.profile import (
    Address,
    AssociatedSalon,
    Profile,
    SalonJobRole,
    UserRole,
)
from infrastructure.database.models import ProfileModel

# Dialects with INSERT ... ON CONFLICT support
_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession, app_id: str) -> None:
        self._session = session
        self._app_id = app_id

    async def get(self, id: UUID) -> Profile | None:
        """Get a profile by account ID."""
        model = await self._get_model(id)
        return self._to_entity(model) if model else None

    async def create(self, profile: Profile) -> Profile:
        """Insert a profile, failing if one already exists for its ID."""
        model = ProfileModel(app_id=self._app_id, **self._to_columns(self._entity_fields(profile)))
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as exc:
            orig = str(exc.orig).lower() if exc.orig else ""
            if "unique" in orig or "duplicate" in orig:
                raise ProfileAlreadyExistsError(str(profile.id)) from exc
            raise
        return self._to_entity(model)

    async def update(self, id: UUID, fields: dict[str, Any]) -> Profile:
        """Patch an existing profile."""
        model = await self._get_model(id)
        if not model:
            raise ProfileNotFoundError(str(id))

        for column, value in self._to_columns(fields).items():
            setattr(model, column, value)

        await self._session.flush()
        return self._to_entity(model)

    async def merge_create(
        self,
        id: UUID,
        patch: dict[str, Any],
        defaults: dict[str, Any] | None = None,
    ) -> Profile:
        """Upsert in a single statement so concurrent writers cannot both create."""
        now = datetime.utcnow()
        values: dict[str, Any] = {
            "role": UserRole.CUSTOMER.value,
            "created_at": now,
            "last_login_at": now,
            "owned_salons": [],
            "associated_salons": [],
            "favorite_salons": [],
        }
        values.update(self._to_columns(defaults or {}))
        patch_columns = self._to_columns(patch)
        values.update(patch_columns)
        values.update({"app_id": self._app_id, "id": id})

        dialect = self._session.get_bind().dialect.name
        insert = _UPSERT_INSERTS.get(dialect)
        if insert is None:
            return await self._merge_create_fallback(id, patch, values)

        stmt = insert(ProfileModel).values(**values)
        conflict_target = [ProfileModel.app_id, ProfileModel.id]
        if patch_columns:
            stmt = stmt.on_conflict_do_update(index_elements=conflict_target, set_=patch_columns)
        else:
            stmt = stmt.on_conflict_do_nothing(index_elements=conflict_target)
        await self._session.execute(stmt)

        model = await self._get_model(id, refresh=True)
        if not model:
            raise ProfileNotFoundError(str(id))
        return self._to_entity(model)

    async def scan_email_range(self, lo: str, hi: str, limit: int) -> list[Profile]:
        """Range scan over email, index-ordered."""
        stmt = (
            select(ProfileModel)
            .where(
                ProfileModel.app_id == self._app_id,
                ProfileModel.email >= lo,
                ProfileModel.email < hi,
                ProfileModel.email.startswith(lo, autoescape=True),
            )
            .order_by(ProfileModel.email)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def list_all(self) -> list[Profile]:
        """Get every profile for this application."""
        stmt = (
            select(ProfileModel)
            .where(ProfileModel.app_id == self._app_id)
            .order_by(ProfileModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    # --- Internal helpers ---

    async def _get_model(self, id: UUID, refresh: bool = False) -> ProfileModel | None:
        stmt = select(ProfileModel).where(
            ProfileModel.app_id == self._app_id,
            ProfileModel.id == id,
        )
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def _merge_create_fallback(
        self, id: UUID, patch: dict[str, Any], values: dict[str, Any]
    ) -> Profile:
        """Read-then-write upsert for dialects without ON CONFLICT."""
        model = await self._get_model(id)
        if model is None:
            model = ProfileModel(**values)
            self._session.add(model)
        else:
            for column, value in self._to_columns(patch).items():
                setattr(model, column, value)
        await self._session.flush()
        return self._to_entity(model)

    @staticmethod
    def _entity_fields(profile: Profile) -> dict[str, Any]:
        return {
            "id": profile.id,
            "email": profile.email,
            "display_name": profile.display_name,
            "photo_url": profile.photo_url,
            "phone_number": profile.phone_number,
            "role": profile.role,
            "created_at": profile.created_at,
            "last_login_at": profile.last_login_at,
            "updated_at": profile.updated_at,
            "owned_salons": profile.owned_salons,
            "associated_salons": profile.associated_salons,
            "favorite_salons": profile.favorite_salons,
            "address": profile.address,
        }

    @staticmethod
    def _to_columns(fields: dict[str, Any]) -> dict[str, Any]:
        """Convert domain values to their column representation."""
        columns: dict[str, Any] = {}
        for key, value in fields.items():
            if key == "role":
                value = UserRole(value).value
            elif key in ("owned_salons", "favorite_salons"):
                value = [str(salon_id) for salon_id in value or []]
            elif key == "associated_salons":
                value = [
                    {
                        "salon_id": str(a.salon_id),
                        "role": SalonJobRole(a.role).value,
                        "start_date": a.start_date.isoformat(),
                        "end_date": a.end_date.isoformat() if a.end_date else None,
                    }
                    for a in value or []
                ]
            elif key == "address" and isinstance(value, Address):
                value = asdict(value)
            columns[key] = value
        return columns

    def _to_entity(self, model: ProfileModel) -> Profile:
        """Convert ORM model to domain entity."""
        return Profile(
            id=model.id,
            email=model.email,
            display_name=model.display_name,
            photo_url=model.photo_url,
            phone_number=model.phone_number,
            role=UserRole(model.role),
            created_at=model.created_at,
            last_login_at=model.last_login_at,
            updated_at=model.updated_at,
            owned_salons=[UUID(s) for s in model.owned_salons or []],
            associated_salons=[
                AssociatedSalon(
                    salon_id=UUID(a["salon_id"]),
                    role=SalonJobRole(a["role"]),
                    start_date=datetime.fromisoformat(a["start_date"]),
                    end_date=datetime.fromisoformat(a["end_date"]) if a.get("end_date") else None,
                )
                for a in model.associated_salons or []
            ],
            favorite_salons=[UUID(s) for s in model.favorite_salons or []],
            address=Address(**model.address) if model.address else None,
        )
