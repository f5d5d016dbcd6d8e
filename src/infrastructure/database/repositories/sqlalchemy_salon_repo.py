"""SQLAlchemy implementation of Salon repository."""

from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import SalonNotFoundError
from domain.entities.salon import Salon, SalonStatus
from infrastructure.database.models import SalonModel


class SQLAlchemySalonRepository:
    """SQLAlchemy implementation of ISalonRepository."""

    def __init__(self, session: AsyncSession, app_id: str) -> None:
        self._session = session
        self._app_id = app_id

    async def get(self, id: UUID) -> Salon | None:
        """Get a salon by ID."""
        model = await self._get_model(id)
        return self._to_entity(model) if model else None

    async def create(self, salon: Salon) -> Salon:
        """Create a new salon."""
        model = self._to_model(salon)
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def update(self, id: UUID, fields: dict[str, Any]) -> Salon:
        """Patch an existing salon."""
        model = await self._get_model(id)
        if not model:
            raise SalonNotFoundError(str(id))

        for column, value in fields.items():
            if column == "status":
                value = SalonStatus(value).value
            setattr(model, column, value)

        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete a salon."""
        model = await self._get_model(id)
        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    async def _get_model(self, id: UUID) -> SalonModel | None:
        stmt = select(SalonModel).where(
            SalonModel.app_id == self._app_id,
            SalonModel.id == id,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _to_entity(self, model: SalonModel) -> Salon:
        """Convert ORM model to domain entity."""
        return Salon(
            id=model.id,
            name=model.name,
            description=model.description,
            address=model.address,
            owner_id=model.owner_id,
            phone_number=model.phone_number,
            email=model.email,
            website=model.website,
            image_urls=list(model.image_urls or []),
            status=SalonStatus(model.status),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Salon) -> SalonModel:
        """Convert domain entity to ORM model."""
        return SalonModel(
            app_id=self._app_id,
            id=entity.id,
            name=entity.name,
            description=entity.description,
            address=entity.address,
            owner_id=entity.owner_id,
            phone_number=entity.phone_number,
            email=entity.email,
            website=entity.website,
            image_urls=entity.image_urls,
            status=entity.status.value,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
