"""Salon repository protocol."""

from typing import Any, Protocol
from uuid import UUID

from domain.entities.salon import Salon


class ISalonRepository(Protocol):
    """Repository interface for Salon entities."""

    async def get(self, id: UUID) -> Salon | None:
        """Get a salon by ID."""
        ...

    async def create(self, salon: Salon) -> Salon:
        """Create a new salon."""
        ...

    async def update(self, id: UUID, fields: dict[str, Any]) -> Salon:
        """Patch fields of an existing salon.

        Raises:
            SalonNotFoundError: If the salon does not exist
        """
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a salon and return success status."""
        ...
