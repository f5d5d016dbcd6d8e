"""Profile repository protocol."""

from typing import Any, Protocol
from uuid import UUID

from domain.entities.profile import Profile


class IProfileRepository(Protocol):
    """Key-addressed store for Profile documents."""

    async def get(self, id: UUID) -> Profile | None:
        """Get a profile by account ID."""
        ...

    async def create(self, profile: Profile) -> Profile:
        """Create a profile only if none exists for its ID.

        Raises:
            ProfileAlreadyExistsError: If a profile with that ID already exists
        """
        ...

    async def update(self, id: UUID, fields: dict[str, Any]) -> Profile:
        """Patch fields of an existing profile.

        Raises:
            ProfileNotFoundError: If the profile does not exist
        """
        ...

    async def merge_create(
        self,
        id: UUID,
        patch: dict[str, Any],
        defaults: dict[str, Any] | None = None,
    ) -> Profile:
        """Create the profile from ``defaults`` and ``patch`` if absent, else apply ``patch``."""
        ...

    async def scan_email_range(self, lo: str, hi: str, limit: int) -> list[Profile]:
        """Get profiles whose email lies in ``[lo, hi)``, ordered by email."""
        ...

    async def list_all(self) -> list[Profile]:
        """Get every profile."""
        ...
