"""Role checks shared by every privileged operation."""

from uuid import UUID

from core.exceptions import AuthorizationError
from domain.entities.profile import Profile
from domain.repositories.unit_of_work import IUnitOfWork


class AccessGuard:
    """Decides whether a caller may act on a target.

    Holds no cache: the caller's profile is read inside the caller's unit of
    work on every check, so a revoked admin loses access immediately.
    """

    async def require_admin(self, uow: IUnitOfWork, caller_id: UUID) -> Profile:
        """Return the caller's profile if it has the admin role. Raises on failure."""
        caller = await uow.profiles.get(caller_id)
        if caller is None:
            raise AuthorizationError("No profile record for caller")
        if not caller.is_admin:
            raise AuthorizationError("Only administrators can perform this action")
        return caller

    async def require_self_or_admin(
        self, uow: IUnitOfWork, caller_id: UUID, target_id: UUID
    ) -> None:
        """Allow callers acting on themselves, otherwise require admin."""
        if caller_id == target_id:
            return
        await self.require_admin(uow, caller_id)
