"""Admin-only directory listing and search."""

from uuid import UUID

from domain.entities.profile import DirectoryEntry, Profile
from domain.services.access_guard import AccessGuard
from domain.services.context import ServiceContext

# Upper bound appended to a prefix to form a range scan over every string
# starting with it.
EMAIL_PREFIX_SENTINEL = "\uf8ff"
MIN_SEARCH_TERM_LENGTH = 2
SEARCH_RESULT_LIMIT = 10


class DirectoryService:
    """Bulk read access over all profiles. Requires admin."""

    def __init__(self, context: ServiceContext, guard: AccessGuard | None = None) -> None:
        self._ctx = context
        self._guard = guard or AccessGuard()

    async def search_by_email(self, caller_id: UUID, term: str | None) -> list[DirectoryEntry]:
        """Find up to 10 profiles whose email starts with ``term``.

        Terms shorter than two characters return an empty list without a scan.
        """
        async with self._ctx.uow_factory() as uow:
            await self._guard.require_admin(uow, caller_id)

            if not term or len(term) < MIN_SEARCH_TERM_LENGTH:
                return []

            profiles = await uow.profiles.scan_email_range(
                term, term + EMAIL_PREFIX_SENTINEL, SEARCH_RESULT_LIMIT
            )

        return [
            DirectoryEntry(
                id=p.id,
                email=p.email,
                display_name=p.display_name or p.email,
            )
            for p in profiles
            if p.email and p.email.startswith(term)
        ]

    async def list_all_profiles(self, caller_id: UUID) -> list[Profile]:
        """Get every profile.

        Unpaginated; fine while the directory fits in one scan.
        """
        async with self._ctx.uow_factory() as uow:
            await self._guard.require_admin(uow, caller_id)
            profiles = await uow.profiles.list_all()

        now = self._ctx.clock()
        for profile in profiles:
            if profile.created_at is None:
                profile.created_at = now
        return profiles
