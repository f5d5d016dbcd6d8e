"""Profile provisioning on login."""

import structlog

from core.exceptions import AuthenticationError, ProfileAlreadyExistsError
from domain.entities.profile import Profile, UserRole
from domain.services.context import ServiceContext
from infrastructure.auth.provider import TokenUser

logger = structlog.get_logger()

# Attempts at the create path before giving up; the second attempt always
# takes the touch path because the conflicting document now exists.
_MAX_ATTEMPTS = 2


class ProfileLifecycleService:
    """Creates a profile on first login and refreshes it on later logins."""

    def __init__(self, context: ServiceContext) -> None:
        self._ctx = context

    async def ensure_profile(self, caller: TokenUser | None) -> Profile:
        """Create-or-touch the caller's profile.

        Idempotent: repeated calls for the same identity leave exactly one
        profile and only advance ``last_login_at``. Claims from the token are
        used only when the profile is first created.

        Concurrent first logins are resolved by the store's conditional
        create: the loser rolls back and retries, finding the document and
        taking the touch path.
        """
        if caller is None:
            raise AuthenticationError("The function must be called while authenticated")

        for _ in range(_MAX_ATTEMPTS):
            async with self._ctx.uow_factory() as uow:
                existing = await uow.profiles.get(caller.id)
                now = self._ctx.clock()

                if existing is not None:
                    touched = await uow.profiles.update(caller.id, {"last_login_at": now})
                    await uow.commit()
                    logger.info("profile_login_touched", user_id=str(caller.id))
                    return touched

                profile = Profile(
                    id=caller.id,
                    email=caller.email,
                    display_name=caller.display_name or self._ctx.default_display_name,
                    photo_url=caller.photo_url,
                    phone_number=None,
                    role=UserRole.CUSTOMER,
                    created_at=now,
                    last_login_at=now,
                    owned_salons=[],
                    associated_salons=[],
                    favorite_salons=[],
                    address=None,
                )

                try:
                    created = await uow.profiles.create(profile)
                    await uow.commit()
                except ProfileAlreadyExistsError:
                    await uow.rollback()
                    logger.info("profile_create_race_lost", user_id=str(caller.id))
                    continue

                logger.info("profile_created", user_id=str(caller.id))
                return created

        raise ProfileAlreadyExistsError(str(caller.id))
