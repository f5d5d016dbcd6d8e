"""Profile service layer with business logic."""

from typing import Any
from uuid import UUID

import structlog

from core.exceptions import IdentityProviderError, InvalidArgumentError, ProfileNotFoundError
from domain.entities.profile import (
    IMMUTABLE_PROFILE_FIELDS,
    MUTABLE_PROFILE_FIELDS,
    AssociatedSalon,
    Profile,
    UserRole,
)
from domain.services.access_guard import AccessGuard
from domain.services.context import ServiceContext

logger = structlog.get_logger()

UPDATE_SUCCESS_MESSAGE = "User profile updated successfully!"


class ProfileService:
    """Reads and patches individual profiles."""

    def __init__(self, context: ServiceContext, guard: AccessGuard | None = None) -> None:
        self._ctx = context
        self._guard = guard or AccessGuard()

    async def get_profile(self, caller_id: UUID, target_id: UUID | None = None) -> Profile | None:
        """Get a profile. Callers may read their own; admins may read anyone's."""
        target = target_id or caller_id
        async with self._ctx.uow_factory() as uow:
            await self._guard.require_self_or_admin(uow, caller_id, target)
            return await uow.profiles.get(target)

    async def update_profile(
        self,
        caller_id: UUID,
        patch: dict[str, Any],
        target_id: UUID | None = None,
    ) -> str:
        """Apply a partial update to a profile.

        - Anyone may update their own fields except role and owned salons
        - Updating another account requires admin
        - Changing a role or owned salons requires admin, including on oneself
        - Array fields are replaced wholesale

        After the write commits, changed ``display_name``/``photo_url`` are
        mirrored to the identity provider. That mirror is best-effort.
        """
        target = target_id or caller_id

        async with self._ctx.uow_factory() as uow:
            is_self = caller_id == target
            if not is_self:
                await self._guard.require_admin(uow, caller_id)

            current = await uow.profiles.get(target)
            if current is None:
                raise ProfileNotFoundError(str(target))

            if "role" in patch and is_self and patch["role"] != current.role.value:
                await self._guard.require_admin(uow, caller_id)

            # Ownership is granted through salon assignment
            if (
                "owned_salons" in patch
                and is_self
                and list(patch["owned_salons"] or []) != current.owned_salons
            ):
                await self._guard.require_admin(uow, caller_id)

            fields = self._validate_patch(patch)
            fields["updated_at"] = self._ctx.clock()

            updated = await uow.profiles.update(target, fields)
            await uow.commit()

        logger.info(
            "profile_updated",
            user_id=str(target),
            actor_id=str(caller_id),
            fields=sorted(k for k in fields if k != "updated_at"),
        )

        await self._mirror_display_attributes(current, updated, fields)
        return UPDATE_SUCCESS_MESSAGE

    # --- Internal helpers ---

    async def _mirror_display_attributes(
        self, before: Profile, after: Profile, fields: dict[str, Any]
    ) -> None:
        """Copy changed display attributes to the identity provider's user record."""
        changes: dict[str, str | None] = {}
        if "display_name" in fields and after.display_name != before.display_name:
            changes["display_name"] = after.display_name
        if "photo_url" in fields and after.photo_url != before.photo_url:
            changes["photo_url"] = after.photo_url
        if not changes:
            return

        try:
            await self._ctx.identity_directory.update_user_attributes(after.id, **changes)
        except IdentityProviderError as exc:
            # The profile document is the source of truth
            logger.warning(
                "identity_mirror_failed",
                user_id=str(after.id),
                fields=sorted(changes),
                error=exc.message,
            )

    @staticmethod
    def _validate_patch(patch: dict[str, Any]) -> dict[str, Any]:
        """Check the shape of a patch and coerce its values. Raises on failure."""
        immutable = IMMUTABLE_PROFILE_FIELDS.intersection(patch)
        if immutable:
            field = sorted(immutable)[0]
            raise InvalidArgumentError(f"{field} cannot be updated", field=field)

        unknown = set(patch) - MUTABLE_PROFILE_FIELDS
        if unknown:
            field = sorted(unknown)[0]
            raise InvalidArgumentError(f"Unknown profile field: {field}", field=field)

        fields = dict(patch)

        if "role" in fields:
            try:
                fields["role"] = UserRole(fields["role"])
            except ValueError:
                raise InvalidArgumentError(
                    f"Invalid role: {fields['role']}", field="role"
                ) from None

        if "photo_url" in fields and not (
            fields["photo_url"] is None or isinstance(fields["photo_url"], str)
        ):
            raise InvalidArgumentError("photoURL must be a string URL or null.", field="photo_url")

        if fields.get("associated_salons") is not None:
            ProfileService._check_active_associations(fields["associated_salons"])

        for key in ("owned_salons", "favorite_salons", "associated_salons"):
            if key in fields and fields[key] is None:
                fields[key] = []

        return fields

    @staticmethod
    def _check_active_associations(associations: list[AssociatedSalon]) -> None:
        """Each salon may appear at most once among active associations."""
        seen: set[UUID] = set()
        for association in associations:
            if not association.is_active:
                continue
            if association.salon_id in seen:
                raise InvalidArgumentError(
                    f"Duplicate active association for salon {association.salon_id}",
                    field="associated_salons",
                )
            seen.add(association.salon_id)
