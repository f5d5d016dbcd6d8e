"""Salon service layer: admin CRUD and ownership transfer."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

import structlog

from core.exceptions import InvalidArgumentError, SalonNotFoundError
from domain.entities.profile import Profile, UserRole, has_privilege
from domain.entities.salon import SALON_PLAIN_FIELDS, Salon, SalonStatus
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.access_guard import AccessGuard
from domain.services.context import ServiceContext

logger = structlog.get_logger()

# Role granted to an account when it becomes a salon owner
OWNER_PROMOTION_ROLE = UserRole.SALON_OWNER


class SalonService:
    """Admin-only salon management.

    Ownership changes touch two documents: the owner's profile and the salon.
    The profile is written first so a salon never points at an account
    without a profile; the salon is written second. Both writes share one
    unit of work. Replaying an assignment is idempotent: promotion is
    monotone, ``owned_salons`` has set semantics and ``owner_id`` is
    overwritten.
    """

    def __init__(self, context: ServiceContext, guard: AccessGuard | None = None) -> None:
        self._ctx = context
        self._guard = guard or AccessGuard()

    async def add_salon(
        self,
        caller_id: UUID,
        name: str,
        address: dict[str, Any],
        description: str,
        owner_email: str,
        **extra: Any,
    ) -> Salon:
        """Create a salon owned by the account registered under ``owner_email``."""
        async with self._ctx.uow_factory() as uow:
            await self._guard.require_admin(uow, caller_id)

            if not name or not address or not description or not owner_email:
                raise InvalidArgumentError("Missing required salon fields or owner email.")
            self._check_plain_fields(extra)

            owner_id = await self._ctx.identity_directory.get_user_id_by_email(owner_email)
            now = self._ctx.clock()
            salon_id = uuid4()

            await self._ensure_owner_profile(uow, owner_id, owner_email, salon_id, now)

            salon = Salon(
                id=salon_id,
                name=name,
                address=address,
                description=description,
                owner_id=owner_id,
                phone_number=extra.get("phone_number"),
                email=extra.get("email"),
                website=extra.get("website"),
                image_urls=extra.get("image_urls") or [],
                status=SalonStatus(extra.get("status") or SalonStatus.ACTIVE),
                created_at=now,
                updated_at=now,
            )
            created = await uow.salons.create(salon)
            await uow.commit()

        logger.info(
            "salon_created",
            salon_id=str(created.id),
            owner_id=str(owner_id),
            actor_id=str(caller_id),
        )
        return created

    async def update_salon(
        self,
        caller_id: UUID,
        salon_id: UUID,
        owner_email: str | None = None,
        **fields: Any,
    ) -> Salon:
        """Update plain salon fields and optionally reassign its owner."""
        fields = {k: v for k, v in fields.items() if v is not None}

        async with self._ctx.uow_factory() as uow:
            await self._guard.require_admin(uow, caller_id)

            if not fields and not owner_email:
                raise InvalidArgumentError("Missing salon ID or update fields.")
            self._check_plain_fields(fields)

            salon = await uow.salons.get(salon_id)
            if salon is None:
                raise SalonNotFoundError(str(salon_id))

            if owner_email:
                updated = await self._assign_owner(uow, salon, owner_email, fields)
            else:
                fields["updated_at"] = self._ctx.clock()
                updated = await uow.salons.update(salon_id, fields)

            await uow.commit()

        logger.info("salon_updated", salon_id=str(salon_id), actor_id=str(caller_id))
        return updated

    async def assign_owner(
        self,
        caller_id: UUID,
        salon_id: UUID,
        owner_email: str,
        other_fields: dict[str, Any] | None = None,
    ) -> Salon:
        """Reassign a salon to the account registered under ``owner_email``."""
        return await self.update_salon(
            caller_id, salon_id, owner_email=owner_email, **(other_fields or {})
        )

    async def delete_salon(self, caller_id: UUID, salon_id: UUID) -> bool:
        """Delete a salon and drop it from its owner's ``owned_salons``."""
        async with self._ctx.uow_factory() as uow:
            await self._guard.require_admin(uow, caller_id)

            salon = await uow.salons.get(salon_id)
            if salon is None:
                raise SalonNotFoundError(str(salon_id))

            if salon.owner_id is not None:
                await self._release_ownership(uow, salon.owner_id, salon_id)

            deleted = await uow.salons.delete(salon_id)
            await uow.commit()

        logger.info("salon_deleted", salon_id=str(salon_id), actor_id=str(caller_id))
        return deleted

    # --- Internal helpers ---

    async def _assign_owner(
        self,
        uow: IUnitOfWork,
        salon: Salon,
        owner_email: str,
        fields: dict[str, Any],
    ) -> Salon:
        """Point ``salon`` at a new owner: owner profile first, salon second."""
        owner_id = await self._ctx.identity_directory.get_user_id_by_email(owner_email)
        now = self._ctx.clock()

        await self._ensure_owner_profile(uow, owner_id, owner_email, salon.id, now)

        updated = await uow.salons.update(
            salon.id, {**fields, "owner_id": owner_id, "updated_at": now}
        )

        previous_owner_id = salon.owner_id
        if previous_owner_id is not None and previous_owner_id != owner_id:
            await self._release_ownership(uow, previous_owner_id, salon.id)

        logger.info(
            "salon_owner_assigned",
            salon_id=str(salon.id),
            owner_id=str(owner_id),
            previous_owner_id=str(previous_owner_id) if previous_owner_id else None,
        )
        return updated

    async def _ensure_owner_profile(
        self,
        uow: IUnitOfWork,
        owner_id: UUID,
        owner_email: str,
        salon_id: UUID,
        now: datetime,
    ) -> Profile:
        """Make sure the owner has a profile with owner privileges listing the salon."""
        owner = await uow.profiles.get(owner_id)
        if owner is None:
            owner = await uow.profiles.merge_create(
                owner_id,
                patch={},
                defaults={
                    "email": owner_email,
                    "role": OWNER_PROMOTION_ROLE,
                    "created_at": now,
                    "last_login_at": now,
                    "owned_salons": [],
                },
            )
            logger.info("owner_profile_stub_created", user_id=str(owner_id))

        changes: dict[str, Any] = {}
        if not has_privilege(owner.role, OWNER_PROMOTION_ROLE):
            changes["role"] = OWNER_PROMOTION_ROLE
        if salon_id not in owner.owned_salons:
            changes["owned_salons"] = [*owner.owned_salons, salon_id]

        if not changes:
            return owner

        changes["updated_at"] = now
        promoted = await uow.profiles.update(owner_id, changes)
        if "role" in changes:
            logger.info(
                "owner_role_promoted",
                user_id=str(owner_id),
                old_role=owner.role.value,
                new_role=OWNER_PROMOTION_ROLE.value,
            )
        return promoted

    async def _release_ownership(self, uow: IUnitOfWork, owner_id: UUID, salon_id: UUID) -> None:
        """Remove a salon from an account's ``owned_salons``. Roles are left as they are."""
        owner = await uow.profiles.get(owner_id)
        if owner is None or salon_id not in owner.owned_salons:
            return
        await uow.profiles.update(
            owner_id,
            {
                "owned_salons": [s for s in owner.owned_salons if s != salon_id],
                "updated_at": self._ctx.clock(),
            },
        )

    @staticmethod
    def _check_plain_fields(fields: dict[str, Any]) -> None:
        """Only plain salon attributes may be written directly."""
        unknown = set(fields) - SALON_PLAIN_FIELDS
        if unknown:
            field = sorted(unknown)[0]
            raise InvalidArgumentError(f"Field cannot be set on a salon: {field}", field=field)
        if "status" in fields:
            try:
                fields["status"] = SalonStatus(fields["status"])
            except ValueError:
                raise InvalidArgumentError(
                    f"Invalid salon status: {fields['status']}", field="status"
                ) from None
