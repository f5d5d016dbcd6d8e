"""Salon API routes (admin only)."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_salon_service
from api.v1.schemas.common import MessageResponse
from api.v1.schemas.salon import SalonCreate, SalonCreatedResponse, SalonUpdate
from core.rate_limit import WRITE_LIMIT, limiter
from domain.services.salon_service import SalonService

router = APIRouter(prefix="/salons", tags=["salons"])


@router.post(
    "",
    response_model=SalonCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a salon",
    responses={
        201: {"description": "Salon created and owner promoted"},
        403: {"description": "Caller is not an admin"},
        404: {"description": "No account registered under ownerEmail"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def add_salon(
    request: Request,
    body: SalonCreate,
    user: CurrentUser,
    service: SalonService = Depends(get_salon_service),
) -> SalonCreatedResponse:
    """Create a salon and make the account behind ``ownerEmail`` its owner."""
    salon = await service.add_salon(
        user.id,
        name=body.name,
        address=body.address.model_dump(exclude_none=True),
        description=body.description,
        owner_email=body.owner_email,
        **body.extras(),
    )
    return SalonCreatedResponse(id=salon.id, message="Salon added successfully!")


@router.patch(
    "/{salon_id}",
    response_model=MessageResponse,
    summary="Update a salon",
    responses={
        400: {"description": "No update fields"},
        404: {"description": "Salon or new owner not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_salon(
    request: Request,
    salon_id: UUID,
    body: SalonUpdate,
    user: CurrentUser,
    service: SalonService = Depends(get_salon_service),
) -> MessageResponse:
    """Patch salon fields. Supplying ``ownerEmail`` transfers ownership."""
    await service.update_salon(
        user.id,
        salon_id,
        owner_email=body.owner_email,
        **body.to_fields(),
    )
    return MessageResponse(message="Salon updated successfully!")


@router.delete(
    "/{salon_id}",
    response_model=MessageResponse,
    summary="Delete a salon",
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_salon(
    request: Request,
    salon_id: UUID,
    user: CurrentUser,
    service: SalonService = Depends(get_salon_service),
) -> MessageResponse:
    await service.delete_salon(user.id, salon_id)
    return MessageResponse(message="Salon deleted successfully!")
