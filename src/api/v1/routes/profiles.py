"""Profile API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import (
    get_directory_service,
    get_profile_lifecycle_service,
    get_profile_service,
)
from api.v1.schemas.profile import (
    DirectoryEntryListResponse,
    DirectoryEntryResponse,
    ProfileDetailResponse,
    ProfileListResponse,
    ProfileResponse,
    ProfileUpdate,
    UpdateProfileResponse,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.directory_service import DirectoryService
from domain.services.profile_lifecycle_service import ProfileLifecycleService
from domain.services.profile_service import ProfileService

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.post(
    "/me/ensure",
    response_model=ProfileDetailResponse,
    summary="Create or touch the caller's profile",
    responses={
        200: {"description": "Profile created, or last login refreshed"},
        401: {"description": "Not authenticated"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def ensure_profile(
    request: Request,
    user: CurrentUser,
    service: ProfileLifecycleService = Depends(get_profile_lifecycle_service),
) -> ProfileDetailResponse:
    """Call on every sign-in.

    A first sign-in creates the profile with the ``customer`` role. Later
    sign-ins only refresh ``lastLoginAt``.
    """
    profile = await service.ensure_profile(user)
    return ProfileDetailResponse(data=ProfileResponse.from_entity(profile))


@router.get(
    "/me",
    response_model=ProfileDetailResponse,
    summary="Get the caller's profile",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_my_profile(
    request: Request,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """``data`` is null when the caller has no profile yet."""
    profile = await service.get_profile(user.id)
    return ProfileDetailResponse(data=ProfileResponse.from_entity(profile) if profile else None)


@router.patch(
    "/me",
    response_model=UpdateProfileResponse,
    summary="Update a profile",
    responses={
        400: {"description": "Invalid or immutable field"},
        403: {"description": "Role change or cross-account update without admin"},
        404: {"description": "Target profile not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_my_profile(
    request: Request,
    body: ProfileUpdate,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> UpdateProfileResponse:
    """Patch the caller's profile, or ``targetUid``'s profile for admins."""
    message = await service.update_profile(user.id, body.to_patch(), target_id=body.target_uid)
    return UpdateProfileResponse(success=True, message=message)


@router.get(
    "/search",
    response_model=DirectoryEntryListResponse,
    summary="Search profiles by email prefix (admin)",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def search_profiles(
    request: Request,
    user: CurrentUser,
    search_term: str | None = Query(None, alias="searchTerm", max_length=255),
    service: DirectoryService = Depends(get_directory_service),
) -> DirectoryEntryListResponse:
    """Case-sensitive prefix match on email. Terms under two characters match nothing."""
    entries = await service.search_by_email(user.id, search_term)
    return DirectoryEntryListResponse(
        data=[DirectoryEntryResponse.from_entity(e) for e in entries],
        meta={"total": len(entries)},
    )


@router.get(
    "",
    response_model=ProfileListResponse,
    summary="List all profiles (admin)",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_profiles(
    request: Request,
    user: CurrentUser,
    service: DirectoryService = Depends(get_directory_service),
) -> ProfileListResponse:
    profiles = await service.list_all_profiles(user.id)
    return ProfileListResponse(
        data=[ProfileResponse.from_entity(p) for p in profiles],
        meta={"total": len(profiles)},
    )


@router.get(
    "/{user_id}",
    response_model=ProfileDetailResponse,
    summary="Get a profile",
    responses={403: {"description": "Not the caller and caller is not admin"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_profile(
    request: Request,
    user_id: UUID,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    profile = await service.get_profile(user.id, user_id)
    return ProfileDetailResponse(data=ProfileResponse.from_entity(profile) if profile else None)


@router.patch(
    "/{user_id}",
    response_model=UpdateProfileResponse,
    summary="Update a profile by ID",
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_profile(
    request: Request,
    user_id: UUID,
    body: ProfileUpdate,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> UpdateProfileResponse:
    """Same rules as ``PATCH /profiles/me``; the path wins over ``targetUid``."""
    message = await service.update_profile(user.id, body.to_patch(), target_id=user_id)
    return UpdateProfileResponse(success=True, message=message)
