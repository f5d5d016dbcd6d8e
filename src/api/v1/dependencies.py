"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from core.config import settings
from domain.services.context import ServiceContext
from domain.services.directory_service import DirectoryService
from domain.services.profile_lifecycle_service import ProfileLifecycleService
from domain.services.profile_service import ProfileService
from domain.services.salon_service import SalonService
from infrastructure.auth.supabase_admin import SupabaseIdentityDirectory
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances scoped to the configured app id."""
    app_id = settings.app_id

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory, app_id)

    return factory


@lru_cache
def get_identity_directory() -> SupabaseIdentityDirectory:
    """Get the identity provider admin client."""
    return SupabaseIdentityDirectory()


@lru_cache
def get_service_context() -> ServiceContext:
    """Get the process-wide service context."""
    return ServiceContext(
        uow_factory=get_uow_factory(),
        identity_directory=get_identity_directory(),
        default_display_name=settings.default_display_name,
    )


@lru_cache
def get_profile_lifecycle_service() -> ProfileLifecycleService:
    """Get ProfileLifecycle service instance."""
    return ProfileLifecycleService(get_service_context())


@lru_cache
def get_profile_service() -> ProfileService:
    """Get Profile service instance."""
    return ProfileService(get_service_context())


@lru_cache
def get_directory_service() -> DirectoryService:
    """Get Directory service instance."""
    return DirectoryService(get_service_context())


@lru_cache
def get_salon_service() -> SalonService:
    """Get Salon service instance."""
    return SalonService(get_service_context())
