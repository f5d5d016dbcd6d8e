"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path
from typing import Any
from uuid import UUID, uuid4

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.setdefault("APP_ID", "test-app")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.exceptions import IdentityProviderError, OwnerNotFoundError
from domain.entities.profile import Profile, UserRole
from domain.repositories.identity_directory import UNSET
from domain.services.context import ServiceContext
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

# Test database URL (SQLite in memory, one connection shared by all sessions)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_APP_ID = "test-app"


class FakeIdentityDirectory:
    """Identity provider stand-in keyed by email."""

    def __init__(self) -> None:
        self.users: dict[str, UUID] = {}
        self.mirrored: list[tuple[UUID, dict[str, Any]]] = []
        self.fail_updates = False

    def register(self, email: str, user_id: UUID | None = None) -> UUID:
        user_id = user_id or uuid4()
        self.users[email.lower()] = user_id
        return user_id

    async def get_user_id_by_email(self, email: str) -> UUID:
        try:
            return self.users[email.lower()]
        except KeyError:
            raise OwnerNotFoundError(email) from None

    async def update_user_attributes(
        self, user_id: UUID, display_name: str | None = UNSET, photo_url: str | None = UNSET
    ) -> None:
        if self.fail_updates:
            raise IdentityProviderError()
        changes: dict[str, Any] = {}
        if display_name is not UNSET:
            changes["display_name"] = display_name
        if photo_url is not UNSET:
            changes["photo_url"] = photo_url
        self.mirrored.append((user_id, changes))


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database with all tables."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
def uow_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SQLAlchemyUnitOfWork]:
    """Unit of work factory over the test database."""
    return lambda: SQLAlchemyUnitOfWork(session_factory, TEST_APP_ID)


@pytest.fixture
def directory() -> FakeIdentityDirectory:
    return FakeIdentityDirectory()


@pytest.fixture
def service_context(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork], directory: FakeIdentityDirectory
) -> ServiceContext:
    return ServiceContext(uow_factory=uow_factory, identity_directory=directory)


@pytest.fixture
def seed_profile(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork],
) -> Callable[..., Awaitable[Profile]]:
    """Insert a profile directly through the repository."""

    async def _seed(role: UserRole = UserRole.CUSTOMER, **fields: Any) -> Profile:
        fields.setdefault("id", uuid4())
        async with uow_factory() as uow:
            profile = await uow.profiles.create(Profile(role=role, **fields))
            await uow.commit()
        return profile

    return _seed


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
    )


@pytest.fixture
def auth_headers_for(auth_provider: JWTAuthProvider) -> Callable[..., dict[str, str]]:
    """Build Authorization headers for an arbitrary identity."""

    def _headers(user_id: UUID, **claims: Any) -> dict[str, str]:
        token = auth_provider.create_token(TokenUser(id=user_id, **claims))
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth, no database overrides)."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def api_client(
    service_context: ServiceContext,
    session_factory: async_sessionmaker[AsyncSession],
    auth_provider: JWTAuthProvider,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client wired to the in-memory database.

    This client:
    - Verifies real HS256 tokens issued by ``auth_provider``
    - Builds every service over the test ServiceContext
    - Points the detailed health check at the test database
    """
    from api.dependencies.auth import get_auth_provider
    from api.v1.dependencies import (
        get_directory_service,
        get_profile_lifecycle_service,
        get_profile_service,
        get_salon_service,
    )
    from domain.services.directory_service import DirectoryService
    from domain.services.profile_lifecycle_service import ProfileLifecycleService
    from domain.services.profile_service import ProfileService
    from domain.services.salon_service import SalonService
    from infrastructure.database.session import get_async_session
    from main import create_app

    app = create_app()

    async def override_get_async_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    app.dependency_overrides[get_profile_lifecycle_service] = lambda: ProfileLifecycleService(
        service_context
    )
    app.dependency_overrides[get_profile_service] = lambda: ProfileService(service_context)
    app.dependency_overrides[get_directory_service] = lambda: DirectoryService(service_context)
    app.dependency_overrides[get_salon_service] = lambda: SalonService(service_context)
    app.dependency_overrides[get_async_session] = override_get_async_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
