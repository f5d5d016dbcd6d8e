"""Shared fixtures for unit tests."""

import copy
import dataclasses
from datetime import datetime, timedelta
from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from core.exceptions import (
    ProfileAlreadyExistsError,
    ProfileNotFoundError,
    SalonNotFoundError,
)
from domain.entities.profile import Profile, UserRole
from domain.entities.salon import Salon
from domain.services.context import ServiceContext
from tests.conftest import FakeIdentityDirectory

FIXED_NOW = datetime(2026, 3, 1, 12, 0, 0)


class FakeUnitOfWork:
    """Fake Unit of Work with repository mocks for unit testing."""

    def __init__(self) -> None:
        self.profiles = AsyncMock()
        self.salons = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


class InMemoryProfileRepository:
    """Dict-backed profile store with the same conflict rules as the SQL one."""

    def __init__(self) -> None:
        self.rows: dict[UUID, Profile] = {}
        self.writes: list[tuple[str, UUID]] = []

    async def get(self, id: UUID) -> Profile | None:
        row = self.rows.get(id)
        return copy.deepcopy(row) if row else None

    async def create(self, profile: Profile) -> Profile:
        if profile.id in self.rows:
            raise ProfileAlreadyExistsError(str(profile.id))
        self.rows[profile.id] = copy.deepcopy(profile)
        self.writes.append(("profile", profile.id))
        return copy.deepcopy(profile)

    async def update(self, id: UUID, fields: dict[str, Any]) -> Profile:
        if id not in self.rows:
            raise ProfileNotFoundError(str(id))
        self.rows[id] = dataclasses.replace(self.rows[id], **copy.deepcopy(fields))
        self.writes.append(("profile", id))
        return copy.deepcopy(self.rows[id])

    async def merge_create(
        self, id: UUID, patch: dict[str, Any], defaults: dict[str, Any] | None = None
    ) -> Profile:
        if id in self.rows:
            return await self.update(id, patch) if patch else copy.deepcopy(self.rows[id])
        self.rows[id] = Profile(id=id, **{**(defaults or {}), **patch})
        self.writes.append(("profile", id))
        return copy.deepcopy(self.rows[id])

    async def scan_email_range(self, lo: str, hi: str, limit: int) -> list[Profile]:
        hits = sorted(
            (p for p in self.rows.values() if p.email is not None and lo <= p.email < hi),
            key=lambda p: p.email or "",
        )
        return copy.deepcopy(hits[:limit])

    async def list_all(self) -> list[Profile]:
        return copy.deepcopy(list(self.rows.values()))


class InMemorySalonRepository:
    """Dict-backed salon store."""

    def __init__(self, writes: list[tuple[str, UUID]]) -> None:
        self.rows: dict[UUID, Salon] = {}
        self.writes = writes

    async def get(self, id: UUID) -> Salon | None:
        row = self.rows.get(id)
        return copy.deepcopy(row) if row else None

    async def create(self, salon: Salon) -> Salon:
        self.rows[salon.id] = copy.deepcopy(salon)
        self.writes.append(("salon", salon.id))
        return copy.deepcopy(salon)

    async def update(self, id: UUID, fields: dict[str, Any]) -> Salon:
        if id not in self.rows:
            raise SalonNotFoundError(str(id))
        self.rows[id] = dataclasses.replace(self.rows[id], **copy.deepcopy(fields))
        self.writes.append(("salon", id))
        return copy.deepcopy(self.rows[id])

    async def delete(self, id: UUID) -> bool:
        if self.rows.pop(id, None) is None:
            return False
        self.writes.append(("salon", id))
        return True


class InMemoryUnitOfWork:
    """Unit of work over in-memory repositories shared across calls."""

    def __init__(self) -> None:
        self.profiles = InMemoryProfileRepository()
        self.salons = InMemorySalonRepository(self.profiles.writes)
        self.commits = 0
        self.rollbacks = 0

    @property
    def writes(self) -> list[tuple[str, UUID]]:
        return self.profiles.writes

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1

    async def __aenter__(self) -> "InMemoryUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass

    def add_profile(self, role: UserRole = UserRole.CUSTOMER, **fields: Any) -> Profile:
        """Seed a profile directly, bypassing write tracking."""
        fields.setdefault("id", uuid4())
        fields.setdefault("created_at", FIXED_NOW - timedelta(days=30))
        profile = Profile(role=role, **fields)
        self.profiles.rows[profile.id] = profile
        return copy.deepcopy(profile)


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def store() -> InMemoryUnitOfWork:
    """In-memory unit of work for multi-step scenarios."""
    return InMemoryUnitOfWork()


@pytest.fixture
def mock_context(uow: FakeUnitOfWork, directory: FakeIdentityDirectory) -> ServiceContext:
    """Service context over repository mocks."""
    return ServiceContext(
        uow_factory=lambda: uow,
        identity_directory=directory,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def store_context(store: InMemoryUnitOfWork, directory: FakeIdentityDirectory) -> ServiceContext:
    """Service context over the in-memory store."""
    return ServiceContext(
        uow_factory=lambda: store,
        identity_directory=directory,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def user_id() -> UUID:
    """A random user ID."""
    return uuid4()


@pytest.fixture
def admin(store: InMemoryUnitOfWork) -> Profile:
    """An admin profile seeded in the in-memory store."""
    return store.add_profile(role=UserRole.ADMIN, email="admin@example.com", display_name="Admin")


@pytest.fixture
def customer(store: InMemoryUnitOfWork) -> Profile:
    """A customer profile seeded in the in-memory store."""
    return store.add_profile(email="carol@example.com", display_name="Carol")
