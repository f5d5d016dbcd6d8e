"""Unit tests for DirectoryService."""

from uuid import UUID

import pytest

from core.exceptions import AuthorizationError
from domain.entities.profile import Profile, UserRole
from domain.services.context import ServiceContext
from domain.services.directory_service import (
    EMAIL_PREFIX_SENTINEL,
    SEARCH_RESULT_LIMIT,
    DirectoryService,
)
from tests.unit.conftest import FakeUnitOfWork, InMemoryUnitOfWork


@pytest.fixture
def service(store_context: ServiceContext) -> DirectoryService:
    return DirectoryService(store_context)


class TestSearchByEmail:
    @pytest.mark.asyncio
    async def test_prefix_match_is_case_sensitive(
        self, service: DirectoryService, store: InMemoryUnitOfWork, admin: Profile
    ):
        store.add_profile(email="alice@example.com", display_name="Alice")
        store.add_profile(email="alan@example.com")
        store.add_profile(email="Alfred@example.com")
        store.add_profile(email="bob@example.com")

        results = await service.search_by_email(admin.id, "al")

        assert [r.email for r in results] == ["alan@example.com", "alice@example.com"]

    @pytest.mark.asyncio
    async def test_display_name_falls_back_to_email(
        self, service: DirectoryService, store: InMemoryUnitOfWork, admin: Profile
    ):
        store.add_profile(email="nameless@example.com")

        results = await service.search_by_email(admin.id, "name")

        assert results[0].display_name == "nameless@example.com"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("term", [None, "", "a"])
    async def test_short_terms_return_nothing_without_scan(
        self, mock_context: ServiceContext, uow: FakeUnitOfWork, user_id: UUID, term: str | None
    ):
        uow.profiles.get.return_value = Profile(id=user_id, role=UserRole.ADMIN)

        results = await DirectoryService(mock_context).search_by_email(user_id, term)

        assert results == []
        uow.profiles.scan_email_range.assert_not_called()

    @pytest.mark.asyncio
    async def test_scan_uses_sentinel_bound_and_limit(
        self, mock_context: ServiceContext, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.profiles.get.return_value = Profile(id=user_id, role=UserRole.ADMIN)
        uow.profiles.scan_email_range.return_value = []

        await DirectoryService(mock_context).search_by_email(user_id, "jo")

        uow.profiles.scan_email_range.assert_called_once_with(
            "jo", "jo" + EMAIL_PREFIX_SENTINEL, SEARCH_RESULT_LIMIT
        )

    @pytest.mark.asyncio
    async def test_results_capped_at_ten(
        self, service: DirectoryService, store: InMemoryUnitOfWork, admin: Profile
    ):
        for i in range(15):
            store.add_profile(email=f"user{i:02d}@example.com")

        results = await service.search_by_email(admin.id, "user")

        assert len(results) == SEARCH_RESULT_LIMIT

    @pytest.mark.asyncio
    async def test_admin_check_precedes_length_check(
        self, service: DirectoryService, customer: Profile
    ):
        with pytest.raises(AuthorizationError):
            await service.search_by_email(customer.id, "a")


class TestListAllProfiles:
    @pytest.mark.asyncio
    async def test_admin_lists_everyone(
        self, service: DirectoryService, store: InMemoryUnitOfWork, admin: Profile, customer: Profile
    ):
        results = await service.list_all_profiles(admin.id)

        assert {p.id for p in results} == {admin.id, customer.id}

    @pytest.mark.asyncio
    async def test_non_admin_is_forbidden(self, service: DirectoryService, customer: Profile):
        with pytest.raises(AuthorizationError):
            await service.list_all_profiles(customer.id)

    @pytest.mark.asyncio
    async def test_caller_without_profile_is_forbidden(self, service: DirectoryService, user_id: UUID):
        with pytest.raises(AuthorizationError) as exc_info:
            await service.list_all_profiles(user_id)

        assert exc_info.value.message == "No profile record for caller"
