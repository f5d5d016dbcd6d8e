"""Unit tests for authentication dependencies."""

from uuid import uuid4

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from api.dependencies.auth import get_current_user
from core.exceptions import AuthenticationError, ErrorCode
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    return JWTAuthProvider(secret_key="test-secret", algorithm="HS256", expire_minutes=30)


@pytest.fixture
def token_user() -> TokenUser:
    return TokenUser(id=uuid4(), email="client@example.com", display_name="Client")


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestGetCurrentUser:
    @pytest.mark.asyncio
    async def test_returns_identity_for_valid_token(
        self, auth_provider: JWTAuthProvider, token_user: TokenUser
    ):
        result = await get_current_user(_bearer(auth_provider.create_token(token_user)), auth_provider)

        assert result.id == token_user.id
        assert result.email == token_user.email
        assert result.display_name == "Client"

    @pytest.mark.asyncio
    async def test_accepts_token_without_email(self, auth_provider: JWTAuthProvider):
        phone_only = TokenUser(id=uuid4())

        result = await get_current_user(_bearer(auth_provider.create_token(phone_only)), auth_provider)

        assert result.id == phone_only.id
        assert result.email is None

    @pytest.mark.asyncio
    async def test_raises_unauthorized_without_credentials(self, auth_provider: JWTAuthProvider):
        with pytest.raises(AuthenticationError) as exc_info:
            await get_current_user(None, auth_provider)

        assert exc_info.value.error_code == ErrorCode.UNAUTHORIZED
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_raises_invalid_token_for_garbage(self, auth_provider: JWTAuthProvider):
        with pytest.raises(AuthenticationError) as exc_info:
            await get_current_user(_bearer("invalid.jwt.token"), auth_provider)

        assert exc_info.value.error_code == ErrorCode.INVALID_TOKEN

    @pytest.mark.asyncio
    async def test_raises_invalid_token_when_expired(self, token_user: TokenUser):
        issuer = JWTAuthProvider(secret_key="test-secret", algorithm="HS256", expire_minutes=-1)
        verifier = JWTAuthProvider(secret_key="test-secret", algorithm="HS256", expire_minutes=30)

        with pytest.raises(AuthenticationError) as exc_info:
            await get_current_user(_bearer(issuer.create_token(token_user)), verifier)

        assert exc_info.value.error_code == ErrorCode.INVALID_TOKEN
