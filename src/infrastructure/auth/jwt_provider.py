"""JWT authentication provider implementation.

Supports both Supabase-issued JWTs (ES256 via JWKS) and
locally-created tokens (HS256 for tests).

Supabase JWT payload structure:
    {
        "sub": "user-uuid",
        "email": "user@example.com",
        "role": "authenticated",
        "aud": "authenticated",
        "user_metadata": { "full_name": "Jane", "avatar_url": "https://..." },
        "exp": 1234567890
    }

Only ``sub`` is required. Phone-only and anonymous accounts carry no email.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Optional
from uuid import UUID

import httpx
from jose import JWTError, jwt
from jose.backends import ECKey

from core.config import settings
from infrastructure.auth.provider import TokenUser

logger = logging.getLogger(__name__)

# Module-level JWKS cache (fetched once, reused across requests)
_jwks_cache: dict[str, Any] | None = None


async def _get_jwks_keys() -> dict[str, Any]:
    """Fetch and cache JWKS keys from Supabase."""
    global _jwks_cache
    if _jwks_cache is not None:
        return _jwks_cache

    jwks_url = settings.supabase_jwks_url
    if not jwks_url:
        return {}

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(jwks_url, timeout=settings.identity_timeout_seconds)
            response.raise_for_status()
            _jwks_cache = {
                key_data["kid"]: key_data
                for key_data in response.json().get("keys", [])
                if key_data.get("kid")
            }
            logger.info("Fetched %d JWKS keys from Supabase", len(_jwks_cache))
            return _jwks_cache
    except Exception:
        logger.exception("Failed to fetch JWKS from %s", jwks_url)
        return {}


def _first_claim(sources: list[dict[str, Any]], *names: str) -> Optional[str]:
    """Return the first non-empty claim found under any of ``names``."""
    for source in sources:
        for name in names:
            value = source.get(name)
            if value:
                return str(value)
    return None


class JWTAuthProvider:
    """JWT-based authentication provider.

    Handles validation of both Supabase-issued (ES256) and
    locally-created (HS256) JWTs.
    """

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate a JWT token and extract the caller identity.

        Args:
            token: The JWT to validate

        Returns:
            TokenUser if valid, None if invalid, expired or missing ``sub``
        """
        try:
            header = jwt.get_unverified_header(token)
            alg = header.get("alg", self._algorithm)

            if alg == "ES256":
                payload = await self._validate_es256(token, header)
            else:
                payload = jwt.decode(
                    token,
                    self._secret_key,
                    algorithms=[self._algorithm],
                    options={"verify_aud": False},
                )

            if payload is None:
                return None

            subject = payload.get("sub")
            if not subject:
                return None

            try:
                user_id = UUID(subject)
            except ValueError:
                return None

            claims = [payload.get("user_metadata") or {}, payload]

            return TokenUser(
                id=user_id,
                email=payload.get("email") or None,
                display_name=_first_claim(claims, "display_name", "full_name", "name"),
                photo_url=_first_claim(claims, "avatar_url", "picture"),
                role=payload.get("role"),
            )

        except JWTError:
            return None

    async def _validate_es256(self, token: str, header: dict) -> Optional[dict]:
        """Validate an ES256-signed JWT using JWKS public keys."""
        kid = header.get("kid")
        if not kid:
            return None

        jwks_keys = await _get_jwks_keys()
        key_data = jwks_keys.get(kid)
        if not key_data:
            # Unknown kid, refetch once in case the keys rotated
            global _jwks_cache
            _jwks_cache = None
            jwks_keys = await _get_jwks_keys()
            key_data = jwks_keys.get(kid)
            if not key_data:
                logger.warning("JWKS key not found for kid=%s", kid)
                return None

        ec_key = ECKey(key_data, algorithm="ES256")
        return jwt.decode(
            token,
            ec_key,
            algorithms=["ES256"],
            options={"verify_aud": False},
        )

    def create_token(self, user: TokenUser) -> str:
        """
        Create a JWT token for a user (HS256, used for tests).

        Args:
            user: The user to create a token for

        Returns:
            The generated JWT string
        """
        expire = datetime.utcnow() + timedelta(minutes=self._expire_minutes)

        payload: dict = {
            "sub": str(user.id),
            "aud": "authenticated",
            "role": "authenticated",
            "exp": expire,
            "user_metadata": {
                "display_name": user.display_name,
                "avatar_url": user.photo_url,
            },
        }
        if user.email:
            payload["email"] = user.email

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
