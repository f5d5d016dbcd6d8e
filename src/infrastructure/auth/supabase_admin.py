"""Supabase GoTrue admin client implementing the identity directory.

Uses the service role key, so it must only ever run server-side.

Endpoints:
    GET /auth/v1/admin/users?filter=<email>   email lookup (substring match,
                                              narrowed to an exact match here)
    PUT /auth/v1/admin/users/<id>             user_metadata update
"""

from typing import Any, Optional
from uuid import UUID

import httpx
import structlog

from core.config import settings
from core.exceptions import IdentityProviderError, OwnerNotFoundError
from domain.repositories.identity_directory import UNSET

logger = structlog.get_logger()

_LOOKUP_PAGE_SIZE = 50


class SupabaseIdentityDirectory:
    """Admin-side user lookups and attribute mirroring against Supabase Auth."""

    def __init__(
        self,
        admin_url: str = settings.supabase_admin_url,
        service_role_key: str = settings.supabase_service_role_key,
        timeout: float = settings.identity_timeout_seconds,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._admin_url = admin_url.rstrip("/")
        self._service_role_key = service_role_key
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def get_user_id_by_email(self, email: str) -> UUID:
        """Resolve an email address to an account ID.

        The admin ``filter`` is a substring match, so the exact address may sit
        behind any number of longer ones. Pages are walked until the match
        turns up or a short page ends the listing.
        """
        wanted = email.strip().lower()
        page = 1
        while True:
            payload = await self._request(
                "GET",
                "/users",
                params={"filter": email, "page": page, "per_page": _LOOKUP_PAGE_SIZE},
            )
            users = payload.get("users", [])
            for user in users:
                if (user.get("email") or "").lower() == wanted:
                    return UUID(user["id"])
            if len(users) < _LOOKUP_PAGE_SIZE:
                break
            page += 1

        raise OwnerNotFoundError(email)

    async def update_user_attributes(
        self,
        user_id: UUID,
        display_name: str | None = UNSET,
        photo_url: str | None = UNSET,
    ) -> None:
        """Copy display attributes into the user's ``user_metadata``."""
        metadata: dict[str, Any] = {}
        if display_name is not UNSET:
            metadata["display_name"] = display_name
            metadata["full_name"] = display_name
        if photo_url is not UNSET:
            metadata["avatar_url"] = photo_url
        if not metadata:
            return

        await self._request("PUT", f"/users/{user_id}", json={"user_metadata": metadata})
        logger.info("identity_attributes_mirrored", user_id=str(user_id), fields=sorted(metadata))

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    # --- Internal helpers ---

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        """Call the admin API, mapping transport and HTTP failures to IdentityProviderError."""
        if not self._admin_url or not self._service_role_key:
            raise IdentityProviderError("Identity provider admin access is not configured")

        headers = {
            "apikey": self._service_role_key,
            "Authorization": f"Bearer {self._service_role_key}",
        }
        try:
            response = await self._get_client().request(
                method, f"{self._admin_url}{path}", headers=headers, **kwargs
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "identity_provider_http_error",
                method=method,
                path=path,
                status_code=exc.response.status_code,
            )
            raise IdentityProviderError() from exc
        except httpx.HTTPError as exc:
            logger.error("identity_provider_unreachable", method=method, path=path, error=str(exc))
            raise IdentityProviderError() from exc

        if not response.content:
            return {}
        return response.json()  # type: ignore[no-any-return]
