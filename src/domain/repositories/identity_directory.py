"""Identity provider directory protocol."""

from typing import Any, Protocol
from uuid import UUID

# Default for attributes the caller leaves alone; an explicit None clears one
UNSET: Any = object()


class IIdentityDirectory(Protocol):
    """Admin-side view of the identity provider's user records."""

    async def get_user_id_by_email(self, email: str) -> UUID:
        """
        Resolve an email address to an account ID.

        Raises:
            OwnerNotFoundError: If no account has that email
            IdentityProviderError: If the lookup fails for any other reason
        """
        ...

    async def update_user_attributes(
        self,
        user_id: UUID,
        display_name: str | None = UNSET,
        photo_url: str | None = UNSET,
    ) -> None:
        """
        Mirror display attributes onto the identity provider's user record.

        Only attributes that are passed are written; ``None`` clears one.

        Raises:
            IdentityProviderError: If the update fails
        """
        ...
