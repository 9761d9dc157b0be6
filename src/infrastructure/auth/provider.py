"""Identity provider protocol."""

from dataclasses import dataclass
from typing import Optional, Protocol

from domain.entities.identity import Identity


@dataclass(frozen=True)
class TokenUser:
    """Represents a user extracted from a verified ID token.

    ``is_admin`` is never read from the token; the auth dependency fills it
    from the live identity record.
    """

    uid: str
    email: str
    email_verified: bool = False
    display_name: Optional[str] = None
    is_admin: bool = False


class IIdentityProvider(Protocol):
    """Protocol for identity providers."""

    async def verify_token(self, token: str) -> TokenUser:
        """
        Verify a bearer ID token.

        Raises:
            AuthenticationError: If the token is invalid, expired or revoked
        """
        ...

    async def create_identity(
        self,
        email: str,
        password: str,
        display_name: str,
        phone_number: Optional[str] = None,
    ) -> Identity:
        """
        Create an identity with its display name set.

        Raises:
            IdentityProviderError: duplicate email, weak password, invalid email...
        """
        ...

    async def get_identity(self, uid: str) -> Identity:
        """
        Fetch the live identity record, custom claims included.

        Raises:
            IdentityProviderError: USER_NOT_FOUND if the identity does not exist
        """
        ...

    async def update_identity(
        self,
        uid: str,
        display_name: Optional[str] = None,
        photo_url: Optional[str] = None,
    ) -> None:
        """Update the mirrored display attributes (None leaves a value untouched)."""
        ...

    async def delete_identity(self, uid: str) -> None:
        """Delete the identity."""
        ...

    async def set_custom_claims(self, uid: str, claims: dict[str, bool]) -> None:
        """Replace the identity's custom claims."""
        ...

    async def send_verification_email(self, uid: str) -> None:
        """Send the address verification email for ``uid``."""
        ...
