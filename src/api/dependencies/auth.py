"""Authentication dependencies for FastAPI."""

from dataclasses import replace
from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.exceptions import AuthenticationError, ErrorCode, IdentityProviderError
from infrastructure.auth.firebase_provider import FirebaseIdentityProvider
from infrastructure.auth.provider import IIdentityProvider, TokenUser
from infrastructure.firebase.app import get_firebase_app

# Security scheme for OpenAPI docs
security = HTTPBearer(auto_error=False)


@lru_cache
def get_identity_provider() -> IIdentityProvider:
    """Get the process-wide identity provider."""
    return FirebaseIdentityProvider(get_firebase_app())


async def get_current_user(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None,
        Depends(security),
    ],
    identity_provider: IIdentityProvider = Depends(get_identity_provider),
) -> TokenUser:
    """
    Dependency to get the current authenticated user.

    The admin flag comes from the live identity record, not from the token,
    so a claim granted or revoked after the token was issued takes effect
    on the next request.

    Raises:
        AuthenticationError: If no token provided, the token is invalid, or
            the identity no longer exists or is disabled
    """
    if not credentials:
        raise AuthenticationError(
            message="Unauthorized: No token provided",
            error_code=ErrorCode.UNAUTHORIZED,
        )

    user = await identity_provider.verify_token(credentials.credentials)

    try:
        identity = await identity_provider.get_identity(user.uid)
    except IdentityProviderError as e:
        if e.error_code == ErrorCode.USER_NOT_FOUND:
            raise AuthenticationError(
                message="Unauthorized: Invalid token",
                error_code=ErrorCode.INVALID_TOKEN,
            ) from e
        raise

    if identity.disabled:
        raise AuthenticationError(
            message="Unauthorized: Account disabled",
            error_code=ErrorCode.USER_DISABLED,
        )

    return replace(
        user,
        email_verified=identity.email_verified,
        is_admin=identity.is_admin,
    )


# Type alias for convenience in route handlers
CurrentUser = Annotated[TokenUser, Depends(get_current_user)]
