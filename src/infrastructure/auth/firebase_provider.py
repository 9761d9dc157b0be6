"""Firebase Authentication identity provider.

Token verification and user management go through the ``firebase-admin``
SDK. The SDK's auth calls are blocking, so they run in worker threads.

The Admin SDK cannot send the verification email itself; it is sent through
the Identity Toolkit REST API on the user's behalf:

    custom token --signInWithCustomToken--> ID token --sendOobCode--> email
"""

import asyncio
import logging
from typing import Any, Optional

import firebase_admin
import httpx
from firebase_admin import auth
from firebase_admin import exceptions as firebase_exceptions

from core.config import settings
from core.exceptions import AuthenticationError, ErrorCode, IdentityProviderError
from domain.entities.identity import Identity
from infrastructure.auth.provider import TokenUser

logger = logging.getLogger(__name__)

# Identity Toolkit REST error messages -> error codes
_REST_ERROR_CODES: dict[str, ErrorCode] = {
    "EMAIL_EXISTS": ErrorCode.EMAIL_ALREADY_EXISTS,
    "INVALID_EMAIL": ErrorCode.INVALID_EMAIL,
    "WEAK_PASSWORD": ErrorCode.WEAK_PASSWORD,
    "USER_DISABLED": ErrorCode.USER_DISABLED,
    "USER_NOT_FOUND": ErrorCode.USER_NOT_FOUND,
    "TOO_MANY_ATTEMPTS_TRY_LATER": ErrorCode.TOO_MANY_REQUESTS,
    "OPERATION_NOT_ALLOWED": ErrorCode.OPERATION_NOT_ALLOWED,
}


def map_firebase_error(exc: Exception) -> IdentityProviderError:
    """Translate a firebase-admin failure into an IdentityProviderError."""
    code = ErrorCode.IDENTITY_PROVIDER_ERROR
    if isinstance(exc, auth.EmailAlreadyExistsError):
        code = ErrorCode.EMAIL_ALREADY_EXISTS
    elif isinstance(exc, auth.PhoneNumberAlreadyExistsError):
        code = ErrorCode.PHONE_NUMBER_ALREADY_EXISTS
    elif isinstance(exc, auth.UserNotFoundError):
        code = ErrorCode.USER_NOT_FOUND
    elif isinstance(exc, auth.UserDisabledError):
        code = ErrorCode.USER_DISABLED
    elif isinstance(exc, firebase_exceptions.ResourceExhaustedError):
        code = ErrorCode.TOO_MANY_REQUESTS
    elif isinstance(exc, firebase_exceptions.PermissionDeniedError):
        code = ErrorCode.OPERATION_NOT_ALLOWED
    elif isinstance(exc, (ValueError, firebase_exceptions.InvalidArgumentError)):
        # Argument checks raise ValueError before any network call; the
        # backend reports the same problems as INVALID_ARGUMENT.
        message = str(exc).lower()
        if "password" in message:
            code = ErrorCode.WEAK_PASSWORD
        elif "phone" in message:
            code = ErrorCode.INVALID_PHONE_NUMBER
        elif "email" in message:
            code = ErrorCode.INVALID_EMAIL
    return IdentityProviderError(code, diagnostic=str(exc))


def _to_identity(record: auth.UserRecord) -> Identity:
    return Identity(
        uid=record.uid,
        email=record.email or "",
        email_verified=bool(record.email_verified),
        display_name=record.display_name or "",
        photo_url=record.photo_url,
        phone_number=record.phone_number,
        disabled=bool(record.disabled),
        custom_claims=dict(record.custom_claims or {}),
    )


class FirebaseIdentityProvider:
    """Identity provider backed by Firebase Authentication."""

    def __init__(
        self,
        app: firebase_admin.App,
        web_api_key: str = settings.firebase_web_api_key,
        check_revoked: bool = settings.firebase_check_revoked,
        toolkit_url: str = settings.identity_toolkit_url,
        timeout: float = settings.http_timeout_seconds,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._app = app
        self._web_api_key = web_api_key
        self._check_revoked = check_revoked
        self._toolkit_url = toolkit_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def verify_token(self, token: str) -> TokenUser:
        """Verify a Firebase ID token."""
        try:
            decoded = await asyncio.to_thread(
                auth.verify_id_token,
                token,
                app=self._app,
                check_revoked=self._check_revoked,
            )
        except auth.ExpiredIdTokenError as e:
            raise AuthenticationError(
                message="Token has expired",
                error_code=ErrorCode.TOKEN_EXPIRED,
            ) from e
        except (auth.InvalidIdTokenError, auth.UserDisabledError, ValueError) as e:
            logger.info("Rejected ID token: %s", e)
            raise AuthenticationError(
                message="Unauthorized: Invalid token",
                error_code=ErrorCode.INVALID_TOKEN,
            ) from e
        except auth.CertificateFetchError as e:
            logger.error("Could not fetch token signing certificates: %s", e)
            raise AuthenticationError(
                message="Unauthorized: Invalid token",
                error_code=ErrorCode.INVALID_TOKEN,
            ) from e

        return TokenUser(
            uid=decoded["uid"],
            email=decoded.get("email", ""),
            email_verified=bool(decoded.get("email_verified", False)),
            display_name=decoded.get("name"),
        )

    async def create_identity(
        self,
        email: str,
        password: str,
        display_name: str,
        phone_number: Optional[str] = None,
    ) -> Identity:
        """Create a Firebase user with its display name set."""
        kwargs: dict[str, Any] = {
            "email": email,
            "password": password,
            "display_name": display_name,
        }
        if phone_number:
            kwargs["phone_number"] = phone_number

        record = await self._call(auth.create_user, **kwargs)
        return _to_identity(record)

    async def get_identity(self, uid: str) -> Identity:
        """Fetch the live user record, custom claims included."""
        record = await self._call(auth.get_user, uid)
        return _to_identity(record)

    async def update_identity(
        self,
        uid: str,
        display_name: Optional[str] = None,
        photo_url: Optional[str] = None,
    ) -> None:
        """Update display name / photo URL. Empty strings clear the attribute."""
        kwargs: dict[str, Any] = {}
        if display_name is not None:
            kwargs["display_name"] = display_name or auth.DELETE_ATTRIBUTE
        if photo_url is not None:
            kwargs["photo_url"] = photo_url or auth.DELETE_ATTRIBUTE
        if not kwargs:
            return
        await self._call(auth.update_user, uid, **kwargs)

    async def delete_identity(self, uid: str) -> None:
        """Delete the Firebase user."""
        await self._call(auth.delete_user, uid)

    async def set_custom_claims(self, uid: str, claims: dict[str, bool]) -> None:
        """Replace the user's custom claims."""
        await self._call(auth.set_custom_user_claims, uid, claims)
        logger.info("Custom claims set for user %s: %s", uid, claims)

    async def send_verification_email(self, uid: str) -> None:
        """Send the verification email through the Identity Toolkit REST API."""
        if not self._web_api_key:
            raise IdentityProviderError(
                diagnostic="FIREBASE_WEB_API_KEY is not configured",
                message="Verification email is not configured",
            )

        custom_token = await self._call(auth.create_custom_token, uid)
        if isinstance(custom_token, bytes):
            custom_token = custom_token.decode("utf-8")

        async with httpx.AsyncClient(
            timeout=self._timeout, transport=self._transport
        ) as client:
            signed_in = await self._post_toolkit(
                client,
                "accounts:signInWithCustomToken",
                {"token": custom_token, "returnSecureToken": True},
            )
            id_token = signed_in.get("idToken")
            if not isinstance(id_token, str) or not id_token:
                raise IdentityProviderError(
                    diagnostic="accounts:signInWithCustomToken: no idToken in reply"
                )
            await self._post_toolkit(
                client,
                "accounts:sendOobCode",
                {"requestType": "VERIFY_EMAIL", "idToken": id_token},
            )

    async def _post_toolkit(
        self, client: httpx.AsyncClient, method: str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        try:
            response = await client.post(
                f"{self._toolkit_url}/{method}",
                params={"key": self._web_api_key},
                json=payload,
            )
        except httpx.HTTPError as e:
            raise IdentityProviderError(diagnostic=f"{method}: {e}") from e

        if response.is_error:
            reason = _rest_error_reason(response)
            # Messages look like "WEAK_PASSWORD : Password should be..."
            code = _REST_ERROR_CODES.get(
                reason.split(":")[0].strip(), ErrorCode.IDENTITY_PROVIDER_ERROR
            )
            raise IdentityProviderError(code, diagnostic=f"{method}: {reason}")

        try:
            body = response.json()
        except ValueError as e:
            raise IdentityProviderError(
                diagnostic=f"{method}: undecodable reply"
            ) from e
        if not isinstance(body, dict):
            raise IdentityProviderError(diagnostic=f"{method}: unexpected reply")
        return body

    async def _call(self, fn: Any, *args: Any, **kwargs: Any) -> Any:
        """Run a blocking firebase-admin call off the event loop."""
        try:
            return await asyncio.to_thread(fn, *args, app=self._app, **kwargs)
        except (firebase_exceptions.FirebaseError, ValueError) as e:
            raise map_firebase_error(e) from e


def _rest_error_reason(response: httpx.Response) -> str:
    """Extract the Identity Toolkit error message from an error reply."""
    try:
        body = response.json()
    except ValueError:
        return response.text
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return str(error.get("message", ""))
    if isinstance(error, str):
        return error
    return response.text
