"""Custom exceptions and error codes."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"
    ADMIN_REQUIRED = "ADMIN_REQUIRED"

    # Not found errors (404)
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Identity provider errors (400)
    EMAIL_ALREADY_EXISTS = "EMAIL_ALREADY_EXISTS"
    INVALID_EMAIL = "INVALID_EMAIL"
    WEAK_PASSWORD = "WEAK_PASSWORD"
    INVALID_PHONE_NUMBER = "INVALID_PHONE_NUMBER"
    PHONE_NUMBER_ALREADY_EXISTS = "PHONE_NUMBER_ALREADY_EXISTS"
    USER_DISABLED = "USER_DISABLED"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    TOO_MANY_REQUESTS = "TOO_MANY_REQUESTS"
    OPERATION_NOT_ALLOWED = "OPERATION_NOT_ALLOWED"
    IDENTITY_PROVIDER_ERROR = "IDENTITY_PROVIDER_ERROR"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    STORE_ERROR = "STORE_ERROR"


# User-facing messages for identity provider failures
IDENTITY_ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.EMAIL_ALREADY_EXISTS: "An account with this email already exists",
    ErrorCode.INVALID_EMAIL: "Invalid email address",
    ErrorCode.WEAK_PASSWORD: "Password is too weak",
    ErrorCode.INVALID_PHONE_NUMBER: "Invalid phone number. Use the E.164 format, e.g. +919876543210",
    ErrorCode.PHONE_NUMBER_ALREADY_EXISTS: "An account with this phone number already exists",
    ErrorCode.USER_DISABLED: "This account has been disabled",
    ErrorCode.USER_NOT_FOUND: "User not found",
    ErrorCode.TOO_MANY_REQUESTS: "Too many requests. Please try again later",
    ErrorCode.OPERATION_NOT_ALLOWED: "Email/password sign-up is not enabled",
    ErrorCode.IDENTITY_PROVIDER_ERROR: "Authentication service error",
}


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class ValidationError(AppException):
    """Input rejected before any external call."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=400,
            details={"field": field} if field else None,
        )
        self.field = field


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class AccessDeniedError(AppException):
    """Authenticated, but not entitled to the target resource."""

    def __init__(
        self,
        message: str = "Access denied",
        error_code: ErrorCode = ErrorCode.FORBIDDEN,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=403,
        )


class AdminRequiredError(AccessDeniedError):
    """Admin claim required."""

    def __init__(self) -> None:
        super().__init__(
            message="Admin access required",
            error_code=ErrorCode.ADMIN_REQUIRED,
        )


class ProfileNotFoundError(AppException):
    """Profile document not found."""

    def __init__(self, uid: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message="User profile not found",
            status_code=404,
            details={"uid": uid},
        )


class IdentityProviderError(AppException):
    """The identity provider rejected or failed an operation.

    The message returned to clients is the sanitized one for the error code;
    the provider's own diagnostic is kept in ``diagnostic`` for logging.
    """

    def __init__(
        self,
        error_code: ErrorCode = ErrorCode.IDENTITY_PROVIDER_ERROR,
        diagnostic: str | None = None,
        message: str | None = None,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message or IDENTITY_ERROR_MESSAGES.get(
                error_code, IDENTITY_ERROR_MESSAGES[ErrorCode.IDENTITY_PROVIDER_ERROR]
            ),
            status_code=400,
        )
        self.diagnostic = diagnostic


class StoreError(AppException):
    """A profile store operation failed."""

    def __init__(self, operation: str, diagnostic: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.STORE_ERROR,
            message=f"Failed to {operation}",
            status_code=500,
        )
        self.operation = operation
        self.diagnostic = diagnostic


@dataclass(frozen=True)
class PartialFailureWarning:
    """Non-fatal failure that happened after the primary write succeeded."""

    code: str
    message: str

    def as_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}


VERIFICATION_EMAIL_FAILED = "verification_email_failed"
IDENTITY_SYNC_FAILED = "identity_sync_failed"
