"""Pydantic schemas for Auth API."""

from pydantic import Field

from api.v1.schemas.common import CamelModel, WarningResponse
from api.v1.schemas.profile import ProfileResponse


class SignupRequest(CamelModel):
    """Schema for signing up.

    Format rules (email pattern, password strength) are enforced by the
    signup service so that they produce field-specific errors.
    """

    email: str = Field(..., max_length=254)
    password: str = Field(..., max_length=128)
    display_name: str = Field(..., max_length=100)
    phone_number: str | None = Field(None, max_length=20)


class SignupResponse(CamelModel):
    """Schema for a completed signup."""

    message: str = "User created successfully"
    uid: str
    email_verified: bool = False
    profile: ProfileResponse
    warnings: list[WarningResponse] = Field(default_factory=list)


class SessionResponse(CamelModel):
    """Schema for a session load."""

    profile: ProfileResponse
    email_verified: bool
    is_admin: bool
    created: bool = False


class VerificationEmailResponse(CamelModel):
    """Schema for a verification email resend."""

    message: str
    sent: bool
