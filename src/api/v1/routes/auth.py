"""Auth API routes."""

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_profile_service, get_signup_service
from api.v1.schemas.auth import (
    SessionResponse,
    SignupRequest,
    SignupResponse,
    VerificationEmailResponse,
)
from api.v1.schemas.common import WarningResponse
from api.v1.schemas.profile import ProfileResponse
from core.rate_limit import limiter
from domain.services.profile_service import ProfileService
from domain.services.signup_service import SignupService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Sign up",
    responses={
        201: {"description": "Identity and profile created"},
        400: {"description": "Invalid input or rejected by the identity provider"},
        500: {"description": "Profile could not be created; identity rolled back"},
    },
)
@limiter.limit("5/minute")  # type: ignore[untyped-decorator]
async def signup(
    request: Request,
    body: SignupRequest,
    service: SignupService = Depends(get_signup_service),
) -> SignupResponse:
    """Create an identity and its profile, then send the verification email.

    A verification email that could not be sent is reported in `warnings`.
    """
    result = await service.signup(
        email=body.email,
        password=body.password,
        display_name=body.display_name,
        phone_number=body.phone_number,
    )
    return SignupResponse(
        uid=result.uid,
        email_verified=result.email_verified,
        profile=ProfileResponse.model_validate(result.profile),
        warnings=[WarningResponse(**w.as_dict()) for w in result.warnings],
    )


@router.post(
    "/session",
    response_model=SessionResponse,
    summary="Load the caller's session",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def load_session(
    request: Request,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> SessionResponse:
    """Return the caller's profile and live verification/admin status.

    Creates a basic profile if the caller does not have one yet.
    """
    session = await service.load_session(user)
    return SessionResponse(
        profile=ProfileResponse.model_validate(session.profile),
        email_verified=session.email_verified,
        is_admin=session.is_admin,
        created=session.created,
    )


@router.post(
    "/verification-email",
    response_model=VerificationEmailResponse,
    summary="Resend the verification email",
    responses={
        400: {"description": "The identity provider could not send the email"},
    },
)
@limiter.limit("5/minute")  # type: ignore[untyped-decorator]
async def resend_verification_email(
    request: Request,
    user: CurrentUser,
    service: SignupService = Depends(get_signup_service),
) -> VerificationEmailResponse:
    """Send the verification email again. Verified callers get `sent: false`."""
    sent = await service.resend_verification_email(user)
    return VerificationEmailResponse(
        message="Verification email sent" if sent else "Email already verified",
        sent=sent,
    )
