"""Signup service: creates an identity and its profile together."""

from dataclasses import dataclass, field
from typing import Optional

import structlog

from core.exceptions import (
    VERIFICATION_EMAIL_FAILED,
    AppException,
    PartialFailureWarning,
    StoreError,
)
from domain.entities.profile import Profile, split_display_name
from domain.repositories.profile_repository import IProfileRepository
from domain.validation import validate_signup
from infrastructure.auth.provider import IIdentityProvider, TokenUser

logger = structlog.get_logger()


@dataclass
class SignupResult:
    """Outcome of a successful signup."""

    uid: str
    profile: Profile
    email_verified: bool = False
    warnings: list[PartialFailureWarning] = field(default_factory=list)


class SignupService:
    """Service layer for the signup and profile-creation sequence.

    Either both the identity and its profile exist afterwards, or the
    identity is compensated away (or, if that also fails, logged as orphaned)
    so that signup can be retried. A profile never exists without its
    identity.
    """

    def __init__(
        self,
        profiles: IProfileRepository,
        identities: IIdentityProvider,
    ) -> None:
        self._profiles = profiles
        self._identities = identities

    async def signup(
        self,
        email: str,
        password: str,
        display_name: str,
        phone_number: Optional[str] = None,
    ) -> SignupResult:
        """Create identity, then profile, then send the verification email."""
        validate_signup(email, password, display_name)
        display_name = display_name.strip()
        phone_number = (phone_number or "").strip() or None

        identity = await self._identities.create_identity(
            email=email,
            password=password,
            display_name=display_name,
            phone_number=phone_number,
        )
        log = logger.bind(uid=identity.uid)
        log.info("identity_created")

        first_name, last_name = split_display_name(display_name)
        seed = Profile.for_identity(
            identity,
            {
                "display_name": display_name,
                "first_name": first_name,
                "last_name": last_name,
                "phone_number": phone_number or "",
            },
        )

        try:
            profile = await self._profiles.create(seed)
            if profile is None:
                raise StoreError("create user profile", diagnostic="profile already exists")
        except Exception as e:
            log.error(
                "signup_profile_creation_failed",
                error=getattr(e, "diagnostic", None) or str(e),
            )
            await self._compensate(identity.uid)
            raise

        warnings: list[PartialFailureWarning] = []
        try:
            await self._identities.send_verification_email(identity.uid)
        except AppException as e:
            log.warning(
                "verification_email_failed",
                error=getattr(e, "diagnostic", None) or e.message,
            )
            warnings.append(
                PartialFailureWarning(
                    code=VERIFICATION_EMAIL_FAILED,
                    message="Account created, but the verification email could not be sent",
                )
            )

        log.info("signup_completed", warnings=len(warnings))
        return SignupResult(
            uid=identity.uid,
            profile=profile,
            email_verified=identity.email_verified,
            warnings=warnings,
        )

    async def resend_verification_email(self, user: TokenUser) -> bool:
        """Send another verification email to an unverified caller.

        Returns False without calling the provider when the live identity is
        already verified.
        """
        if user.email_verified:
            logger.info("verification_email_skipped", uid=user.uid)
            return False

        await self._identities.send_verification_email(user.uid)
        logger.info("verification_email_resent", uid=user.uid)
        return True

    async def _compensate(self, uid: str) -> None:
        """Delete the just-created identity once. Failure is logged, not raised."""
        try:
            await self._identities.delete_identity(uid)
            logger.info("signup_identity_compensated", uid=uid)
        except AppException as e:
            logger.error(
                "signup_compensation_failed",
                uid=uid,
                error=getattr(e, "diagnostic", None) or e.message,
            )
