"""Profile service layer: self-service and admin profile operations."""

from dataclasses import dataclass, field
from typing import Any, Mapping

import structlog

from core.exceptions import (
    IDENTITY_SYNC_FAILED,
    AccessDeniedError,
    AdminRequiredError,
    AppException,
    ErrorCode,
    IdentityProviderError,
    PartialFailureWarning,
    ProfileNotFoundError,
    StoreError,
    ValidationError,
)
from domain.entities.profile import (
    MIRRORED_FIELDS,
    Profile,
    ProfilePage,
    clean_changes,
    split_display_name,
)
from domain.repositories.profile_repository import IProfileRepository
from infrastructure.auth.provider import IIdentityProvider, TokenUser

logger = structlog.get_logger()

MAX_PAGE_SIZE = 100


@dataclass
class ProfileUpdateResult:
    """Outcome of a profile update."""

    profile: Profile
    created: bool = False
    warnings: list[PartialFailureWarning] = field(default_factory=list)


@dataclass
class SessionState:
    """What the client needs after an auth-state change."""

    profile: Profile
    email_verified: bool
    is_admin: bool
    created: bool = False


class ProfileService:
    """Service layer for Profile business logic.

    Every operation on another uid's profile checks self-or-admin before the
    store is touched.
    """

    def __init__(
        self,
        profiles: IProfileRepository,
        identities: IIdentityProvider,
    ) -> None:
        self._profiles = profiles
        self._identities = identities

    async def get_profile(self, actor: TokenUser, uid: str) -> Profile:
        """Get a stored profile. Never creates one."""
        self._require_self_or_admin(actor, uid)
        profile = await self._profiles.get(uid)
        if not profile:
            raise ProfileNotFoundError(uid)
        return profile

    async def load_session(self, actor: TokenUser) -> SessionState:
        """Return the caller's profile, creating a basic one if it is missing.

        Identities created before the profile store existed (or whose profile
        creation was skipped) get their profile here.
        """
        profile = await self._profiles.get(actor.uid)
        created = False
        identity = await self._identities.get_identity(actor.uid)

        if not profile:
            first_name, last_name = split_display_name(identity.display_name)
            profile = await self._profiles.create(
                Profile.for_identity(
                    identity,
                    {"first_name": first_name, "last_name": last_name},
                )
            )
            if profile is None:
                # Created concurrently by another request
                profile = await self._profiles.get(actor.uid)
                if profile is None:
                    raise StoreError("create user profile")
            else:
                created = True
                logger.info("profile_self_healed", uid=actor.uid)

        return SessionState(
            profile=profile,
            email_verified=identity.email_verified,
            is_admin=identity.is_admin,
            created=created,
        )

    async def update_profile(
        self,
        actor: TokenUser,
        uid: str,
        changes: Mapping[str, Any],
    ) -> ProfileUpdateResult:
        """Merge ``changes`` into the profile, creating it if missing.

        Display name and photo URL are then mirrored to the identity,
        best-effort.
        """
        self._require_self_or_admin(actor, uid)
        cleaned = clean_changes(changes)

        created = False
        profile = await self._profiles.merge(uid, cleaned)
        if profile is None:
            profile = await self._create_from_identity(uid, cleaned)
            created = profile is not None
            if profile is None:
                # Lost a creation race; the document exists now
                profile = await self._profiles.merge(uid, cleaned)
                if profile is None:
                    raise StoreError("update user profile")

        warnings: list[PartialFailureWarning] = []
        mirrored = {key: cleaned[key] for key in MIRRORED_FIELDS if key in cleaned}
        if mirrored:
            try:
                await self._identities.update_identity(uid, **mirrored)
            except AppException as e:
                logger.warning(
                    "identity_sync_failed",
                    uid=uid,
                    fields=sorted(mirrored),
                    error=getattr(e, "diagnostic", None) or e.message,
                )
                warnings.append(
                    PartialFailureWarning(
                        code=IDENTITY_SYNC_FAILED,
                        message="Profile saved, but the account display details could not be updated",
                    )
                )

        logger.info(
            "profile_updated",
            uid=uid,
            actor=actor.uid,
            fields=sorted(cleaned),
            created=created,
        )
        return ProfileUpdateResult(profile=profile, created=created, warnings=warnings)

    async def mark_profile_complete(self, actor: TokenUser, uid: str) -> Profile:
        """Set ``profile_complete``. There is no way back to False."""
        self._require_self_or_admin(actor, uid)
        profile = await self._profiles.merge(uid, {"profile_complete": True})
        if profile is None:
            raise ProfileNotFoundError(uid)
        logger.info("profile_completed", uid=uid, actor=actor.uid)
        return profile

    async def delete_profile(self, actor: TokenUser, uid: str) -> None:
        """Delete the profile, then the identity.

        In this order a failure can only leave an identity without a
        profile, which the next session load repairs.
        """
        self._require_self_or_admin(actor, uid)
        await self._profiles.delete(uid)
        try:
            await self._identities.delete_identity(uid)
        except IdentityProviderError as e:
            if e.error_code != ErrorCode.USER_NOT_FOUND:
                logger.error(
                    "identity_deletion_failed",
                    uid=uid,
                    error=e.diagnostic or e.message,
                )
                raise
        logger.info("user_deleted", uid=uid, actor=actor.uid)

    async def list_profiles(
        self,
        actor: TokenUser,
        limit: int = 10,
        last_doc_id: str | None = None,
    ) -> ProfilePage:
        """Page through all profiles, newest first (admin only)."""
        self._require_admin(actor)
        if limit < 1 or limit > MAX_PAGE_SIZE:
            raise ValidationError(
                f"limit must be between 1 and {MAX_PAGE_SIZE}", field="limit"
            )
        return await self._profiles.list_page(limit, last_doc_id or None)

    async def search_by_email(self, actor: TokenUser, email: str) -> list[Profile]:
        """Find profiles by exact email (admin only)."""
        self._require_admin(actor)
        if not email:
            raise ValidationError("Email query parameter is required", field="email")
        return await self._profiles.query_by_email(email)

    async def set_admin(self, actor: TokenUser, uid: str, is_admin: bool) -> None:
        """Grant or revoke the admin claim (admin only)."""
        self._require_admin(actor)
        await self._identities.set_custom_claims(uid, {"admin": is_admin})
        logger.info("admin_claim_changed", uid=uid, actor=actor.uid, admin=is_admin)

    async def _create_from_identity(
        self, uid: str, cleaned: dict[str, Any]
    ) -> Profile | None:
        """Build a complete default profile from the live identity and write it."""
        identity = await self._identities.get_identity(uid)
        logger.info("profile_missing_on_update", uid=uid)
        return await self._profiles.create(Profile.for_identity(identity, cleaned))

    @staticmethod
    def _require_self_or_admin(actor: TokenUser, uid: str) -> None:
        if actor.uid != uid and not actor.is_admin:
            raise AccessDeniedError()

    @staticmethod
    def _require_admin(actor: TokenUser) -> None:
        if not actor.is_admin:
            raise AdminRequiredError()
