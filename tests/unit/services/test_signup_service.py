"""Unit tests for SignupService."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from firebase_admin import auth

from core.exceptions import (
    VERIFICATION_EMAIL_FAILED,
    ErrorCode,
    IdentityProviderError,
    StoreError,
    ValidationError,
)
from domain.entities.profile import Profile
from domain.services.signup_service import SignupService
from infrastructure.auth.firebase_provider import FirebaseIdentityProvider
from infrastructure.auth.provider import TokenUser
from tests.fakes import FakeIdentityProvider, InMemoryProfileRepository


@pytest.fixture
def service(
    profiles: InMemoryProfileRepository, identities: FakeIdentityProvider
) -> SignupService:
    return SignupService(profiles, identities)


# --- happy path ---


class TestSignup:
    @pytest.mark.asyncio
    async def test_creates_identity_and_profile(
        self,
        service: SignupService,
        profiles: InMemoryProfileRepository,
        identities: FakeIdentityProvider,
    ):
        result = await service.signup("a@b.com", "Passw0rd", "A B")

        assert result.uid in identities.identities
        stored = profiles.docs[result.uid]
        assert stored.email == "a@b.com"
        assert stored.display_name == "A B"
        assert stored.first_name == "A"
        assert stored.last_name == "B"
        assert stored.profile_complete is False
        assert stored.is_active is True
        assert stored.created_at == stored.updated_at
        assert result.email_verified is False
        assert result.warnings == []

    @pytest.mark.asyncio
    async def test_sends_verification_email(
        self, service: SignupService, identities: FakeIdentityProvider
    ):
        result = await service.signup("a@b.com", "Passw0rd", "A B")

        assert identities.verification_sent == [result.uid]

    @pytest.mark.asyncio
    async def test_multi_word_last_name(self, service: SignupService):
        result = await service.signup("asha@example.com", "Passw0rd", "  Asha  Devi Rao ")

        assert result.profile.display_name == "Asha  Devi Rao"
        assert result.profile.first_name == "Asha"
        assert result.profile.last_name == "Devi Rao"

    @pytest.mark.asyncio
    async def test_stores_phone_number(self, service: SignupService):
        result = await service.signup(
            "asha@example.com", "Passw0rd", "Asha", phone_number="+919876543210"
        )

        assert result.profile.phone_number == "+919876543210"
        assert result.profile.last_name == ""


# --- validation ---


class TestSignupValidation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("email", "password", "display_name", "field"),
        [
            ("", "Passw0rd", "A B", "email"),
            ("a@b.com", "", "A B", "password"),
            ("a@b.com", "Passw0rd", "   ", "display_name"),
            ("not-an-email", "Passw0rd", "A B", "email"),
            ("a@b.com", "Pw0rd", "A B", "password"),
            ("a@b.com", "password1", "A B", "password"),
        ],
    )
    async def test_rejects_before_any_external_call(
        self,
        service: SignupService,
        profiles: InMemoryProfileRepository,
        identities: FakeIdentityProvider,
        email: str,
        password: str,
        display_name: str,
        field: str,
    ):
        with pytest.raises(ValidationError) as exc_info:
            await service.signup(email, password, display_name)

        assert exc_info.value.field == field
        assert identities.identities == {}
        assert profiles.calls == []

    @pytest.mark.asyncio
    async def test_identity_rejection_propagates(
        self,
        service: SignupService,
        profiles: InMemoryProfileRepository,
        identities: FakeIdentityProvider,
    ):
        identities.add("existing", email="a@b.com")

        with pytest.raises(IdentityProviderError) as exc_info:
            await service.signup("a@b.com", "Passw0rd", "A B")

        assert exc_info.value.error_code == ErrorCode.EMAIL_ALREADY_EXISTS
        assert exc_info.value.message == "An account with this email already exists"
        assert profiles.calls == []


# --- compensation ---


class TestSignupCompensation:
    @pytest.mark.asyncio
    async def test_profile_failure_deletes_identity(
        self,
        service: SignupService,
        profiles: InMemoryProfileRepository,
        identities: FakeIdentityProvider,
    ):
        profiles.fail_create = True

        with pytest.raises(StoreError) as exc_info:
            await service.signup("a@b.com", "Passw0rd", "A B")

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Failed to create user profile"
        assert identities.identities == {}
        assert len(identities.deleted) == 1
        assert identities.verification_sent == []

    @pytest.mark.asyncio
    async def test_retry_after_compensation_succeeds(
        self,
        service: SignupService,
        profiles: InMemoryProfileRepository,
        identities: FakeIdentityProvider,
    ):
        profiles.fail_create = True
        with pytest.raises(StoreError):
            await service.signup("a@b.com", "Passw0rd", "A B")

        profiles.fail_create = False
        result = await service.signup("a@b.com", "Passw0rd", "A B")

        assert list(identities.identities) == [result.uid]
        assert list(profiles.docs) == [result.uid]

    @pytest.mark.asyncio
    async def test_compensation_failure_keeps_original_error(
        self,
        service: SignupService,
        profiles: InMemoryProfileRepository,
        identities: FakeIdentityProvider,
    ):
        profiles.fail_create = True
        identities.fail_delete = True

        with pytest.raises(StoreError):
            await service.signup("a@b.com", "Passw0rd", "A B")

        # Orphaned identity is left behind, but no profile
        assert len(identities.identities) == 1
        assert profiles.docs == {}

    @pytest.mark.asyncio
    async def test_existing_document_counts_as_failure(self, identities: FakeIdentityProvider):
        profiles = AsyncMock()
        profiles.create.return_value = None
        service = SignupService(profiles, identities)

        with pytest.raises(StoreError):
            await service.signup("a@b.com", "Passw0rd", "A B")

        assert identities.identities == {}

    @pytest.mark.asyncio
    async def test_unexpected_error_also_compensates(self, identities: FakeIdentityProvider):
        profiles = AsyncMock()
        profiles.create.side_effect = RuntimeError("boom")
        service = SignupService(profiles, identities)

        with pytest.raises(RuntimeError):
            await service.signup("a@b.com", "Passw0rd", "A B")

        assert len(identities.deleted) == 1


# --- verification email ---


class TestVerificationEmail:
    @pytest.mark.asyncio
    async def test_failure_is_reported_as_warning(
        self,
        service: SignupService,
        profiles: InMemoryProfileRepository,
        identities: FakeIdentityProvider,
    ):
        identities.fail_send_verification = True

        result = await service.signup("a@b.com", "Passw0rd", "A B")

        assert [w.code for w in result.warnings] == [VERIFICATION_EMAIL_FAILED]
        assert result.uid in identities.identities
        assert isinstance(profiles.docs[result.uid], Profile)

    @pytest.mark.asyncio
    async def test_malformed_toolkit_reply_is_reported_as_warning(
        self,
        service: SignupService,
        profiles: InMemoryProfileRepository,
        identities: FakeIdentityProvider,
    ):
        firebase = FirebaseIdentityProvider(
            MagicMock(),
            web_api_key="web-key",
            toolkit_url="https://toolkit.test/v1",
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json={})),
        )
        identities.send_verification_email = firebase.send_verification_email  # type: ignore[method-assign]

        with patch.object(auth, "create_custom_token", return_value=b"custom-token"):
            result = await service.signup("a@b.com", "Passw0rd", "A B")

        assert [w.code for w in result.warnings] == [VERIFICATION_EMAIL_FAILED]
        assert result.uid in identities.identities
        assert result.uid in profiles.docs


# --- resend verification email ---


class TestResendVerificationEmail:
    @pytest.mark.asyncio
    async def test_sends_for_unverified_caller(
        self, service: SignupService, identities: FakeIdentityProvider
    ):
        sent = await service.resend_verification_email(
            TokenUser(uid="u1", email="u1@example.com", email_verified=False)
        )

        assert sent is True
        assert identities.verification_sent == ["u1"]

    @pytest.mark.asyncio
    async def test_skips_verified_caller(
        self, service: SignupService, identities: FakeIdentityProvider
    ):
        sent = await service.resend_verification_email(
            TokenUser(uid="u1", email="u1@example.com", email_verified=True)
        )

        assert sent is False
        assert identities.verification_sent == []

    @pytest.mark.asyncio
    async def test_provider_failure_propagates(
        self, service: SignupService, identities: FakeIdentityProvider
    ):
        identities.fail_send_verification = True

        with pytest.raises(IdentityProviderError):
            await service.resend_verification_email(
                TokenUser(uid="u1", email="u1@example.com")
            )
