"""Shared fixtures for unit tests."""

import pytest

from domain.entities.profile import Profile
from infrastructure.auth.provider import TokenUser
from tests.fakes import FakeIdentityProvider, InMemoryProfileRepository


@pytest.fixture
def user(identities: FakeIdentityProvider) -> TokenUser:
    """A regular user with an identity."""
    identities.add("alice", email="alice@example.com", display_name="Alice Rao")
    return TokenUser(uid="alice", email="alice@example.com", display_name="Alice Rao")


@pytest.fixture
def other_user(identities: FakeIdentityProvider) -> TokenUser:
    """A second regular user (distinct from user)."""
    identities.add("bob", email="bob@example.com", display_name="Bob")
    return TokenUser(uid="bob", email="bob@example.com", display_name="Bob")


@pytest.fixture
def admin(identities: FakeIdentityProvider) -> TokenUser:
    """A user holding the admin claim."""
    identities.add("root", email="root@example.com", display_name="Root", admin=True)
    return TokenUser(uid="root", email="root@example.com", is_admin=True)


@pytest.fixture
def stored_profile(profiles: InMemoryProfileRepository, user: TokenUser) -> Profile:
    """A stored profile for user."""
    return profiles.seed(
        Profile(
            uid=user.uid,
            email=user.email,
            display_name="Alice Rao",
            first_name="Alice",
            last_name="Rao",
            skills=["React"],
            bio="Frontend dev",
        )
    )
