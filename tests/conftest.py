"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator
from pathlib import Path

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.services.profile_service import ProfileService
from domain.services.signup_service import SignupService
from tests.fakes import FakeIdentityProvider, InMemoryProfileRepository


@pytest.fixture
def profiles() -> InMemoryProfileRepository:
    """Empty in-memory profile store."""
    return InMemoryProfileRepository()


@pytest.fixture
def identities() -> FakeIdentityProvider:
    """Empty fake identity provider."""
    return FakeIdentityProvider()


@pytest.fixture
def app(profiles: InMemoryProfileRepository, identities: FakeIdentityProvider) -> FastAPI:
    """
    Create the application wired to the in-memory fakes.

    The Firebase-backed factories are overridden, so no Firebase app is
    ever initialized.
    """
    from api.dependencies.auth import get_identity_provider
    from api.v1.dependencies import (
        get_profile_repository,
        get_profile_service,
        get_signup_service,
    )
    from main import create_app

    app = create_app()
    app.dependency_overrides[get_identity_provider] = lambda: identities
    app.dependency_overrides[get_profile_repository] = lambda: profiles
    app.dependency_overrides[get_profile_service] = lambda: ProfileService(profiles, identities)
    app.dependency_overrides[get_signup_service] = lambda: SignupService(profiles, identities)
    return app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
