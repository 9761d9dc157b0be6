"""Dependency injection factories for API v1."""

from functools import lru_cache

from api.dependencies.auth import get_identity_provider
from core.config import settings
from domain.repositories.profile_repository import IProfileRepository
from domain.services.profile_service import ProfileService
from domain.services.signup_service import SignupService
from infrastructure.firebase.app import get_firestore_client
from infrastructure.firebase.profile_repo import FirestoreProfileRepository


@lru_cache
def get_profile_repository() -> IProfileRepository:
    """Get the Firestore-backed profile repository."""
    return FirestoreProfileRepository(get_firestore_client(), settings.users_collection)


@lru_cache
def get_profile_service() -> ProfileService:
    """Get Profile service instance."""
    return ProfileService(get_profile_repository(), get_identity_provider())


@lru_cache
def get_signup_service() -> SignupService:
    """Get Signup service instance."""
    return SignupService(get_profile_repository(), get_identity_provider())
