"""Firestore implementation of Profile repository."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from google.api_core import exceptions as gcp_exceptions
from google.cloud import firestore
from google.cloud.firestore import AsyncClient, DocumentSnapshot
from google.cloud.firestore_v1.base_query import FieldFilter

from core.exceptions import StoreError, ValidationError
from domain.entities.profile import Education, Profile, ProfilePage
from infrastructure.firebase.collections import COLLECTION_USERS

logger = logging.getLogger(__name__)

# Entity field -> document key. Documents keep the camelCase keys the
# frontend reads directly.
_FIELD_KEYS: dict[str, str] = {
    "uid": "uid",
    "email": "email",
    "display_name": "displayName",
    "phone_number": "phoneNumber",
    "photo_url": "photoURL",
    "first_name": "firstName",
    "last_name": "lastName",
    "date_of_birth": "dateOfBirth",
    "gender": "gender",
    "location": "location",
    "education": "education",
    "interests": "interests",
    "skills": "skills",
    "career_goals": "careerGoals",
    "bio": "bio",
    "experience": "experience",
    "job_title": "jobTitle",
    "company": "company",
    "address": "address",
    "preferences": "preferences",
    "is_active": "isActive",
    "profile_complete": "profileComplete",
}


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    """Translate Google API failures into StoreError."""
    try:
        yield
    except gcp_exceptions.GoogleAPICallError as e:
        logger.error("Firestore failed to %s: %s", operation, e)
        raise StoreError(operation, diagnostic=str(e)) from e


class FirestoreProfileRepository:
    """Firestore implementation of IProfileRepository."""

    def __init__(self, client: AsyncClient, collection: str = COLLECTION_USERS) -> None:
        self._collection = client.collection(collection)

    async def get(self, uid: str) -> Profile | None:
        """Get a profile by uid."""
        with _store_errors("retrieve user profile"):
            snapshot = await self._collection.document(uid).get()
        return self._to_entity(snapshot) if snapshot.exists else None

    async def create(self, profile: Profile) -> Profile | None:
        """Create a new profile document; None if one already exists."""
        document = self._to_document(profile)
        document["createdAt"] = firestore.SERVER_TIMESTAMP
        document["updatedAt"] = firestore.SERVER_TIMESTAMP

        try:
            with _store_errors("create user profile"):
                await self._collection.document(profile.uid).create(document)
        except StoreError as e:
            if isinstance(e.__cause__, gcp_exceptions.Conflict):
                return None
            raise
        return await self.get(profile.uid)

    async def merge(self, uid: str, changes: dict[str, Any]) -> Profile | None:
        """Apply a partial update; None if the document does not exist."""
        update = {_FIELD_KEYS[key]: self._to_value(value) for key, value in changes.items()}
        update["updatedAt"] = firestore.SERVER_TIMESTAMP

        try:
            with _store_errors("update user profile"):
                await self._collection.document(uid).update(update)
        except StoreError as e:
            if isinstance(e.__cause__, gcp_exceptions.NotFound):
                return None
            raise
        return await self.get(uid)

    async def delete(self, uid: str) -> None:
        """Delete a profile document."""
        with _store_errors("delete user profile"):
            await self._collection.document(uid).delete()

    async def query_by_email(self, email: str) -> list[Profile]:
        """Get all profiles with the given email."""
        query = self._collection.where(filter=FieldFilter("email", "==", email))
        with _store_errors("get user by email"):
            return [self._to_entity(snapshot) async for snapshot in query.stream()]

    async def list_page(self, limit: int, cursor: str | None = None) -> ProfilePage:
        """Get a page of profiles, newest first."""
        query = self._collection.order_by(
            "createdAt", direction=firestore.Query.DESCENDING
        ).limit(limit)

        with _store_errors("retrieve users"):
            if cursor:
                cursor_snapshot = await self._collection.document(cursor).get()
                if not cursor_snapshot.exists:
                    raise ValidationError("Unknown pagination cursor", field="lastDocId")
                query = query.start_after(cursor_snapshot)

            items = [self._to_entity(snapshot) async for snapshot in query.stream()]

        return ProfilePage(
            items=items,
            last_doc_id=items[-1].uid if items else None,
            has_more=len(items) == limit,
        )

    async def ping(self) -> None:
        """Read at most one document to check connectivity."""
        with _store_errors("reach the profile store"):
            await self._collection.limit(1).get()

    @staticmethod
    def _to_value(value: Any) -> Any:
        if isinstance(value, Education):
            education: dict[str, Any] = {
                "level": value.level,
                "institution": value.institution,
                "field": value.field,
            }
            if value.graduation_year is not None:
                education["graduationYear"] = value.graduation_year
            return education
        return value

    def _to_document(self, profile: Profile) -> dict[str, Any]:
        """Convert entity to a document, omitting fields with no value."""
        document: dict[str, Any] = {}
        for field_name, key in _FIELD_KEYS.items():
            value = getattr(profile, field_name)
            if value is None:
                continue
            document[key] = self._to_value(value)
        return document

    def _to_entity(self, snapshot: DocumentSnapshot) -> Profile:
        """Convert a document snapshot to an entity."""
        data = snapshot.to_dict() or {}
        education = data.get("education") or {}
        return Profile(
            uid=data.get("uid") or snapshot.id,
            email=data.get("email", ""),
            display_name=data.get("displayName", ""),
            phone_number=data.get("phoneNumber", ""),
            photo_url=data.get("photoURL") or None,
            first_name=data.get("firstName", ""),
            last_name=data.get("lastName", ""),
            date_of_birth=data.get("dateOfBirth", ""),
            gender=data.get("gender", ""),
            location=data.get("location", ""),
            education=Education(
                level=education.get("level", ""),
                institution=education.get("institution", ""),
                field=education.get("field", ""),
                graduation_year=education.get("graduationYear"),
            ),
            interests=list(data.get("interests", [])),
            skills=list(data.get("skills", [])),
            career_goals=list(data.get("careerGoals", [])),
            bio=data.get("bio", ""),
            experience=data.get("experience", ""),
            job_title=data.get("jobTitle", ""),
            company=data.get("company", ""),
            address=dict(data.get("address", {})),
            preferences=dict(data.get("preferences", {})),
            is_active=data.get("isActive", True),
            profile_complete=data.get("profileComplete", False),
            created_at=_parse_timestamp(data.get("createdAt")),
            updated_at=_parse_timestamp(data.get("updatedAt")),
        )


def _parse_timestamp(value: Any) -> datetime | None:
    """Firestore timestamps arrive as datetimes; older documents hold ISO strings."""
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return None
    return None
