"""Profile repository protocol."""

from typing import Any, Protocol

from domain.entities.profile import Profile, ProfilePage


class IProfileRepository(Protocol):
    """Repository interface for Profile documents, keyed by uid."""

    async def get(self, uid: str) -> Profile | None:
        """Get a profile by uid."""
        ...

    async def create(self, profile: Profile) -> Profile | None:
        """Write a complete new profile, stamping both timestamps.

        Returns the stored profile, or None if a document already exists for
        the uid (an existing document is never overwritten).
        """
        ...

    async def merge(self, uid: str, changes: dict[str, Any]) -> Profile | None:
        """Apply a partial update and stamp ``updated_at``.

        Returns the stored profile, or None if no document exists for ``uid``.
        """
        ...

    async def delete(self, uid: str) -> None:
        """Delete a profile document (no-op if missing)."""
        ...

    async def query_by_email(self, email: str) -> list[Profile]:
        """Get all profiles whose email matches exactly."""
        ...

    async def list_page(self, limit: int, cursor: str | None = None) -> ProfilePage:
        """Get a page of profiles ordered by ``created_at`` descending.

        ``cursor`` is the uid of the last profile of the previous page.
        """
        ...

    async def ping(self) -> None:
        """Cheap round-trip used by health checks."""
        ...
