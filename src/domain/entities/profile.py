"""Profile domain entity."""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from core.exceptions import ValidationError
from domain.entities.identity import Identity

# Fields a caller may change through a profile update
UPDATABLE_FIELDS = frozenset(
    {
        "display_name",
        "phone_number",
        "photo_url",
        "first_name",
        "last_name",
        "date_of_birth",
        "gender",
        "location",
        "education",
        "interests",
        "skills",
        "career_goals",
        "bio",
        "experience",
        "job_title",
        "company",
        "address",
        "preferences",
    }
)

# Fields dual-written to the identity provider
MIRRORED_FIELDS = frozenset({"display_name", "photo_url"})


@dataclass
class Education:
    """Education block of a profile."""

    level: str = ""
    institution: str = ""
    field: str = ""
    graduation_year: int | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Education":
        return cls(
            level=data.get("level") or "",
            institution=data.get("institution") or "",
            field=data.get("field") or "",
            graduation_year=data.get("graduation_year"),
        )


@dataclass
class Profile:
    """Domain entity for an application profile, keyed by the identity uid."""

    uid: str
    email: str = ""
    display_name: str = ""
    phone_number: str = ""
    photo_url: str | None = None
    first_name: str = ""
    last_name: str = ""
    date_of_birth: str = ""
    gender: str = ""
    location: str = ""
    education: Education = field(default_factory=Education)
    interests: list[str] = field(default_factory=list)
    skills: list[str] = field(default_factory=list)
    career_goals: list[str] = field(default_factory=list)
    bio: str = ""
    experience: str = ""
    job_title: str = ""
    company: str = ""
    address: dict[str, Any] = field(default_factory=dict)
    preferences: dict[str, Any] = field(default_factory=dict)
    is_active: bool = True
    profile_complete: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def for_identity(cls, identity: Identity, changes: Mapping[str, Any] | None = None) -> "Profile":
        """Build a default profile from the live identity, then apply ``changes``."""
        profile = cls(
            uid=identity.uid,
            email=identity.email,
            display_name=identity.display_name,
            phone_number=identity.phone_number or "",
            photo_url=identity.photo_url or None,
        )
        return profile.apply(changes or {})

    def apply(self, changes: Mapping[str, Any]) -> "Profile":
        """Return a copy with already-cleaned ``changes`` applied."""
        return replace(self, **changes)


@dataclass
class ProfilePage:
    """One page of profiles, newest first."""

    items: list[Profile]
    last_doc_id: str | None
    has_more: bool


def split_display_name(display_name: str) -> tuple[str, str]:
    """Split "First Middle Last" into ("First", "Middle Last")."""
    parts = display_name.split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])


def clean_changes(changes: Mapping[str, Any]) -> dict[str, Any]:
    """Validate a partial update against the updatable field set.

    Keys carrying ``None`` are dropped, at the top level and inside the
    ``address`` and ``preferences`` maps: they mean "not provided", and no
    null markers are ever written to the store.
    """
    unknown = sorted(set(changes) - UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError(
            f"Unknown profile field(s): {', '.join(unknown)}",
            field=unknown[0],
        )

    cleaned = _drop_nulls(changes)
    education = cleaned.get("education")
    if isinstance(education, Mapping):
        cleaned["education"] = Education.from_mapping(education)
    return cleaned


def _drop_nulls(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _drop_nulls(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_drop_nulls(v) for v in value if v is not None]
    return value
