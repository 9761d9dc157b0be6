"""Pydantic schemas for Profile API."""

from datetime import datetime
from typing import Any

from pydantic import ConfigDict, Field

from api.v1.schemas.common import CamelModel, WarningResponse


class EducationSchema(CamelModel):
    """Education block."""

    level: str = Field("", max_length=100)
    institution: str = Field("", max_length=200)
    field: str = Field("", max_length=200)
    graduation_year: int | None = Field(None, ge=1900, le=2100)


class ProfileUpdate(CamelModel):
    """Schema for a partial profile update.

    Only the keys present in the request body are applied.
    """

    model_config = ConfigDict(extra="forbid")

    display_name: str | None = Field(None, max_length=100)
    phone_number: str | None = Field(None, max_length=20)
    photo_url: str | None = Field(None, alias="photoURL", max_length=2048)
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    date_of_birth: str | None = Field(None, max_length=10)
    gender: str | None = Field(None, max_length=50)
    location: str | None = Field(None, max_length=200)
    education: EducationSchema | None = None
    interests: list[str] | None = Field(None, max_length=50)
    skills: list[str] | None = Field(None, max_length=100)
    career_goals: list[str] | None = Field(None, max_length=50)
    bio: str | None = Field(None, max_length=2000)
    experience: str | None = Field(None, max_length=5000)
    job_title: str | None = Field(None, max_length=100)
    company: str | None = Field(None, max_length=200)
    address: dict[str, Any] | None = None
    preferences: dict[str, Any] | None = None

    def changes(self) -> dict[str, Any]:
        """Keys explicitly present in the request, by field name."""
        return self.model_dump(exclude_unset=True)


class ProfileResponse(CamelModel):
    """Schema for Profile response."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "uid": "Yx9kT2mQ4bR7",
                "email": "asha@example.com",
                "displayName": "Asha Rao",
                "firstName": "Asha",
                "lastName": "Rao",
                "skills": ["React"],
                "profileComplete": False,
                "createdAt": "2026-01-28T10:00:00Z",
                "updatedAt": "2026-01-28T10:05:00Z",
            }
        },
    )

    uid: str
    email: str
    display_name: str = ""
    phone_number: str = ""
    photo_url: str | None = Field(None, alias="photoURL")
    first_name: str = ""
    last_name: str = ""
    date_of_birth: str = ""
    gender: str = ""
    location: str = ""
    education: EducationSchema = Field(default_factory=EducationSchema)
    interests: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    career_goals: list[str] = Field(default_factory=list)
    bio: str = ""
    experience: str = ""
    job_title: str = ""
    company: str = ""
    address: dict[str, Any] = Field(default_factory=dict)
    preferences: dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True
    profile_complete: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProfileDetailResponse(CamelModel):
    """Schema for a single profile."""

    profile: ProfileResponse


class ProfileUpdateResponse(CamelModel):
    """Schema for the result of a profile update."""

    message: str = "Profile updated successfully"
    profile: ProfileResponse
    created: bool = False
    warnings: list[WarningResponse] = Field(default_factory=list)


class UserListResponse(CamelModel):
    """Schema for a page of users."""

    users: list[ProfileResponse]
    last_doc_id: str | None = None
    has_more: bool = False


class UserSearchResponse(CamelModel):
    """Schema for email search results."""

    users: list[ProfileResponse]


class AdminClaimUpdate(CamelModel):
    """Schema for granting or revoking the admin claim."""

    admin: bool
