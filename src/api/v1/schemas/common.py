"""Common Pydantic schemas shared across the API."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema using the camelCase keys the frontend speaks.

    Snake_case field names are accepted on input as well.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorResponse(BaseModel):
    """Standardized error response."""

    error: str
    error_code: str
    details: Any | None = None


class MessageResponse(BaseModel):
    """Simple message response."""

    message: str


class WarningResponse(BaseModel):
    """Non-fatal failure reported alongside a successful response."""

    code: str
    message: str
