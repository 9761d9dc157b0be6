"""Identity domain entity."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Identity:
    """Canonical identity record owned by the identity provider."""

    uid: str
    email: str = ""
    email_verified: bool = False
    display_name: str = ""
    photo_url: str | None = None
    phone_number: str | None = None
    disabled: bool = False
    custom_claims: dict[str, Any] = field(default_factory=dict)

    @property
    def is_admin(self) -> bool:
        return self.custom_claims.get("admin") is True
