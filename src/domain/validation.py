"""Signup input validation, shared by the API and the Python client."""

import re

from core.exceptions import ValidationError

PASSWORD_MIN_LENGTH = 8

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_UPPERCASE_RE = re.compile(r"[A-Z]")
_LOWERCASE_RE = re.compile(r"[a-z]")
_NUMBER_RE = re.compile(r"[0-9]")


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email or ""))


def password_violations(password: str) -> list[str]:
    """Return the violated password rules, empty when the password is acceptable."""
    pw = password or ""
    violations: list[str] = []
    if len(pw) < PASSWORD_MIN_LENGTH:
        violations.append("min_length")
    if not _UPPERCASE_RE.search(pw):
        violations.append("uppercase")
    if not _LOWERCASE_RE.search(pw):
        violations.append("lowercase")
    if not _NUMBER_RE.search(pw):
        violations.append("number")
    return violations


def validate_signup(email: str, password: str, display_name: str) -> None:
    """Reject malformed signup input with a field-specific error.

    Raises:
        ValidationError: naming the first offending field
    """
    if not email or not password or not (display_name or "").strip():
        missing = next(
            name
            for name, value in (
                ("email", email),
                ("password", password),
                ("display_name", (display_name or "").strip()),
            )
            if not value
        )
        raise ValidationError("Please fill in all required fields", field=missing)

    if not is_valid_email(email):
        raise ValidationError("Please enter a valid email address", field="email")

    violations = password_violations(password)
    if "min_length" in violations:
        raise ValidationError(
            f"Password must be at least {PASSWORD_MIN_LENGTH} characters long",
            field="password",
        )
    if violations:
        raise ValidationError(
            "Password must contain at least one uppercase letter, "
            "one lowercase letter, and one number",
            field="password",
        )
