"""Courtesy input checks run before a form is sent.

These only spare the user a round trip; the server does its own
(more lenient) validation and is the actual boundary.
"""

import re

PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 50
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(email) -> bool:
    if not email or not isinstance(email, str):
        return False
    return bool(EMAIL_REGEX.match(email.strip()))


def validate_password(password) -> tuple[bool, str]:
    if not password or not isinstance(password, str):
        return False, "Password is required"
    if len(password) < PASSWORD_MIN_LENGTH:
        return False, f"Password must be at least {PASSWORD_MIN_LENGTH} characters"
    if len(password) > PASSWORD_MAX_LENGTH:
        return False, f"Password must not exceed {PASSWORD_MAX_LENGTH} characters"
    return True, ""


def validate_name(name) -> tuple[bool, str]:
    if not name or not isinstance(name, str):
        return False, "Name is required"
    trimmed = name.strip()
    if len(trimmed) < NAME_MIN_LENGTH:
        return False, f"Name must be at least {NAME_MIN_LENGTH} characters"
    if len(trimmed) > NAME_MAX_LENGTH:
        return False, f"Name must not exceed {NAME_MAX_LENGTH} characters"
    return True, ""


def parse_interests(value) -> list[str]:
    """Split a comma-separated string into trimmed, non-empty tags."""
    if not value or not isinstance(value, str):
        return []
    return [part.strip() for part in value.split(",") if part.strip()]
