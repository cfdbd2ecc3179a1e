"""
Username syntax rules.

Bounds and the allowed character set match the upstream username plugin:
3-30 characters of letters, digits, underscores and dots, stored lower-cased.
"""
import re
from dataclasses import dataclass
from typing import Optional

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30

RESERVED_USERNAMES = frozenset({
    "admin",
    "administrator",
    "root",
    "support",
    "system",
    "api",
    "null",
    "undefined",
    "me",
})

_ALLOWED_CHARS = re.compile(r"^[A-Za-z0-9_.]+$")
_SEPARATORS = "._"


@dataclass(frozen=True)
class UsernameValidation:
    valid: bool
    sanitized: Optional[str] = None
    error: Optional[str] = None


def _invalid(error: str) -> UsernameValidation:
    return UsernameValidation(valid=False, error=error)


def validate_username(raw: str) -> UsernameValidation:
    """Check a proposed username and return its normalized form.

    Never raises for bad content; only a non-string argument raises TypeError.
    """
    if not isinstance(raw, str):
        raise TypeError(f"username must be a str, got {type(raw).__name__}")

    candidate = raw.strip()
    if not candidate:
        return _invalid("Username is required")
    if len(candidate) < USERNAME_MIN_LENGTH:
        return _invalid(f"Username must be at least {USERNAME_MIN_LENGTH} characters")
    if len(candidate) > USERNAME_MAX_LENGTH:
        return _invalid(f"Username must be at most {USERNAME_MAX_LENGTH} characters")
    if not _ALLOWED_CHARS.match(candidate):
        return _invalid("Username can only contain letters, numbers, underscores and dots")
    if candidate[0] in _SEPARATORS or candidate[-1] in _SEPARATORS or ".." in candidate:
        return _invalid(
            "Username cannot start or end with a separator or contain consecutive dots"
        )

    sanitized = candidate.lower()
    if sanitized in RESERVED_USERNAMES:
        return _invalid("This username is reserved")

    return UsernameValidation(valid=True, sanitized=sanitized)
