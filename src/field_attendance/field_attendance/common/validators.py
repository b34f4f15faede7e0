from __future__ import annotations

import re
from typing import Mapping, Optional, Sequence, cast

from ..core.exceptions import FieldError, ValidationError

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9._-]+$")
EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9+_.-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")

_SUSPICIOUS_PATTERNS = (
    "select", "insert", "update", "delete", "drop", "create", "alter",
    "union", "or 1=1", "and 1=1", "--", "/*", "*/", "xp_", "sp_",
    "exec", "execute", "script", "<script", "javascript:", "vbscript:",
)


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required", errors=[FieldError(field_name, f"{field_name} is required")])
    return value.strip()


def require_fields(values: Mapping[str, object], messages: Mapping[str, str]) -> None:
    """Collect every missing field before failing, like bean validation does."""
    errors: list[FieldError] = []
    for field, message in messages.items():
        value = values.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            errors.append(FieldError(field, message))
    if errors:
        raise ValidationError("Validation failed", errors=errors)


def contains_injection_pattern(value: Optional[str]) -> bool:
    if not value:
        return False
    lowered = value.lower()
    return any(p in lowered for p in _SUSPICIOUS_PATTERNS)


def login_problem(username: Optional[str], password: Optional[str]) -> Optional[str]:
    """Return the first problem with a login form, or None."""
    if username is None or not username.strip():
        return "Username is required"
    if password is None or not password.strip():
        return "Password is required"
    username = username.strip()
    if len(username) < 3 or len(username) > 50:
        return "Username must be between 3 and 50 characters"
    if not USERNAME_PATTERN.match(username):
        return "Username can only contain letters, numbers, dots, underscores, and hyphens"
    if contains_injection_pattern(username) or contains_injection_pattern(password):
        return "Invalid characters detected"
    return None


def signup_problem(username: Optional[str], password: Optional[str], email: Optional[str]) -> Optional[str]:
    problem = login_problem(username, password)
    if problem:
        return problem
    password = cast(str, password)
    if len(password) < 6:
        return "Password must be at least 6 characters long"
    if len(password) > 128:
        return "Password is too long"
    if not re.search(r"[a-zA-Z]", password) or not re.search(r"\d", password):
        return "Password must contain at least one letter and one number"
    if email is None or not email.strip():
        return "Email is required"
    email = email.strip()
    if not EMAIL_PATTERN.match(email):
        return "Please enter a valid email address"
    if len(email) > 100:
        return "Email address is too long"
    return None


def sanitize_name(value: str, replacement: str = "_") -> str:
    return re.sub(r"[^a-zA-Z0-9]", replacement, value)


def field_errors_to_dicts(errors: Sequence[FieldError]) -> list[dict]:
    return [{"field": e.field, "message": e.message} for e in errors]
