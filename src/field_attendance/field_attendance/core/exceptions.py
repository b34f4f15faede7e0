from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 500

    def __init__(self, message: str = "", *, errors: Optional[Sequence[FieldError]] = None):
        super().__init__(message)
        self.message = message
        self.errors = list(errors or [])


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    status_code = 400


class InvalidLocationError(ValidationError):
    """Raised when a district/tehsil pair is not in the reference table."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    status_code = 401


class NotFoundError(DomainError):
    status_code = 404


class ConflictError(DomainError):
    """Raised when an action collides with existing state (duplicates, double punch)."""

    status_code = 409


class RateLimitedError(DomainError):
    status_code = 429


class StorageError(DomainError):
    """Raised when uploaded files cannot be written."""

    status_code = 500
