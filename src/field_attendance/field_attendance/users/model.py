from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Login account. Pure data, no DB access."""

    user_id: int
    username: str
    email: str
    password_hash: str
    role: Role
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class BuiltinAccount:
    username: str
    password: str
    email: str
    role: Role = Role.EMPLOYEE


@dataclass(frozen=True)
class AuthResult:
    success: bool
    token: Optional[str]
    message: str
    username: Optional[str] = None

    def to_dict(self) -> dict:
        return {"success": self.success, "token": self.token, "message": self.message, "username": self.username}
