from __future__ import annotations

import logging
from typing import Iterable, Optional, cast

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import login_problem, signup_problem
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ConflictError, RateLimitedError, ValidationError
from ..security.tokens import TokenService
from .model import AuthResult, BuiltinAccount, User
from .rate_limiter import LoginRateLimiter
from .repository import UserRepository

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"
TOO_MANY_ATTEMPTS = "Too many login attempts. Please try again later."


class AuthService:
    """Use case: signup and login, issuing bearer tokens."""

    def __init__(
        self,
        users: UserRepository,
        tokens: TokenService,
        rate_limiter: LoginRateLimiter,
        builtin_accounts: Iterable[BuiltinAccount] = (),
    ):
        self._users = users
        self._tokens = tokens
        self._rate_limiter = rate_limiter
        self._builtins = {a.username: a for a in builtin_accounts}

    def register(self, username: Optional[str], password: Optional[str], email: Optional[str]) -> AuthResult:
        problem = signup_problem(username, password, email)
        if problem:
            raise ValidationError(problem)
        username = cast(str, username).strip()
        email = cast(str, email).strip()
        password = cast(str, password)

        if self._users.exists_by_username(username):
            raise ConflictError("Username already exists")
        if self._users.exists_by_email(email):
            raise ConflictError("Email already exists")

        self._users.create_user(
            username=username,
            email=email,
            password_hash=generate_password_hash(password),
            role=Role.EMPLOYEE,
        )
        logger.info("Registered user %s", username)
        return AuthResult(success=True, token=self._tokens.issue(username), message="User registered successfully", username=username)

    def authenticate(self, username: Optional[str], password: Optional[str], client_ip: str) -> AuthResult:
        key_name = (username or "").strip()
        if self._rate_limiter.is_limited(client_ip, key_name):
            logger.warning("Rate limit exceeded for %s", LoginRateLimiter.key(client_ip, key_name))
            raise RateLimitedError(TOO_MANY_ATTEMPTS)

        problem = login_problem(username, password)
        if problem:
            raise ValidationError(problem)
        password = cast(str, password)

        user = self._lookup(key_name)
        if user is None or not _password_matches(user, password):
            failures = self._rate_limiter.record_failure(client_ip, key_name)
            logger.warning("Login failed for %s (%d consecutive)", key_name, failures)
            raise AuthenticationError(INVALID_CREDENTIALS)

        self._rate_limiter.reset(client_ip, key_name)
        logger.info("Login successful for %s", key_name)
        return AuthResult(success=True, token=self._tokens.issue(user.username), message="Login successful", username=user.username)

    def _lookup(self, username: str) -> Optional[User]:
        user = self._users.get_by_username(username)
        if user is not None:
            return user
        builtin = self._builtins.get(username)
        if builtin is None:
            return None
        return self._provision(builtin)

    def _provision(self, account: BuiltinAccount) -> Optional[User]:
        try:
            self._users.create_user(
                username=account.username,
                email=account.email,
                password_hash=generate_password_hash(account.password),
                role=account.role,
            )
            logger.info("Provisioned built-in account %s", account.username)
        except ConflictError:
            # Another request provisioned it first.
            pass
        return self._users.get_by_username(account.username)


def _password_matches(user: User, password: str) -> bool:
    try:
        return check_password_hash(user.password_hash, password)
    except (ValueError, TypeError):
        # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
        return False
