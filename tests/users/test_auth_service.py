from __future__ import annotations

import pytest

from src.field_attendance.field_attendance.core.enums import Role
from src.field_attendance.field_attendance.core.exceptions import (
    AuthenticationError,
    ConflictError,
    RateLimitedError,
    ValidationError,
)
from src.field_attendance.field_attendance.security.tokens import TokenService
from src.field_attendance.field_attendance.users.model import BuiltinAccount
from src.field_attendance.field_attendance.users.rate_limiter import LoginRateLimiter
from src.field_attendance.field_attendance.users.service import INVALID_CREDENTIALS, TOO_MANY_ATTEMPTS, AuthService
from tests.fakes import FakeUserRepo

SECRET = "unit-test-secret-unit-test-secret-unit-test-secret-unit-test-secret"


class Clock:
    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def _service(clock=None, builtins=()):
    clock = clock or Clock()
    users = FakeUserRepo()
    tokens = TokenService(SECRET, clock=clock)
    limiter = LoginRateLimiter(max_attempts=5, lockout_seconds=900, clock=clock)
    return AuthService(users, tokens, limiter, builtins), users, tokens


def test_register_then_login():
    svc, users, tokens = _service()

    registered = svc.register("asha.k", "secret1", "asha@example.com")
    assert registered.success and registered.message == "User registered successfully"
    assert users.rows["asha.k"].role is Role.EMPLOYEE
    assert users.rows["asha.k"].password_hash != "secret1"

    result = svc.authenticate("asha.k", "secret1", "10.0.0.1")
    assert result.message == "Login successful"
    assert tokens.validate(result.token).username == "asha.k"


@pytest.mark.parametrize(
    "username,password,email",
    [
        ("ab", "secret1", "a@example.com"),
        ("asha k", "secret1", "a@example.com"),
        ("asha", "short", "a@example.com"),
        ("asha", "onlyletters", "a@example.com"),
        ("asha", "secret1", "not-an-email"),
        ("dropuser", "secret1", "a@example.com"),
        (None, "secret1", "a@example.com"),
        ("asha", None, "a@example.com"),
        ("asha", "secret1", None),
    ],
)
def test_register_rejects_bad_input(username, password, email):
    svc, users, _ = _service()

    with pytest.raises(ValidationError):
        svc.register(username, password, email)
    assert users.rows == {}


def test_register_duplicate_username_and_email():
    svc, _, _ = _service()
    svc.register("asha", "secret1", "asha@example.com")

    with pytest.raises(ConflictError):
        svc.register("asha", "secret2", "other@example.com")
    with pytest.raises(ConflictError):
        svc.register("ravi", "secret2", "asha@example.com")


def test_wrong_password_is_generic():
    svc, _, _ = _service()
    svc.register("asha", "secret1", "asha@example.com")

    with pytest.raises(AuthenticationError) as wrong_pw:
        svc.authenticate("asha", "secret2", "10.0.0.1")
    with pytest.raises(AuthenticationError) as no_user:
        svc.authenticate("ghost", "secret2", "10.0.0.1")

    assert wrong_pw.value.message == no_user.value.message == INVALID_CREDENTIALS


def test_login_without_password_is_a_validation_error():
    svc, _, _ = _service()
    svc.register("asha", "secret1", "asha@example.com")

    with pytest.raises(ValidationError) as exc:
        svc.authenticate("asha", None, "10.0.0.1")
    assert exc.value.message == "Password is required"


def test_lockout_after_five_failures_and_recovery():
    clock = Clock()
    svc, _, _ = _service(clock)
    svc.register("asha", "secret1", "asha@example.com")

    for _ in range(5):
        with pytest.raises(AuthenticationError):
            svc.authenticate("asha", "wrong99", "10.0.0.1")

    with pytest.raises(RateLimitedError) as exc:
        svc.authenticate("asha", "secret1", "10.0.0.1")
    assert exc.value.message == TOO_MANY_ATTEMPTS

    # another client address is not affected
    assert svc.authenticate("asha", "secret1", "10.0.0.2").success

    clock.now += 901
    assert svc.authenticate("asha", "secret1", "10.0.0.1").success


def test_success_resets_failure_counter():
    svc, _, _ = _service()
    svc.register("asha", "secret1", "asha@example.com")

    for _ in range(4):
        with pytest.raises(AuthenticationError):
            svc.authenticate("asha", "wrong99", "10.0.0.1")
    svc.authenticate("asha", "secret1", "10.0.0.1")
    for _ in range(4):
        with pytest.raises(AuthenticationError):
            svc.authenticate("asha", "wrong99", "10.0.0.1")

    assert svc.authenticate("asha", "secret1", "10.0.0.1").success


def test_builtin_account_is_provisioned_on_first_login():
    svc, users, _ = _service(builtins=[BuiltinAccount("user", "pass", "user@example.com")])

    result = svc.authenticate("user", "pass", "127.0.0.1")

    assert result.username == "user"
    assert "user" in users.rows
    assert svc.authenticate("user", "pass", "127.0.0.1").success
