from jose import jwt

from src.field_attendance.field_attendance.security.tokens import TokenService

SECRET = "unit-test-secret-unit-test-secret-unit-test-secret-unit-test-secret"


class Clock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_issue_and_validate_round_trip():
    clock = Clock()
    tokens = TokenService(SECRET, expiration_seconds=60, clock=clock)

    token = tokens.issue("asha")
    claims = jwt.get_unverified_claims(token)

    assert claims["sub"] == "asha"
    assert claims["exp"] - claims["iat"] == 60
    assert jwt.get_unverified_header(token)["alg"] == "HS512"
    result = tokens.validate(token)
    assert result.valid and result.username == "asha"


def test_expired_token_rejected_even_when_cached():
    clock = Clock()
    tokens = TokenService(SECRET, expiration_seconds=60, cache_ttl_seconds=900, clock=clock)
    token = tokens.issue("asha")
    assert tokens.validate(token).valid

    clock.now += 61

    result = tokens.validate(token)
    assert not result.valid
    assert result.reason == "token expired"
    assert tokens.is_expired(token)


def test_token_from_other_secret_is_invalid():
    clock = Clock()
    other = TokenService("another-secret-another-secret-another-secret-another-secret", clock=clock)
    tokens = TokenService(SECRET, clock=clock)

    assert not tokens.validate(other.issue("asha")).valid
    assert not tokens.validate("not.a.token").valid
    assert not tokens.validate("").valid
    assert tokens.username_of("garbage") is None
