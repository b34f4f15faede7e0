from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from cachetools import TTLCache
from jose import JWTError, jwt

from ..core.constants import (
    DEFAULT_TOKEN_CACHE_SIZE,
    DEFAULT_TOKEN_CACHE_TTL_SECONDS,
    DEFAULT_TOKEN_EXPIRATION_SECONDS,
)

logger = logging.getLogger(__name__)

ALGORITHM = "HS512"


@dataclass(frozen=True)
class TokenValidation:
    username: Optional[str]
    valid: bool
    reason: Optional[str] = None


class TokenService:
    """Issue and validate signed bearer tokens (JWT, HS512).

    Validation results are cached per raw token for ``cache_ttl_seconds``. A token
    disabled out of band can therefore stay valid inside that window.
    """

    def __init__(
        self,
        secret: str,
        *,
        expiration_seconds: int = DEFAULT_TOKEN_EXPIRATION_SECONDS,
        cache_ttl_seconds: int = DEFAULT_TOKEN_CACHE_TTL_SECONDS,
        cache_size: int = DEFAULT_TOKEN_CACHE_SIZE,
        clock: Callable[[], float] = time.time,
    ):
        if not secret:
            raise ValueError("Token secret must not be empty")
        self._secret = secret
        self._expiration_seconds = int(expiration_seconds)
        self._clock = clock
        self._cache: TTLCache = TTLCache(maxsize=cache_size, ttl=cache_ttl_seconds, timer=clock)
        self._cache_lock = threading.Lock()

    def issue(self, username: str) -> str:
        now = int(self._clock())
        claims = {"sub": username, "iat": now, "exp": now + self._expiration_seconds}
        return jwt.encode(claims, self._secret, algorithm=ALGORITHM)

    def validate(self, token: Optional[str]) -> TokenValidation:
        if not token or not token.strip():
            return TokenValidation(username=None, valid=False, reason="missing token")

        with self._cache_lock:
            cached = self._cache.get(token)
        if cached is not None:
            result, exp = cached
            if result.valid and exp is not None and exp <= self._clock():
                with self._cache_lock:
                    self._cache.pop(token, None)
                return TokenValidation(username=result.username, valid=False, reason="token expired")
            return result

        result, exp = self._decode(token)
        with self._cache_lock:
            self._cache[token] = (result, exp)
        return result

    def is_expired(self, token: str) -> bool:
        try:
            claims = jwt.get_unverified_claims(token)
        except JWTError:
            return True
        exp = claims.get("exp")
        if not isinstance(exp, (int, float)):
            return True
        return exp <= self._clock()

    def username_of(self, token: str) -> Optional[str]:
        return self.validate(token).username

    def _decode(self, token: str) -> tuple[TokenValidation, Optional[float]]:
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"verify_exp": False},
            )
        except JWTError as exc:
            logger.debug("Rejected token: %s", exc)
            return TokenValidation(username=None, valid=False, reason="invalid token"), None

        username = claims.get("sub")
        exp = claims.get("exp")
        if not username or not isinstance(exp, (int, float)):
            return TokenValidation(username=None, valid=False, reason="missing claims"), None
        if exp <= self._clock():
            return TokenValidation(username=username, valid=False, reason="token expired"), exp
        return TokenValidation(username=username, valid=True), exp
