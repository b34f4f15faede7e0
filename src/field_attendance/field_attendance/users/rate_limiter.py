from __future__ import annotations

import threading
import time
from typing import Callable

from cachetools import TTLCache

from ..core.constants import (
    DEFAULT_LOGIN_LOCKOUT_SECONDS,
    DEFAULT_LOGIN_MAX_ATTEMPTS,
    DEFAULT_LOGIN_TRACKED_KEYS,
)


class LoginRateLimiter:
    """Consecutive-failure counter per (client ip, username).

    In-process only: each instance keeps its own counters and loses them on restart.
    A counter lives for ``lockout_seconds`` after its latest failure, then expires.
    """

    def __init__(
        self,
        *,
        max_attempts: int = DEFAULT_LOGIN_MAX_ATTEMPTS,
        lockout_seconds: float = DEFAULT_LOGIN_LOCKOUT_SECONDS,
        max_tracked: int = DEFAULT_LOGIN_TRACKED_KEYS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._max_attempts = max_attempts
        self._attempts: TTLCache = TTLCache(maxsize=max_tracked, ttl=lockout_seconds, timer=clock)
        self._lock = threading.Lock()

    @staticmethod
    def key(client_ip: str, username: str) -> str:
        return f"{client_ip}:{username}"

    def is_limited(self, client_ip: str, username: str) -> bool:
        with self._lock:
            self._attempts.expire()
            return self._attempts.get(self.key(client_ip, username), 0) >= self._max_attempts

    def record_failure(self, client_ip: str, username: str) -> int:
        key = self.key(client_ip, username)
        with self._lock:
            failures = self._attempts.get(key, 0) + 1
            # Re-inserting restarts the expiry window.
            self._attempts[key] = failures
            return failures

    def reset(self, client_ip: str, username: str) -> None:
        with self._lock:
            self._attempts.pop(self.key(client_ip, username), None)

    def __len__(self) -> int:
        with self._lock:
            self._attempts.expire()
            return len(self._attempts)
