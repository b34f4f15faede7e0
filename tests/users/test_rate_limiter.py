from src.field_attendance.field_attendance.users.rate_limiter import LoginRateLimiter


def test_limit_applies_per_ip_and_user():
    now = [0.0]
    limiter = LoginRateLimiter(max_attempts=3, lockout_seconds=60, clock=lambda: now[0])

    for _ in range(3):
        limiter.record_failure("1.1.1.1", "asha")

    assert limiter.is_limited("1.1.1.1", "asha")
    assert not limiter.is_limited("1.1.1.1", "ravi")
    assert not limiter.is_limited("2.2.2.2", "asha")

    now[0] = 61
    assert not limiter.is_limited("1.1.1.1", "asha")
    assert limiter.record_failure("1.1.1.1", "asha") == 1


def test_reset_clears_counter():
    limiter = LoginRateLimiter(max_attempts=2, lockout_seconds=60)
    limiter.record_failure("1.1.1.1", "asha")
    limiter.record_failure("1.1.1.1", "asha")

    limiter.reset("1.1.1.1", "asha")

    assert not limiter.is_limited("1.1.1.1", "asha")


def test_counters_expire_after_lockout_window():
    now = [0.0]
    limiter = LoginRateLimiter(max_attempts=5, lockout_seconds=900, clock=lambda: now[0])

    for i in range(1000):
        limiter.record_failure(f"10.0.{i // 256}.{i % 256}", "asha")
    assert len(limiter) == 1000

    now[0] = 10 * 24 * 60 * 60
    assert not limiter.is_limited("10.0.0.1", "asha")
    assert len(limiter) == 0


def test_latest_failure_restarts_window():
    now = [0.0]
    limiter = LoginRateLimiter(max_attempts=2, lockout_seconds=60, clock=lambda: now[0])

    limiter.record_failure("1.1.1.1", "asha")
    now[0] = 50
    limiter.record_failure("1.1.1.1", "asha")
    now[0] = 100

    assert limiter.is_limited("1.1.1.1", "asha")


def test_tracked_keys_are_bounded():
    limiter = LoginRateLimiter(max_attempts=5, lockout_seconds=900, max_tracked=10)

    for i in range(50):
        limiter.record_failure(f"10.0.0.{i}", "asha")

    assert len(limiter) == 10
