from __future__ import annotations

from datetime import date, datetime, time

from ..core.constants import PUNCH_TIMESTAMP_FORMAT


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 local date-time such as 2025-01-31T09:45:00.

    Timezone offsets are accepted and dropped after conversion to local time.
    """
    parsed = datetime.fromisoformat(value.strip())
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def parse_punch_timestamp(value: str) -> datetime:
    """Parse the client punch format 'yyyy-MM-dd HH:mm:ss'."""
    return datetime.strptime(value.strip(), PUNCH_TIMESTAMP_FORMAT)


def parse_clock(value: str) -> time:
    """Parse HH:MM or HH:MM:SS."""
    value = value.strip()
    fmt = "%H:%M:%S" if value.count(":") == 2 else "%H:%M"
    return datetime.strptime(value, fmt).time()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
