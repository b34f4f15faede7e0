from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class LocationSample:
    """Immutable GPS sample. Samples are only ever appended."""

    id: Optional[int]
    user_name: str
    lat: float
    lon: float
    timestamp: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userName": self.user_name,
            "lat": self.lat,
            "lon": self.lon,
            "timestamp": self.timestamp.isoformat(timespec="seconds"),
            "date": self.timestamp.date().isoformat(),
        }


@dataclass(frozen=True)
class ApiResult:
    """Outcome of a call that reports failures as data instead of raising."""

    status_code: int
    message: str
    data: Any = field(default=None)
