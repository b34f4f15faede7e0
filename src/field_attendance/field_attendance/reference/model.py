from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional


@dataclass(frozen=True)
class Holiday:
    holiday_date: date
    name: str
    description: Optional[str] = None


@dataclass(frozen=True)
class OfficeHours:
    start_time: time
    end_time: time
