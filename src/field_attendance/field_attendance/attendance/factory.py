from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..reference.model import OfficeHours
from .strategies.base import AttendanceStrategy
from .strategies.early_strategy import EarlyLeaveStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_morning(self, *, at: datetime, hours: OfficeHours) -> AttendanceStrategy:
        if at.time() > hours.start_time:
            return LateStrategy()
        return NormalStrategy()

    def for_evening(self, *, at: datetime, hours: OfficeHours) -> AttendanceStrategy:
        if at.time() < hours.end_time:
            return EarlyLeaveStrategy()
        return NormalStrategy()
