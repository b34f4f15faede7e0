from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...reference.model import OfficeHours
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Arrival strictly after office start."""

    def decide_morning(self, *, at: datetime, hours: OfficeHours) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.LATE_ENTRY, note=f"after {hours.start_time:%H:%M}")

    def decide_evening(self, *, at: datetime, hours: OfficeHours, current: Optional[AttendanceStatus]) -> StatusDecision:
        return StatusDecision(status=current or AttendanceStatus.LATE_ENTRY)
