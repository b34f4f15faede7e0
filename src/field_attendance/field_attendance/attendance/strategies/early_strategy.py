from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...reference.model import OfficeHours
from .base import AttendanceStrategy, StatusDecision

_EARLY_LEAVE = {
    AttendanceStatus.ON_TIME: AttendanceStatus.HALF_DAY,
    AttendanceStatus.LATE_ENTRY: AttendanceStatus.LATE_AND_HALF,
}


class EarlyLeaveStrategy(AttendanceStrategy):
    """Departure strictly before office end."""

    def decide_morning(self, *, at: datetime, hours: OfficeHours) -> StatusDecision:
        # Early leave only changes the evening leg; arrival is judged against office start.
        if at.time() > hours.start_time:
            return StatusDecision(status=AttendanceStatus.LATE_ENTRY, note=f"after {hours.start_time:%H:%M}")
        return StatusDecision(status=AttendanceStatus.ON_TIME)

    def decide_evening(self, *, at: datetime, hours: OfficeHours, current: Optional[AttendanceStatus]) -> StatusDecision:
        if current is None:
            return StatusDecision(status=AttendanceStatus.HALF_DAY)
        return StatusDecision(status=_EARLY_LEAVE.get(current, current), note=f"before {hours.end_time:%H:%M}")
