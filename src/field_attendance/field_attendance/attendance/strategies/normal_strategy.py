from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...reference.model import OfficeHours
from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """Arrival at or before office start; departure at or after office end keeps the status."""

    def decide_morning(self, *, at: datetime, hours: OfficeHours) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.ON_TIME)

    def decide_evening(self, *, at: datetime, hours: OfficeHours, current: Optional[AttendanceStatus]) -> StatusDecision:
        return StatusDecision(status=current or AttendanceStatus.ON_TIME)
