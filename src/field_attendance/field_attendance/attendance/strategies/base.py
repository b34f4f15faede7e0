from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...reference.model import OfficeHours


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    note: Optional[str] = None


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide an attendance status."""

    @abstractmethod
    def decide_morning(self, *, at: datetime, hours: OfficeHours) -> StatusDecision:
        raise NotImplementedError

    @abstractmethod
    def decide_evening(self, *, at: datetime, hours: OfficeHours, current: Optional[AttendanceStatus]) -> StatusDecision:
        raise NotImplementedError
