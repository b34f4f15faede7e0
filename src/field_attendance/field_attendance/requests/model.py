from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import LeaveStatus

DEFAULT_DURATION_TYPE = "FULL DAY"


@dataclass(frozen=True)
class LeaveRequest:
    """Leave for a date range. Approved on creation, there is no approval step."""

    id: Optional[int]
    username: str
    start_date: date
    end_date: date
    duration_type: str = DEFAULT_DURATION_TYPE
    office_name: Optional[str] = None
    leave_type: Optional[str] = None
    reason: Optional[str] = None
    status: LeaveStatus = LeaveStatus.APPROVED
    approved_by: Optional[str] = None
    applied_on: Optional[datetime] = None
    updated_on: Optional[datetime] = None

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def overlaps(self, start: date, end: date) -> bool:
        return not (end < self.start_date or start > self.end_date)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "officeName": self.office_name,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "durationType": self.duration_type,
            "leaveType": self.leave_type,
            "reason": self.reason,
            "status": self.status.value,
            "approvedBy": self.approved_by,
            "appliedOn": self.applied_on.isoformat(timespec="seconds") if self.applied_on else None,
            "updatedOn": self.updated_on.isoformat(timespec="seconds") if self.updated_on else None,
        }


@dataclass(frozen=True)
class ExtraWork:
    id: Optional[int]
    username: str
    work_date: date
    start_time: time
    end_time: time
    office_name: Optional[str] = None
    reason: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "officeName": self.office_name,
            "date": self.work_date.isoformat(),
            "startTime": self.start_time.strftime("%H:%M"),
            "endTime": self.end_time.strftime("%H:%M"),
            "reason": self.reason,
        }
