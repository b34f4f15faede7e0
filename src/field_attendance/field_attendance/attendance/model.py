from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, AttendanceType, DayStatus, FieldImageFlag


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat(timespec="seconds") if value else None


@dataclass(frozen=True)
class AttendanceRecord:
    """One row per (user_name, work_date). ``attendance_type`` never changes after creation."""

    id: Optional[int]
    user_name: str
    work_date: date
    attendance_type: AttendanceType
    status: Optional[AttendanceStatus] = None
    reason: Optional[str] = None
    office_name: Optional[str] = None
    morning_image_path: Optional[str] = None
    morning_time: Optional[datetime] = None
    evening_image_path: Optional[str] = None
    evening_time: Optional[datetime] = None
    field_image_paths: tuple[str, ...] = field(default_factory=tuple)
    field_image_time: Optional[datetime] = None
    field_image_flag: FieldImageFlag = FieldImageFlag.NOT_ADDED

    @property
    def has_morning(self) -> bool:
        return bool(self.morning_image_path) and self.morning_time is not None

    @property
    def has_evening(self) -> bool:
        return bool(self.evening_image_path) and self.evening_time is not None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userName": self.user_name,
            "date": self.work_date.isoformat(),
            "attendanceType": self.attendance_type.value,
            "status": self.status.value if self.status else None,
            "reason": self.reason,
            "officeName": self.office_name,
            "morningImagePath": self.morning_image_path,
            "morningTime": _iso(self.morning_time),
            "eveningImagePath": self.evening_image_path,
            "eveningTime": _iso(self.evening_time),
            "fieldImagePaths": list(self.field_image_paths),
            "fieldImageTime": _iso(self.field_image_time),
            "fieldImageUploaded": self.field_image_flag.value,
        }


@dataclass(frozen=True)
class DaySummary:
    """What a user's calendar shows for one day."""

    user_name: str
    day: date
    status: str
    reason: Optional[str] = None
    office_name: Optional[str] = None
    record: Optional[AttendanceRecord] = None

    @classmethod
    def for_record(cls, record: AttendanceRecord) -> "DaySummary":
        return cls(
            user_name=record.user_name,
            day=record.work_date,
            status=record.status.value if record.status else DayStatus.WORKING_DAY.value,
            reason=record.reason,
            office_name=record.office_name,
            record=record,
        )

    def to_dict(self) -> dict:
        if self.record is not None:
            return self.record.to_dict()
        return {
            "id": None,
            "userName": self.user_name,
            "date": self.day.isoformat(),
            "status": self.status,
            "reason": self.reason,
            "officeName": self.office_name,
        }
