from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account role stored on the users table."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class AttendanceType(str, Enum):
    """Declared place of work, frozen on the first punch of the day."""

    WFO = "WFO"
    WFH = "WFH"
    WFF = "WFF"

    @classmethod
    def parse(cls, value: str | None) -> "AttendanceType | None":
        if value is None or not value.strip():
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


class AttendanceStatus(str, Enum):
    """Derived attendance label, stored verbatim in the attendance table."""

    ON_TIME = "On Time"
    LATE_ENTRY = "Late Entry"
    HALF_DAY = "Half Day"
    LATE_AND_HALF = "Late & Half"


class DayStatus(str, Enum):
    """Labels for days that have no attendance row of their own."""

    HOLIDAY = "Holiday"
    LEAVE = "Leave"
    ABSENT = "Absent"
    WORKING_DAY = "Working Day"


class FieldImageFlag(str, Enum):
    ADDED = "Images Added"
    NOT_ADDED = "Not Added"


class LeaveStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
