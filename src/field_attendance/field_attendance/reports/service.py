from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..core.enums import AttendanceStatus, AttendanceType, DayStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..reference.service import ReferenceService
from ..requests.repository import LeaveRepository
from .month_calendar import MonthCalendar

CATEGORIES = (
    "on_time",
    "late_entry",
    "half_day",
    "late_and_half",
    "absent",
    "leave",
    "wfh",
    "wfo",
    "wff",
    "present",
    "holiday",
    "working_days",
)

_STATUS_CATEGORIES = {
    "on_time": AttendanceStatus.ON_TIME,
    "late_entry": AttendanceStatus.LATE_ENTRY,
    "half_day": AttendanceStatus.HALF_DAY,
    "late_and_half": AttendanceStatus.LATE_AND_HALF,
}

_TYPE_CATEGORIES = {
    "wfh": AttendanceType.WFH,
    "wfo": AttendanceType.WFO,
    "wff": AttendanceType.WFF,
}


@dataclass(frozen=True)
class MonthData:
    calendar: MonthCalendar
    records: Sequence[AttendanceRecord]
    leave_days: tuple[date, ...]

    @property
    def attended_days(self) -> set[date]:
        return {r.work_date for r in self.records}

    @property
    def absent_days(self) -> list[date]:
        attended = self.attended_days
        leave = set(self.leave_days)
        return [d for d in self.calendar.working_days if d not in attended and d not in leave]


def _row(day: date, status: str, *, record: Optional[AttendanceRecord] = None, remarks: str = "") -> dict:
    return {
        "date": day.isoformat(),
        "status": status,
        "attendance_type": record.attendance_type.value if record else "",
        "in_time": record.morning_time.isoformat(timespec="seconds") if record and record.morning_time else "",
        "out_time": record.evening_time.isoformat(timespec="seconds") if record and record.evening_time else "",
        "remarks": (record.reason or "") if record else remarks,
    }


class ReportService:
    """Monthly summaries per employee and the admin dashboard."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        reference: ReferenceService,
        leaves: LeaveRepository,
        *,
        today: Callable[[], date] = date.today,
    ):
        self._attendance = attendance
        self._employees = employees
        self._reference = reference
        self._leaves = leaves
        self._today = today

    def _month(self, username: str, year: int, month: int) -> MonthData:
        if self._employees.get_by_username(username) is None:
            raise NotFoundError("Username not found")
        try:
            probe = MonthCalendar.build(year, month)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc

        holidays = self._reference.holidays_between(probe.first_day, probe.last_day)
        cal = MonthCalendar.build(year, month, (h.holiday_date for h in holidays))
        records = self._attendance.list_for_user_between(username, cal.first_day, cal.last_day)

        leave_days: set[date] = set()
        for leave in self._leaves.list_overlapping(cal.first_day, cal.last_day, username):
            leave_days.update(cal.clip(leave.start_date, leave.end_date))
        return MonthData(calendar=cal, records=records, leave_days=tuple(sorted(leave_days)))

    def monthly_summary(self, username: str, year: int, month: int) -> dict:
        data = self._month(username, year, month)
        records = data.records

        def by_status(status: AttendanceStatus) -> int:
            return sum(1 for r in records if r.status is status)

        def by_type(kind: AttendanceType) -> int:
            return sum(1 for r in records if r.attendance_type is kind)

        return {
            "on_time": by_status(AttendanceStatus.ON_TIME),
            "late_entry": by_status(AttendanceStatus.LATE_ENTRY),
            "late_and_half": by_status(AttendanceStatus.LATE_AND_HALF),
            "half_day": by_status(AttendanceStatus.HALF_DAY),
            "absent": len(data.absent_days),
            "present": len(data.attended_days),
            "total_work_from_home": by_type(AttendanceType.WFH),
            "total_work_from_office": by_type(AttendanceType.WFO),
            "total_work_from_field": by_type(AttendanceType.WFF),
            "total_days_in_month": data.calendar.length,
            "working_days_in_month": len(data.calendar.working_days),
            "holidays": len(data.calendar.holidays),
            "holiday_dates": [d.isoformat() for d in data.calendar.holidays],
            "leave_days_count": len(data.leave_days),
            "leave_dates": [d.isoformat() for d in data.leave_days],
        }

    def monthly_details(self, username: str, year: int, month: int, category: str) -> dict:
        category = (category or "").strip().lower()
        if category not in CATEGORIES:
            raise ValidationError(f"Invalid category: {category or '-'}")
        data = self._month(username, year, month)

        if category in _STATUS_CATEGORIES:
            wanted = _STATUS_CATEGORIES[category]
            rows = [_row(r.work_date, r.status.value, record=r) for r in data.records if r.status is wanted]
        elif category in _TYPE_CATEGORIES:
            kind = _TYPE_CATEGORIES[category]
            rows = [_row(r.work_date, r.status.value if r.status else "", record=r) for r in data.records if r.attendance_type is kind]
        elif category == "present":
            rows = [_row(r.work_date, r.status.value if r.status else "", record=r) for r in data.records]
        elif category == "absent":
            rows = [_row(d, DayStatus.ABSENT.value) for d in data.absent_days]
        elif category == "leave":
            rows = [_row(d, DayStatus.LEAVE.value) for d in data.leave_days]
        elif category == "holiday":
            rows = [_row(d, DayStatus.HOLIDAY.value) for d in data.calendar.holidays]
        else:
            rows = [_row(d, DayStatus.WORKING_DAY.value) for d in data.calendar.working_days]

        rows.sort(key=lambda r: r["date"])
        return {
            "category": category,
            "rows": rows,
            "present_days": len(data.attended_days),
            "working_days_in_month": len(data.calendar.working_days),
        }

    def admin_dashboard(self, today: Optional[date] = None) -> dict:
        today = today or self._today()
        records = self._attendance.list_for_date(today)
        total = len(self._employees.list_all())

        def by_status(status: AttendanceStatus) -> int:
            return sum(1 for r in records if r.status is status)

        def by_type(kind: AttendanceType) -> int:
            return sum(1 for r in records if r.attendance_type is kind)

        present_users = {r.user_name for r in records if r.status is not None}
        on_leave = {l.username for l in self._leaves.list_overlapping(today, today)} - present_users

        return {
            "total_employees": total,
            "present_today": len(present_users),
            "on_time": by_status(AttendanceStatus.ON_TIME),
            "late_entry": by_status(AttendanceStatus.LATE_ENTRY),
            "half_day": by_status(AttendanceStatus.HALF_DAY),
            "late_and_half": by_status(AttendanceStatus.LATE_AND_HALF),
            "absent_today": max(total - len(present_users) - len(on_leave), 0),
            "on_leave_today": len(on_leave),
            "total_work_from_home": by_type(AttendanceType.WFH),
            "total_work_from_office": by_type(AttendanceType.WFO),
            "total_work_from_field": by_type(AttendanceType.WFF),
            "todays_date": today.isoformat(),
        }
