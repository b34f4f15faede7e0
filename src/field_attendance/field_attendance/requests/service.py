from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime, time
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local, parse_clock, parse_iso_date
from ..common.validators import require_non_empty
from ..core.enums import LeaveStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import DEFAULT_DURATION_TYPE, ExtraWork, LeaveRequest
from .repository import ExtraWorkRepository, LeaveRepository

logger = logging.getLogger(__name__)

_DATES_REQUIRED = "Leave start and end dates are required"


@dataclass(frozen=True)
class NewLeave:
    username: Optional[str]
    start_date: Optional[str]
    end_date: Optional[str]
    duration_type: Optional[str] = None
    leave_type: Optional[str] = None
    reason: Optional[str] = None


@dataclass(frozen=True)
class NewExtraWork:
    username: Optional[str]
    work_date: Optional[str]
    start_time: Optional[str]
    end_time: Optional[str]
    reason: Optional[str] = None


class RequestService:
    """Use case: leave applications and extra-work logging."""

    def __init__(
        self,
        leaves: LeaveRepository,
        extra_work: ExtraWorkRepository,
        employees: EmployeeRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._leaves = leaves
        self._extra_work = extra_work
        self._employees = employees
        self._clock = clock

    @staticmethod
    def _parse_date(value: Optional[str], label: str, missing: str) -> date:
        v = (value or "").strip()
        if not v:
            raise ValidationError(missing)
        try:
            return parse_iso_date(v)
        except ValueError:
            raise ValidationError(f"Invalid {label} (yyyy-MM-dd)")

    @staticmethod
    def _parse_time(value: Optional[str], label: str) -> time:
        v = (value or "").strip()
        if not v:
            raise ValidationError(f"{label} is required")
        try:
            return parse_clock(v)
        except ValueError:
            raise ValidationError(f"Invalid {label} (HH:MM)")

    def apply_leave(self, new: NewLeave) -> LeaveRequest:
        username = require_non_empty(new.username, "Username")
        start = self._parse_date(new.start_date, "start date", _DATES_REQUIRED)
        end = self._parse_date(new.end_date, "end date", _DATES_REQUIRED)
        if end < start:
            raise ValidationError("End date cannot be before start date")

        employee = self._employees.get_by_username(username)
        if employee is None:
            raise NotFoundError(f"Employee not found for username: {username}")

        for existing in self._leaves.list_active_for_user(username):
            if existing.overlaps(start, end):
                raise ConflictError("You already have a leave request overlapping with the selected dates")

        now = self._clock()
        leave = LeaveRequest(
            id=None,
            username=username,
            office_name=employee.office_name,
            start_date=start,
            end_date=end,
            duration_type=(new.duration_type or "").strip() or DEFAULT_DURATION_TYPE,
            leave_type=(new.leave_type or "").strip() or None,
            reason=(new.reason or "").strip() or None,
            status=LeaveStatus.APPROVED,
            applied_on=now,
            updated_on=now,
        )
        leave_id = self._leaves.create_leave(leave)
        logger.info("Leave %s applied for %s (%s..%s)", leave_id, username, start, end)
        return replace(leave, id=leave_id)

    def list_leaves(self, username: Optional[str] = None) -> Sequence[LeaveRequest]:
        return self._leaves.list_leaves((username or "").strip() or None)

    def leave_on(self, username: str, day: date) -> Optional[LeaveRequest]:
        found = self._leaves.list_overlapping(day, day, username)
        return found[0] if found else None

    def apply_extra_work(self, new: NewExtraWork) -> ExtraWork:
        username = require_non_empty(new.username, "Username")
        work_date = self._parse_date(new.work_date, "date", "Date is required")
        start = self._parse_time(new.start_time, "Start time")
        end = self._parse_time(new.end_time, "End time")
        if end <= start:
            raise ValidationError("End time must be after start time")

        employee = self._employees.get_by_username(username)
        if employee is None:
            raise NotFoundError(f"Employee not found for username: {username}")

        for existing in self._extra_work.list_for_user_and_date(username, work_date):
            if start < existing.end_time and existing.start_time < end:
                raise ConflictError("Extra work already logged for an overlapping time on this date")

        work = ExtraWork(
            id=None,
            username=username,
            office_name=employee.office_name,
            work_date=work_date,
            start_time=start,
            end_time=end,
            reason=(new.reason or "").strip() or None,
        )
        work_id = self._extra_work.create_extra_work(work)
        logger.info("Extra work %s logged for %s on %s", work_id, username, work_date)
        return replace(work, id=work_id)
