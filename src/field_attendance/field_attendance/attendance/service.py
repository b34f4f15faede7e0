from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Callable, Iterable, Optional, Sequence

from werkzeug.datastructures import FileStorage

from ..common.datetime_utils import now_local, parse_punch_timestamp
from ..common.locks import KeyedLock
from ..common.validators import require_non_empty
from ..core.enums import AttendanceType, DayStatus, FieldImageFlag
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..reference.service import ReferenceService
from ..requests.repository import LeaveRepository
from ..storage.file_storage import FileStorageService, is_empty_upload
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, DaySummary
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

ALREADY_MARKED = "User has already marked attendance for today."
SUNDAY = 6


def _added_paths(before: Optional[AttendanceRecord], after: AttendanceRecord) -> list[str]:
    """Image paths present on ``after`` but not on ``before``."""
    known = set()
    if before is not None:
        known.update(p for p in (before.morning_image_path, before.evening_image_path) if p)
        known.update(before.field_image_paths)
    current = [p for p in (after.morning_image_path, after.evening_image_path) if p]
    current.extend(after.field_image_paths)
    return [p for p in current if p not in known]


class AttendanceService:
    """Use case: daily punches (morning and evening legs), field images and day summaries.

    Business rules:
    - One row per (user, date); the date comes from the effective punch time.
    - The attendance type is taken from the first punch of the day only.
    - Morning leg: "Late Entry" when after office start, else "On Time".
    - Evening leg before office end: "On Time" -> "Half Day", "Late Entry" -> "Late & Half".
    - Mutations for one (user, date) run under a keyed lock.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        reference: ReferenceService,
        leaves: LeaveRepository,
        storage: FileStorageService,
        *,
        strategy_factory: Optional[AttendanceStrategyFactory] = None,
        locks: Optional[KeyedLock] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._employees = employees
        self._reference = reference
        self._leaves = leaves
        self._storage = storage
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._locks = locks or KeyedLock()
        self._clock = clock

    def _require_employee(self, user_name: Optional[str]) -> Employee:
        user_name = require_non_empty(user_name, "userName")
        employee = self._employees.get_by_username(user_name)
        if employee is None:
            raise NotFoundError(f"Username not registered: {user_name}")
        return employee

    def _effective_time(self, timestamp: Optional[str]) -> datetime:
        if timestamp is None or not timestamp.strip():
            return self._clock()
        try:
            return parse_punch_timestamp(timestamp)
        except ValueError:
            raise ValidationError("Invalid timestamp format. Use yyyy-MM-dd HH:mm:ss")

    def record_punch(
        self,
        user_name: str,
        image: Optional[FileStorage],
        *,
        timestamp: Optional[str] = None,
        attendance_type: Optional[str] = None,
        reason: Optional[str] = None,
        field_images: Iterable[Optional[FileStorage]] = (),
    ) -> AttendanceRecord:
        employee = self._require_employee(user_name)
        at = self._effective_time(timestamp)
        day = at.date()
        has_image = not is_empty_upload(image)
        extra_images = [f for f in field_images if not is_empty_upload(f)]
        reason = (reason or "").strip() or None

        with self._locks.hold((employee.username, day)):
            existing = self._attendance.get_for_user_and_date(employee.username, day)

            if existing is not None and existing.has_morning and existing.has_evening:
                raise ConflictError(ALREADY_MARKED)

            if existing is not None:
                kind = existing.attendance_type
            else:
                kind = AttendanceType.parse(attendance_type)
                if kind is None:
                    raise ValidationError("attendanceType must be one of WFO, WFH, WFF")

            morning_done = existing is not None and existing.has_morning
            if not morning_done and kind in (AttendanceType.WFH, AttendanceType.WFF) and reason is None:
                raise ValidationError("Reason is required when attendanceType is WFH or WFF")

            # Field images only count for WFF days.
            if kind is not AttendanceType.WFF:
                extra_images = []
            if not has_image and not extra_images:
                raise ValidationError("Image is required")
            if extra_images and not (morning_done or has_image):
                raise ConflictError("Morning attendance must be marked before uploading field images")

            record = existing or AttendanceRecord(
                id=None,
                user_name=employee.username,
                work_date=day,
                attendance_type=kind,
            )
            hours = self._reference.office_hours()

            try:
                if has_image and not morning_done:
                    decision = self._factory.for_morning(at=at, hours=hours).decide_morning(at=at, hours=hours)
                    record = replace(
                        record,
                        morning_image_path=self._storage.store_attendance_image(image),
                        morning_time=at,
                        status=decision.status,
                    )
                elif has_image:
                    decision = self._factory.for_evening(at=at, hours=hours).decide_evening(
                        at=at, hours=hours, current=record.status
                    )
                    record = replace(
                        record,
                        evening_image_path=self._storage.store_attendance_image(image),
                        evening_time=at,
                        status=decision.status,
                    )

                if extra_images:
                    record = self._with_field_images(record, extra_images, at)

                record = replace(
                    record,
                    office_name=employee.office_name,
                    reason=reason if reason is not None else record.reason,
                )
                record = self._save(record)
            except Exception:
                self._storage.discard(*_added_paths(existing, record))
                raise

        logger.info("Attendance punch for %s on %s -> %s", record.user_name, day, record.status)
        return record

    def upload_field_images(
        self,
        user_name: str,
        images: Iterable[Optional[FileStorage]],
        *,
        at: Optional[datetime] = None,
    ) -> AttendanceRecord:
        employee = self._require_employee(user_name)
        at = at or self._clock()
        images = [f for f in images if not is_empty_upload(f)]

        with self._locks.hold((employee.username, at.date())):
            record = self._attendance.get_for_user_and_date(employee.username, at.date())
            if record is None:
                raise NotFoundError("No attendance record found for today")
            if record.attendance_type is not AttendanceType.WFF:
                raise ValidationError("Field images are allowed only for WFF attendance")
            if record.field_image_flag is FieldImageFlag.ADDED:
                raise ConflictError("Field images already uploaded for today")
            if not images:
                raise ValidationError("At least one field image is required")
            if not record.has_morning:
                raise ConflictError("Morning attendance must be marked before uploading field images")

            updated = self._with_field_images(record, images, at)
            try:
                record = self._save(updated)
            except Exception:
                self._storage.discard(*_added_paths(record, updated))
                raise

        logger.info("Stored %d field images for %s", len(images), record.user_name)
        return record

    def day_summary(self, user_name: str, day: date) -> DaySummary:
        employee = self._require_employee(user_name)
        if day.weekday() == SUNDAY:
            return DaySummary(employee.username, day, DayStatus.HOLIDAY.value, "Weekend (Sunday)", employee.office_name)

        holiday = self._reference.holiday_on(day)
        if holiday is not None:
            return DaySummary(
                employee.username, day, DayStatus.HOLIDAY.value, holiday.name or holiday.description, employee.office_name
            )

        leaves = self._leaves.list_overlapping(day, day, employee.username)
        if leaves:
            leave = leaves[0]
            return DaySummary(employee.username, day, DayStatus.LEAVE.value, leave.reason, leave.office_name)

        record = self._attendance.get_for_user_and_date(employee.username, day)
        if record is not None:
            return DaySummary.for_record(record)

        return DaySummary(
            employee.username, day, DayStatus.ABSENT.value, "No attendance or leave record found", employee.office_name
        )

    def find_by_id(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(attendance_id))
        if record is None:
            raise NotFoundError(f"Attendance not found with ID: {attendance_id}")
        return record

    def delete(self, attendance_id: int) -> None:
        record = self.find_by_id(attendance_id)
        with self._locks.hold((record.user_name, record.work_date)):
            if not self._attendance.delete(int(attendance_id)):
                raise NotFoundError(f"Attendance not found with ID: {attendance_id}")
        logger.info("Deleted attendance %s for %s", attendance_id, record.user_name)

    def _with_field_images(self, record: AttendanceRecord, images: Sequence[FileStorage], at: datetime) -> AttendanceRecord:
        stored: list[str] = []
        try:
            for upload in images:
                stored.append(self._storage.store_attendance_image(upload))
        except Exception:
            self._storage.discard(*stored)
            raise
        paths = tuple(stored)
        return replace(
            record,
            field_image_paths=record.field_image_paths + paths,
            field_image_time=at,
            field_image_flag=FieldImageFlag.ADDED,
        )

    def _save(self, record: AttendanceRecord) -> AttendanceRecord:
        if record.id is None:
            return replace(record, id=self._attendance.create(record))
        self._attendance.update(record)
        return record
