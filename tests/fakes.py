"""In-memory repositories shared by the service and API tests."""

from __future__ import annotations

import io
import itertools
from dataclasses import replace
from datetime import date, time
from typing import Optional

from PIL import Image
from werkzeug.datastructures import FileStorage

from src.field_attendance.field_attendance.core.enums import LeaveStatus
from src.field_attendance.field_attendance.core.exceptions import ConflictError
from src.field_attendance.field_attendance.employees.model import Employee
from src.field_attendance.field_attendance.reference.model import Holiday, OfficeHours
from src.field_attendance.field_attendance.users.model import User


def png_bytes(size=(4, 4), color=(200, 30, 30)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


def upload(name: str = "photo.png", data: Optional[bytes] = None, content_type: str = "image/png") -> FileStorage:
    return FileStorage(stream=io.BytesIO(png_bytes() if data is None else data), filename=name, content_type=content_type)


def make_employee(username: str = "1234_Asha", **overrides) -> Employee:
    card, _, name = username.partition("_")
    values = dict(
        id=None,
        name=name or username,
        identity_card_no=card,
        username=username,
        designation="Lucknow-Surveyor-1",
        post="Surveyor",
        district="Lucknow",
        tehsil="Sadar",
        office_name="Lucknow HQ",
    )
    values.update(overrides)
    return Employee(**values)


class FakeEmployeeRepo:
    def __init__(self, *employees: Employee):
        self._ids = itertools.count(1)
        self.rows: dict[int, Employee] = {}
        self.active: dict[str, bool] = {}
        for e in employees:
            self.create(e)

    def exists_by_identity_card(self, identity_card_no):
        return any(e.identity_card_no == identity_card_no for e in self.rows.values())

    def exists_by_designation(self, designation):
        return any(e.designation == designation for e in self.rows.values())

    def create(self, employee):
        if self.exists_by_identity_card(employee.identity_card_no):
            raise ConflictError(f"Employee with identity card {employee.identity_card_no} already exists")
        new_id = next(self._ids)
        self.rows[new_id] = replace(employee, id=new_id)
        return new_id

    def get_by_id(self, employee_id):
        return self.rows.get(int(employee_id))

    def get_by_identity_card(self, identity_card_no):
        return next((e for e in self.rows.values() if e.identity_card_no == identity_card_no), None)

    def get_by_username(self, username):
        return next((e for e in self.rows.values() if e.username == username), None)

    def update_fields(self, employee_id, fields):
        self.rows[employee_id] = replace(self.rows[employee_id], **fields)
        return True

    def set_active(self, username, *, is_active):
        self.active[username] = is_active
        employee = self.get_by_username(username)
        if employee is None:
            return False
        self.rows[employee.id] = replace(employee, is_active=is_active)
        return True

    def list_all(self):
        return list(self.rows.values())


class FakeAttendanceRepo:
    def __init__(self):
        self._ids = itertools.count(1)
        self.rows = {}

    def get_by_id(self, attendance_id):
        return self.rows.get(attendance_id)

    def get_for_user_and_date(self, user_name, work_date):
        return next((r for r in self.rows.values() if r.user_name == user_name and r.work_date == work_date), None)

    def create(self, record):
        if self.get_for_user_and_date(record.user_name, record.work_date) is not None:
            raise ConflictError("User has already marked attendance for today.")
        new_id = next(self._ids)
        self.rows[new_id] = replace(record, id=new_id)
        return new_id

    def update(self, record):
        self.rows[record.id] = record
        return True

    def delete(self, attendance_id):
        return self.rows.pop(attendance_id, None) is not None

    def list_for_user_between(self, user_name, start, end):
        return sorted(
            (r for r in self.rows.values() if r.user_name == user_name and start <= r.work_date <= end),
            key=lambda r: r.work_date,
        )

    def list_for_date(self, work_date):
        return [r for r in self.rows.values() if r.work_date == work_date]


class FakeReferenceRepo:
    def __init__(self, holidays=(), hours: Optional[OfficeHours] = OfficeHours(time(10, 0), time(18, 0))):
        self.holidays = [Holiday(d, n) for d, n in holidays]
        self.hours = hours
        self.tehsils = {"Lucknow": ["Sadar", "Malihabad"], "Kanpur Nagar": ["Bilhaur"]}
        self.district_calls = 0

    def list_districts(self):
        self.district_calls += 1
        return list(self.tehsils)

    def list_tehsils(self, district):
        return self.tehsils.get(district, [])

    def list_work_types(self):
        return ["Survey", "Inspection"]

    def list_office_names(self):
        return ["Lucknow HQ"]

    def list_leave_types(self):
        return ["Casual", "Medical"]

    def get_office_hours(self):
        return self.hours

    def list_holidays(self, start: date, end: date):
        return [h for h in self.holidays if start <= h.holiday_date <= end]


class FakeLeaveRepo:
    def __init__(self, *leaves):
        self._ids = itertools.count(1)
        self.rows = {}
        for leave in leaves:
            self.create_leave(leave)

    def create_leave(self, leave):
        new_id = next(self._ids)
        self.rows[new_id] = replace(leave, id=new_id)
        return new_id

    def list_leaves(self, username=None):
        return [l for l in self.rows.values() if username is None or l.username == username]

    def list_active_for_user(self, username):
        return [l for l in self.list_leaves(username) if l.status is not LeaveStatus.REJECTED]

    def list_overlapping(self, start, end, username=None):
        return [
            l for l in self.rows.values()
            if l.status is not LeaveStatus.REJECTED
            and (username is None or l.username == username)
            and l.overlaps(start, end)
        ]


class FakeExtraWorkRepo:
    def __init__(self):
        self._ids = itertools.count(1)
        self.rows = {}

    def create_extra_work(self, work):
        new_id = next(self._ids)
        self.rows[new_id] = replace(work, id=new_id)
        return new_id

    def list_for_user_and_date(self, username, work_date):
        return [w for w in self.rows.values() if w.username == username and w.work_date == work_date]


class FakeUserRepo:
    def __init__(self):
        self._ids = itertools.count(1)
        self.rows: dict[str, User] = {}

    def get_by_username(self, username):
        return self.rows.get(username)

    def exists_by_username(self, username):
        return username in self.rows

    def exists_by_email(self, email):
        return any(u.email == email for u in self.rows.values())

    def create_user(self, *, username, email, password_hash, role):
        if username in self.rows:
            raise ConflictError("Username already exists")
        user_id = next(self._ids)
        self.rows[username] = User(user_id=user_id, username=username, email=email, password_hash=password_hash, role=role)
        return user_id


class FakeLocationRepo:
    def __init__(self):
        self._ids = itertools.count(1)
        self.rows = []

    def append(self, sample):
        sample = replace(sample, id=next(self._ids))
        self.rows.append(sample)
        return sample.id

    def latest_per_user(self):
        latest = {}
        for s in self.rows:
            current = latest.get(s.user_name)
            if current is None or (s.timestamp, s.id) >= (current.timestamp, current.id):
                latest[s.user_name] = s
        return [latest[k] for k in sorted(latest)]

    def latest_for_user(self, user_name):
        history = self.history_for_user(user_name)
        return history[-1] if history else None

    def history_for_user(self, user_name):
        return sorted((s for s in self.rows if s.user_name == user_name), key=lambda s: (s.timestamp, s.id))

    def history_between(self, start, end, user_name=None):
        found = [s for s in self.rows if start <= s.timestamp <= end and (user_name is None or s.user_name == user_name)]
        return sorted(found, key=lambda s: (s.timestamp, s.id), reverse=True)


class FakeStorage:
    """Attendance image storage that records names instead of writing files."""

    def __init__(self):
        self.stored: list[str] = []
        self.discarded: list[str] = []

    def store_attendance_image(self, upload):
        path = f"img-{len(self.stored) + 1}_{upload.filename}"
        self.stored.append(path)
        return path

    def discard(self, *relatives):
        self.discarded.extend(p for p in relatives if p)
