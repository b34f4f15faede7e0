from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.enums import AttendanceStatus, AttendanceType, FieldImageFlag
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    db_cursor,
    fetchall,
    fetchone,
    is_duplicate_key,
    normalize_mysql_date,
    normalize_mysql_datetime,
)
from .model import AttendanceRecord
from .repository import AttendanceRepository

_SELECT = """
    SELECT id, user_name, attendance_date, attendance_type, status, reason, office_name,
           morning_image_path, morning_time, evening_image_path, evening_time,
           field_image_path, field_image_time, field_image_uploaded
    FROM attendance
"""


def _split_paths(value: Optional[str]) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(p for p in (s.strip() for s in value.split(",")) if p)


def _row_to_record(row: Dict[str, Any]) -> AttendanceRecord:
    status = row.get("status")
    return AttendanceRecord(
        id=int(row["id"]),
        user_name=row["user_name"],
        work_date=normalize_mysql_date(row["attendance_date"]),
        attendance_type=AttendanceType(row["attendance_type"]),
        status=AttendanceStatus(status) if status else None,
        reason=row.get("reason"),
        office_name=row.get("office_name"),
        morning_image_path=row.get("morning_image_path"),
        morning_time=normalize_mysql_datetime(row.get("morning_time")),
        evening_image_path=row.get("evening_image_path"),
        evening_time=normalize_mysql_datetime(row.get("evening_time")),
        field_image_paths=_split_paths(row.get("field_image_path")),
        field_image_time=normalize_mysql_datetime(row.get("field_image_time")),
        field_image_flag=FieldImageFlag(row.get("field_image_uploaded") or FieldImageFlag.NOT_ADDED.value),
    )


def _mutable_values(r: AttendanceRecord) -> tuple:
    return (
        r.status.value if r.status else None,
        r.reason,
        r.office_name,
        r.morning_image_path,
        r.morning_time,
        r.evening_image_path,
        r.evening_time,
        ",".join(r.field_image_paths) or None,
        r.field_image_time,
        r.field_image_flag.value,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE id=%s", (attendance_id,))
            row = fetchone(cur)
            return _row_to_record(row) if row else None

    def get_for_user_and_date(self, user_name: str, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE user_name=%s AND attendance_date=%s", (user_name, work_date))
            row = fetchone(cur)
            return _row_to_record(row) if row else None

    def create(self, record: AttendanceRecord) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance(
                        user_name, attendance_date, attendance_type,
                        status, reason, office_name,
                        morning_image_path, morning_time, evening_image_path, evening_time,
                        field_image_path, field_image_time, field_image_uploaded
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (record.user_name, record.work_date, record.attendance_type.value, *_mutable_values(record)),
                )
                return int(cur.lastrowid)
        except IntegrityError as exc:
            if is_duplicate_key(exc):
                raise ConflictError("Attendance for this user and date was recorded concurrently, please retry") from exc
            raise

    def update(self, record: AttendanceRecord) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET status=%s, reason=%s, office_name=%s,
                    morning_image_path=%s, morning_time=%s, evening_image_path=%s, evening_time=%s,
                    field_image_path=%s, field_image_time=%s, field_image_uploaded=%s
                WHERE id=%s
                """,
                (*_mutable_values(record), record.id),
            )
            return cur.rowcount > 0

    def delete(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance WHERE id=%s", (attendance_id,))
            return cur.rowcount > 0

    def list_for_user_between(self, user_name: str, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE user_name=%s AND attendance_date BETWEEN %s AND %s ORDER BY attendance_date",
                (user_name, start, end),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE attendance_date=%s ORDER BY user_name", (work_date,))
            return [_row_to_record(r) for r in fetchall(cur)]
