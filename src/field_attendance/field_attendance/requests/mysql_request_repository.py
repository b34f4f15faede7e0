from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..core.enums import LeaveStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    db_cursor,
    fetchall,
    normalize_mysql_date,
    normalize_mysql_datetime,
    normalize_mysql_time,
)
from .model import ExtraWork, LeaveRequest
from .repository import ExtraWorkRepository, LeaveRepository

_LEAVE_SELECT = """
    SELECT id, username, office_name, start_date, end_date, duration_type, leave_type,
           reason, status, approved_by, applied_on, updated_on
    FROM leave_requests
"""


def _row_to_leave(row: Dict[str, Any]) -> LeaveRequest:
    return LeaveRequest(
        id=int(row["id"]),
        username=row["username"],
        office_name=row.get("office_name"),
        start_date=normalize_mysql_date(row["start_date"]),
        end_date=normalize_mysql_date(row["end_date"]),
        duration_type=row["duration_type"],
        leave_type=row.get("leave_type"),
        reason=row.get("reason"),
        status=LeaveStatus(str(row["status"]).upper()),
        approved_by=row.get("approved_by"),
        applied_on=normalize_mysql_datetime(row.get("applied_on")),
        updated_on=normalize_mysql_datetime(row.get("updated_on")),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_leave(self, leave: LeaveRequest) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(
                    username, office_name, start_date, end_date, duration_type,
                    leave_type, reason, status, approved_by, applied_on, updated_on
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    leave.username,
                    leave.office_name,
                    leave.start_date,
                    leave.end_date,
                    leave.duration_type,
                    leave.leave_type,
                    leave.reason,
                    leave.status.value,
                    leave.approved_by,
                    leave.applied_on,
                    leave.updated_on,
                ),
            )
            return int(cur.lastrowid)

    def list_leaves(self, username: Optional[str] = None) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            if username:
                cur.execute(_LEAVE_SELECT + " WHERE username=%s ORDER BY start_date DESC", (username,))
            else:
                cur.execute(_LEAVE_SELECT + " ORDER BY start_date DESC")
            return [_row_to_leave(r) for r in fetchall(cur)]

    def list_active_for_user(self, username: str) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _LEAVE_SELECT + " WHERE username=%s AND UPPER(status)<>%s ORDER BY start_date",
                (username, LeaveStatus.REJECTED.value),
            )
            return [_row_to_leave(r) for r in fetchall(cur)]

    def list_overlapping(self, start: date, end: date, username: Optional[str] = None) -> Sequence[LeaveRequest]:
        sql = _LEAVE_SELECT + " WHERE start_date<=%s AND end_date>=%s AND UPPER(status)<>%s"
        params: list[Any] = [end, start, LeaveStatus.REJECTED.value]
        if username:
            sql += " AND username=%s"
            params.append(username)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY start_date", tuple(params))
            return [_row_to_leave(r) for r in fetchall(cur)]


class MySQLExtraWorkRepository(ExtraWorkRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_extra_work(self, work: ExtraWork) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO extra_work(username, office_name, work_date, start_time, end_time, reason)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (work.username, work.office_name, work.work_date, work.start_time, work.end_time, work.reason),
            )
            return int(cur.lastrowid)

    def list_for_user_and_date(self, username: str, work_date: date) -> Sequence[ExtraWork]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, username, office_name, work_date, start_time, end_time, reason
                FROM extra_work
                WHERE username=%s AND work_date=%s
                ORDER BY start_time
                """,
                (username, work_date),
            )
            return [
                ExtraWork(
                    id=int(r["id"]),
                    username=r["username"],
                    office_name=r.get("office_name"),
                    work_date=normalize_mysql_date(r["work_date"]),
                    start_time=normalize_mysql_time(r["start_time"]),
                    end_time=normalize_mysql_time(r["end_time"]),
                    reason=r.get("reason"),
                )
                for r in fetchall(cur)
            ]
