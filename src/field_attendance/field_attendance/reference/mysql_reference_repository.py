from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date, normalize_mysql_time
from .model import Holiday, OfficeHours
from .repository import ReferenceRepository


class MySQLReferenceRepository(ReferenceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _column(self, sql: str, params: tuple = ()) -> list[str]:
        with db_cursor(self._conn_factory, dictionary=False) as (_, cur):
            cur.execute(sql, params)
            return [str(row[0]) for row in cur.fetchall() if row[0] is not None]

    def list_districts(self) -> Sequence[str]:
        return self._column("SELECT DISTINCT dst FROM dst_teh_vil ORDER BY dst")

    def list_tehsils(self, district: str) -> Sequence[str]:
        return self._column("SELECT DISTINCT teh FROM dst_teh_vil WHERE dst=%s ORDER BY teh", (district,))

    def list_work_types(self) -> Sequence[str]:
        return self._column("SELECT name FROM work_types ORDER BY id")

    def list_office_names(self) -> Sequence[str]:
        return self._column("SELECT name FROM office_names ORDER BY name")

    def list_leave_types(self) -> Sequence[str]:
        return self._column("SELECT name FROM leave_types ORDER BY id")

    def get_office_hours(self) -> Optional[OfficeHours]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT start_time, end_time FROM office_time ORDER BY id LIMIT 1")
            row = fetchone(cur)
            if not row:
                return None
            return OfficeHours(
                start_time=normalize_mysql_time(row["start_time"]),
                end_time=normalize_mysql_time(row["end_time"]),
            )

    def list_holidays(self, start: date, end: date) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT holiday_date, name, description
                FROM holidays
                WHERE holiday_date BETWEEN %s AND %s
                ORDER BY holiday_date
                """,
                (start, end),
            )
            return [
                Holiday(
                    holiday_date=normalize_mysql_date(r["holiday_date"]),
                    name=r["name"],
                    description=r.get("description"),
                )
                for r in fetchall(cur)
            ]
