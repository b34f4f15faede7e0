from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_datetime
from .model import LocationSample
from .repository import LocationRepository

_SELECT = "SELECT id, user_name, lat, lon, timestamp FROM wff_location_tracking"


def _row_to_sample(row: Dict[str, Any]) -> LocationSample:
    return LocationSample(
        id=int(row["id"]),
        user_name=row["user_name"],
        lat=float(row["lat"]),
        lon=float(row["lon"]),
        timestamp=normalize_mysql_datetime(row["timestamp"]),
    )


class MySQLLocationRepository(LocationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(self, sample: LocationSample) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO wff_location_tracking(user_name, lat, lon, timestamp, date)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (sample.user_name, sample.lat, sample.lon, sample.timestamp, sample.timestamp.date()),
            )
            return int(cur.lastrowid)

    def latest_per_user(self) -> Sequence[LocationSample]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT w.id, w.user_name, w.lat, w.lon, w.timestamp
                FROM wff_location_tracking w
                INNER JOIN (
                    SELECT user_name, MAX(id) AS max_id
                    FROM wff_location_tracking t
                    WHERE t.timestamp = (
                        SELECT MAX(t2.timestamp) FROM wff_location_tracking t2 WHERE t2.user_name = t.user_name
                    )
                    GROUP BY user_name
                ) latest ON latest.max_id = w.id
                ORDER BY w.user_name
                """
            )
            return [_row_to_sample(r) for r in fetchall(cur)]

    def latest_for_user(self, user_name: str) -> Optional[LocationSample]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE user_name=%s ORDER BY timestamp DESC, id DESC LIMIT 1", (user_name,))
            row = fetchone(cur)
            return _row_to_sample(row) if row else None

    def history_for_user(self, user_name: str) -> Sequence[LocationSample]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE user_name=%s ORDER BY timestamp ASC, id ASC", (user_name,))
            return [_row_to_sample(r) for r in fetchall(cur)]

    def history_between(
        self, start: datetime, end: datetime, user_name: Optional[str] = None
    ) -> Sequence[LocationSample]:
        sql = _SELECT + " WHERE timestamp BETWEEN %s AND %s"
        params: list[Any] = [start, end]
        if user_name:
            sql += " AND user_name=%s"
            params.append(user_name)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY timestamp DESC, id DESC", tuple(params))
            return [_row_to_sample(r) for r in fetchall(cur)]
