from __future__ import annotations

from dataclasses import fields
from typing import Any, Dict, Mapping, Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import PROFILE_FIELDS, Employee
from .repository import EmployeeRepository

_COLUMNS = tuple(f.name for f in fields(Employee))
_SELECT = f"SELECT {', '.join(_COLUMNS)} FROM employee"


def _row_to_employee(row: Dict[str, Any]) -> Employee:
    data = {name: row.get(name) for name in _COLUMNS}
    data["id"] = int(data["id"])
    data["is_active"] = bool(data.get("is_active"))
    return Employee(**data)


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _exists(self, column: str, value: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT 1 AS found FROM employee WHERE {column}=%s LIMIT 1", (value,))
            return fetchone(cur) is not None

    def _one(self, column: str, value: Any) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE {column}=%s", (value,))
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def exists_by_identity_card(self, identity_card_no: str) -> bool:
        return self._exists("identity_card_no", identity_card_no)

    def exists_by_designation(self, designation: str) -> bool:
        return self._exists("designation", designation)

    def create(self, employee: Employee) -> int:
        columns = [c for c in _COLUMNS if c != "id"]
        placeholders = ",".join(["%s"] * len(columns))
        values = tuple(getattr(employee, c) for c in columns)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"INSERT INTO employee({', '.join(columns)}) VALUES({placeholders})", values)
                return int(cur.lastrowid)
        except IntegrityError as exc:
            if is_duplicate_key(exc):
                raise ConflictError(
                    f"Employee with identity card {employee.identity_card_no} already exists"
                ) from exc
            raise

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._one("id", employee_id)

    def get_by_identity_card(self, identity_card_no: str) -> Optional[Employee]:
        return self._one("identity_card_no", identity_card_no)

    def get_by_username(self, username: str) -> Optional[Employee]:
        return self._one("username", username)

    def update_fields(self, employee_id: int, values: Mapping[str, str]) -> bool:
        allowed = {k: v for k, v in values.items() if k in PROFILE_FIELDS}
        if not allowed:
            return False
        assignments = ", ".join(f"{k}=%s" for k in allowed)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE employee SET {assignments} WHERE id=%s", (*allowed.values(), employee_id))
            return cur.rowcount > 0

    def set_active(self, username: str, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE employee SET is_active=%s WHERE username=%s", (1 if is_active else 0, username))
            return cur.rowcount > 0

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} ORDER BY id DESC")
            return [_row_to_employee(r) for r in fetchall(cur)]
