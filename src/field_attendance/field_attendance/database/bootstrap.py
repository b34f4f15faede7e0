from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Mapping

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)

REQUIRED_TABLES = (
    "users",
    "employee",
    "attendance",
    "wff_location_tracking",
    "leave_requests",
    "extra_work",
    "dst_teh_vil",
    "work_types",
    "office_names",
    "office_time",
    "holidays",
    "leave_types",
)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_line_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(db_config: Mapping[str, object], path: str | Path) -> int:
    target = DBConfig.from_mapping(db_config)
    sql = _strip_line_comments(_strip_create_db_and_use(Path(path).read_text(encoding="utf-8")))

    conn = mysql.connector.connect(**target.as_connect_kwargs(), use_pure=True)
    count = 0
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()
    finally:
        conn.close()
    return count


def ensure_database_exists(db_config: Mapping[str, object]) -> None:
    target = DBConfig.from_mapping(db_config)
    conn = mysql.connector.connect(**target.as_connect_kwargs(with_database=False), use_pure=True)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: Mapping[str, object], *, schema_path: str | Path) -> int:
    ensure_database_exists(db_config)
    count = _run_script(db_config, schema_path)
    logger.info("Applied %d schema statements from %s", count, schema_path)
    return count


def apply_seed_sql(db_config: Mapping[str, object], *, seed_path: str | Path) -> int:
    count = _run_script(db_config, seed_path)
    logger.info("Applied %d seed statements from %s", count, seed_path)
    return count


def list_tables(db_config: Mapping[str, object]) -> list[str]:
    target = DBConfig.from_mapping(db_config)
    conn = mysql.connector.connect(**target.as_connect_kwargs(), use_pure=True)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()


def missing_tables(db_config: Mapping[str, object]) -> list[str]:
    """Tables the service queries that the target database does not have yet."""
    present = {name.lower() for name in list_tables(db_config)}
    return [name for name in REQUIRED_TABLES if name not in present]
