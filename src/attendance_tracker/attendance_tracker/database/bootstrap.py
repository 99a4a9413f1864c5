from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

import mysql.connector

from ..core.exceptions import TransportOrStorageError
from ..roster.model import RosterEntry
from ..roster.repository import RosterRepository
from .connection import DatabaseConnection, DBConfig
from .workbook_table import WorkbookTable

logger = logging.getLogger(__name__)

# Mirrors database/seed.sql for the workbook backend.
DEMO_STUDENTS = (
    RosterEntry(student_id="STU001", name="Alice Nguyen", email="alice@example.edu", present_count=0, absent_count=22, percentage=0),
    RosterEntry(student_id="STU002", name="Bao Tran", email="bao@example.edu", present_count=10, absent_count=12, percentage=45),
    RosterEntry(student_id="STU003", name="Chloe Pham", email="chloe@example.edu", present_count=20, absent_count=2, percentage=91),
)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
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


def _run_sql_file(conn_factory: DatabaseConnection, path: str | Path) -> None:
    sql = _strip_create_db_and_use(Path(path).read_text(encoding="utf-8"))
    try:
        conn = conn_factory.connect()
        try:
            cur = conn.cursor()
            for stmt in _iter_sql_statements(sql):
                cur.execute(stmt)
            conn.commit()
        finally:
            conn.close()
    except mysql.connector.Error as e:
        raise TransportOrStorageError(f"Failed to apply {path}: {e}") from e


def ensure_database_exists(db_config: dict) -> None:
    config = DBConfig.from_dict(db_config)
    try:
        conn = DatabaseConnection(config).connect(with_database=False)
        try:
            cur = conn.cursor()
            cur.execute(
                f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
            )
            conn.commit()
        finally:
            conn.close()
    except mysql.connector.Error as e:
        raise TransportOrStorageError(f"Cannot create database {config.database}: {e}") from e


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    _run_sql_file(DatabaseConnection(DBConfig.from_dict(db_config)), schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    _run_sql_file(DatabaseConnection(DBConfig.from_dict(db_config)), seed_path)


def list_tables(db_config: dict) -> list[str]:
    try:
        conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
        try:
            cur = conn.cursor()
            cur.execute("SHOW TABLES")
            return [row[0] for row in cur.fetchall()]
        finally:
            conn.close()
    except mysql.connector.Error as e:
        raise TransportOrStorageError(f"Cannot list tables: {e}") from e


def ensure_workbook(tables: Iterable[WorkbookTable]) -> None:
    """Create missing sheets (with header rows) in the workbook."""
    for table in tables:
        table.ensure()


def seed_workbook(roster_table: WorkbookTable) -> int:
    """Insert demo roster rows that are not present yet. Returns rows added."""
    roster = RosterRepository(roster_table)
    added = 0
    for entry in DEMO_STUDENTS:
        if roster.get(entry.student_id) is None:
            roster.add(entry)
            added += 1
    logger.info("Seeded %s demo students", added)
    return added
