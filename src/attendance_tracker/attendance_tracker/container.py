from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .core.constants import LEDGER_TABLE, LOCATIONS_TABLE, ROSTER_TABLE
from .core.enums import StorageBackend
from .core.exceptions import ValidationError
from .database.connection import DatabaseConnection, DBConfig
from .database.mysql_table import MySQLTable
from .database.table import Table
from .database.workbook_table import WorkbookTable
from .ledger.repository import LEDGER_COLUMNS, LEDGER_KEY, LedgerRepository
from .ledger.service import AttendanceService
from .locations.repository import LOCATION_COLUMNS, LOCATION_KEY, WorkLocationRepository
from .locations.service import WorkLocationService
from .roster.repository import ROSTER_COLUMNS, ROSTER_KEY, RosterRepository
from .roster.service import RosterService


@dataclass(frozen=True)
class Tables:
    ledger: Table
    roster: Table
    locations: Table


@dataclass(frozen=True)
class Container:
    tables: Tables

    ledger_repo: LedgerRepository
    roster_repo: RosterRepository
    locations_repo: WorkLocationRepository

    roster_service: RosterService
    attendance_service: AttendanceService
    location_service: WorkLocationService


def build_tables(*, backend: str, db_config: Optional[dict] = None, workbook_path: Optional[str] = None) -> Tables:
    try:
        kind = StorageBackend(str(backend).lower())
    except ValueError:
        raise ValidationError(f"Unknown storage backend: {backend}") from None

    if kind == StorageBackend.MYSQL:
        conn = DatabaseConnection(DBConfig.from_dict(db_config or {}))
        return Tables(
            ledger=MySQLTable(conn, name=LEDGER_TABLE, key=LEDGER_KEY, columns=LEDGER_COLUMNS),
            roster=MySQLTable(conn, name=ROSTER_TABLE, key=ROSTER_KEY, columns=ROSTER_COLUMNS),
            locations=MySQLTable(conn, name=LOCATIONS_TABLE, key=LOCATION_KEY, columns=LOCATION_COLUMNS),
        )

    path = Path(workbook_path or "data/attendance.xlsx")
    return Tables(
        ledger=WorkbookTable(path, name=LEDGER_TABLE, key=LEDGER_KEY, columns=LEDGER_COLUMNS),
        roster=WorkbookTable(path, name=ROSTER_TABLE, key=ROSTER_KEY, columns=ROSTER_COLUMNS),
        locations=WorkbookTable(path, name=LOCATIONS_TABLE, key=LOCATION_KEY, columns=LOCATION_COLUMNS),
    )


def build_container_from_tables(tables: Tables) -> Container:
    ledger_repo = LedgerRepository(tables.ledger)
    roster_repo = RosterRepository(tables.roster)
    locations_repo = WorkLocationRepository(tables.locations)

    roster_service = RosterService(roster_repo)
    attendance_service = AttendanceService(ledger_repo, roster_service)
    location_service = WorkLocationService(locations_repo)

    return Container(
        tables=tables,
        ledger_repo=ledger_repo,
        roster_repo=roster_repo,
        locations_repo=locations_repo,
        roster_service=roster_service,
        attendance_service=attendance_service,
        location_service=location_service,
    )


def build_container(*, backend: str, db_config: Optional[dict] = None, workbook_path: Optional[str] = None) -> Container:
    return build_container_from_tables(build_tables(backend=backend, db_config=db_config, workbook_path=workbook_path))
