from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence

import pytest

from src.attendance_tracker.attendance_tracker.container import Tables, build_container_from_tables
from src.attendance_tracker.attendance_tracker.core.constants import LEDGER_TABLE, LOCATIONS_TABLE, ROSTER_TABLE
from src.attendance_tracker.attendance_tracker.ledger.repository import LEDGER_COLUMNS, LEDGER_KEY
from src.attendance_tracker.attendance_tracker.locations.repository import LOCATION_COLUMNS, LOCATION_KEY
from src.attendance_tracker.attendance_tracker.roster.repository import ROSTER_COLUMNS, ROSTER_KEY


class InMemoryTable:
    def __init__(self, *, name: str, key: str, columns: Sequence[str], rows: Optional[List[Dict[str, Any]]] = None):
        self.name = name
        self.key = key
        self.columns = tuple(columns)
        self.rows: List[Dict[str, Any]] = [dict(r) for r in rows or []]
        self.writes = 0

    def find(self, predicate):
        return [dict(r) for r in self.rows if predicate(dict(r))]

    def append(self, row: Mapping[str, Any]) -> None:
        self.writes += 1
        self.rows.append({c: row.get(c) for c in self.columns})

    def update(self, key, fields: Mapping[str, Any]) -> bool:
        for r in self.rows:
            if r.get(self.key) == key:
                self.writes += 1
                r.update({c: v for c, v in fields.items() if c in self.columns and c != self.key})
                return True
        return False

    def delete(self, key) -> bool:
        for i, r in enumerate(self.rows):
            if r.get(self.key) == key:
                self.writes += 1
                del self.rows[i]
                return True
        return False


def roster_row(student_id: str, present: int, absent: int, *, name: str = "Student", email: str = "", percentage: str = "0%"):
    return {
        "student_id": student_id,
        "name": name,
        "email": email,
        "present_count": present,
        "absent_count": absent,
        "percentage": percentage,
    }


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 2, 8, 25, 0)


@pytest.fixture
def table_factory():
    return InMemoryTable


@pytest.fixture
def tables() -> Tables:
    return Tables(
        ledger=InMemoryTable(name=LEDGER_TABLE, key=LEDGER_KEY, columns=LEDGER_COLUMNS),
        roster=InMemoryTable(
            name=ROSTER_TABLE,
            key=ROSTER_KEY,
            columns=ROSTER_COLUMNS,
            rows=[
                roster_row("STU001", 0, 22, name="Alice Nguyen"),
                roster_row("STU002", 10, 12, name="Bao Tran", percentage="45%"),
            ],
        ),
        locations=InMemoryTable(name=LOCATIONS_TABLE, key=LOCATION_KEY, columns=LOCATION_COLUMNS),
    )


@pytest.fixture
def container(tables):
    return build_container_from_tables(tables)


@pytest.fixture
def client(container, monkeypatch):
    from src.attendance_tracker.attendance_tracker.main import create_app

    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container)
    return app.test_client()


@pytest.fixture(name="roster_row")
def roster_row_fixture():
    return roster_row
