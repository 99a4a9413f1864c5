from __future__ import annotations

import mysql.connector
import pytest

from src.attendance_tracker.attendance_tracker.container import build_tables
from src.attendance_tracker.attendance_tracker.core.exceptions import TransportOrStorageError, ValidationError


def test_each_mysql_build_uses_its_own_config(monkeypatch):
    seen = []

    def fake_connect(**kwargs):
        seen.append(kwargs["database"])
        raise mysql.connector.Error("offline")

    monkeypatch.setattr(mysql.connector, "connect", fake_connect)

    first = build_tables(backend="mysql", db_config={"database": "school_a"})
    second = build_tables(backend="MySQL", db_config={"database": "school_b"})

    for tables in (first, second):
        with pytest.raises(TransportOrStorageError):
            tables.roster.find(lambda r: True)

    assert seen == ["school_a", "school_b"]


def test_unknown_backend_is_rejected():
    with pytest.raises(ValidationError):
        build_tables(backend="sqlite")
