from __future__ import annotations

import mysql.connector
import pytest

from src.attendance_tracker.attendance_tracker.core.exceptions import TransportOrStorageError
from src.attendance_tracker.attendance_tracker.database.mysql_table import MySQLTable


class FakeCursor:
    def __init__(self, conn):
        self._conn = conn
        self.rowcount = 0

    def execute(self, sql, params=None):
        if self._conn.fail_with:
            raise self._conn.fail_with
        self._conn.executed.append((" ".join(sql.split()), params))
        self.rowcount = self._conn.rowcount

    def fetchall(self):
        return self._conn.rows

    def close(self):
        pass


class FakeConnection:
    def __init__(self, rows=None, rowcount=1, fail_with=None):
        self.rows = rows or []
        self.rowcount = rowcount
        self.fail_with = fail_with
        self.executed = []
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=False):
        return FakeCursor(self)

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeConnFactory:
    def __init__(self, conn):
        self.conn = conn

    def connect(self):
        return self.conn


def _table(conn):
    return MySQLTable(FakeConnFactory(conn), name="work_locations", key="location_id", columns=("location_id", "student_id", "name"))


def test_find_filters_in_python_after_ordered_scan():
    conn = FakeConnection(
        rows=[
            {"location_id": "L1", "student_id": "STU001", "name": "Lab"},
            {"location_id": "L2", "student_id": "stu001", "name": "Gym"},
        ]
    )

    rows = _table(conn).find(lambda r: r["student_id"] == "STU001")

    assert rows == [{"location_id": "L1", "student_id": "STU001", "name": "Lab"}]
    assert conn.executed == [("SELECT `location_id`, `student_id`, `name` FROM `work_locations` ORDER BY row_id", None)]
    assert conn.committed and conn.closed


def test_append_inserts_known_columns_only():
    conn = FakeConnection()
    _table(conn).append({"location_id": "L1", "student_id": "STU001", "name": "Lab", "extra": 1})

    assert conn.executed == [
        (
            "INSERT INTO `work_locations` (`location_id`, `student_id`, `name`) VALUES (%s, %s, %s)",
            ("L1", "STU001", "Lab"),
        )
    ]


def test_update_skips_key_and_unknown_columns():
    conn = FakeConnection(rowcount=1)
    assert _table(conn).update("L1", {"name": "Lab 2", "location_id": "X", "bogus": 1}) is True
    assert conn.executed == [
        ("UPDATE `work_locations` SET `name`=%s WHERE BINARY `location_id`=%s LIMIT 1", ("Lab 2", "L1"))
    ]


def test_update_with_nothing_to_set_does_not_touch_db():
    conn = FakeConnection()
    assert _table(conn).update("L1", {"location_id": "X"}) is False
    assert conn.executed == []


def test_delete_reports_missing_row():
    conn = FakeConnection(rowcount=0)
    assert _table(conn).delete("L404") is False
    assert conn.executed == [("DELETE FROM `work_locations` WHERE BINARY `location_id`=%s LIMIT 1", ("L404",))]


def test_driver_errors_become_storage_errors():
    conn = FakeConnection(fail_with=mysql.connector.Error("Lost connection"))

    with pytest.raises(TransportOrStorageError, match="Lost connection"):
        _table(conn).find(lambda r: True)

    assert conn.rolled_back and conn.closed
