from __future__ import annotations

from typing import Any, List, Mapping, Sequence

from .connection import DatabaseConnection
from .mysql_base import db_cursor, fetchall
from .table import Predicate, Row, Table, project


class MySQLTable(Table):
    """Table backed by a MySQL table.

    Every table carries an AUTO_INCREMENT ``row_id`` used only for ordering;
    scans load all rows and filter in Python so matching stays exact and
    case-sensitive regardless of the column collation.
    """

    def __init__(self, conn_factory: DatabaseConnection, *, name: str, key: str, columns: Sequence[str]):
        self._conn_factory = conn_factory
        self.name = name
        self.key = key
        self.columns = tuple(columns)

    def _column_list(self, columns: Sequence[str]) -> str:
        return ", ".join(f"`{c}`" for c in columns)

    def find(self, predicate: Predicate) -> List[Row]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {self._column_list(self.columns)} FROM `{self.name}` ORDER BY row_id")
            rows = fetchall(cur)
        return [r for r in rows if predicate(r)]

    def append(self, row: Mapping[str, Any]) -> None:
        values = project(row, self.columns)
        placeholders = ", ".join(["%s"] * len(self.columns))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO `{self.name}` ({self._column_list(self.columns)}) VALUES ({placeholders})",
                tuple(values[c] for c in self.columns),
            )

    def update(self, key: Any, fields: Mapping[str, Any]) -> bool:
        names = [c for c in fields if c in self.columns and c != self.key]
        if not names:
            return False
        assignments = ", ".join(f"`{c}`=%s" for c in names)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE `{self.name}` SET {assignments} WHERE BINARY `{self.key}`=%s LIMIT 1",
                tuple(fields[c] for c in names) + (key,),
            )
            return cur.rowcount > 0

    def delete(self, key: Any) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM `{self.name}` WHERE BINARY `{self.key}`=%s LIMIT 1", (key,))
            return cur.rowcount > 0
