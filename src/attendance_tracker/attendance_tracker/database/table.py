from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Protocol, Sequence

Row = Dict[str, Any]
Predicate = Callable[[Row], bool]


class Table(Protocol):
    """Row-oriented storage for one logical table (or spreadsheet sheet).

    Rows are plain dicts keyed by column name. ``find`` returns matches in
    insertion order; ``update``/``delete`` address a single row by the value
    of the table's key column and report whether a row was touched.
    """

    name: str
    key: str
    columns: Sequence[str]

    def find(self, predicate: Predicate) -> List[Row]:
        raise NotImplementedError

    def append(self, row: Mapping[str, Any]) -> None:
        raise NotImplementedError

    def update(self, key: Any, fields: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, key: Any) -> bool:
        raise NotImplementedError


def project(row: Mapping[str, Any], columns: Sequence[str]) -> Row:
    return {c: row.get(c) for c in columns}
