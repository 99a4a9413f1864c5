from __future__ import annotations

import threading
import zipfile
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence

from openpyxl import Workbook, load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from ..core.exceptions import TransportOrStorageError
from .table import Predicate, Row, Table, project

# One lock per workbook file; openpyxl rewrites the whole file on save.
_LOCKS: Dict[str, threading.Lock] = {}
_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    with _LOCKS_GUARD:
        return _LOCKS.setdefault(str(path.resolve()), threading.Lock())


@contextmanager
def open_workbook(path: Path, *, save: bool):
    """Load the workbook (creating it if missing), optionally saving on exit."""

    with _lock_for(path):
        try:
            if path.exists():
                wb = load_workbook(path)
            else:
                path.parent.mkdir(parents=True, exist_ok=True)
                wb = Workbook()
                # Drop the default empty sheet; tables create their own.
                wb.remove(wb.active)
        except (OSError, InvalidFileException, KeyError, zipfile.BadZipFile) as e:
            raise TransportOrStorageError(f"Cannot open workbook {path}: {e}") from e

        yield wb

        if save:
            try:
                wb.save(path)
            except OSError as e:
                raise TransportOrStorageError(f"Cannot save workbook {path}: {e}") from e


class WorkbookTable(Table):
    """Table stored as one sheet of an ``.xlsx`` workbook.

    The first row of the sheet is the header; columns are located by header
    name so a sheet may carry extra columns or a different column order.
    """

    def __init__(self, path: str | Path, *, name: str, key: str, columns: Sequence[str]):
        self._path = Path(path)
        self.name = name
        self.key = key
        self.columns = tuple(columns)

    def _sheet(self, wb):
        if self.name in wb.sheetnames:
            ws = wb[self.name]
            if ws.max_row == 1 and all(c.value is None for c in ws[1]):
                for col, name in enumerate(self.columns, start=1):
                    ws.cell(row=1, column=col, value=name)
            return ws
        ws = wb.create_sheet(self.name)
        ws.append(list(self.columns))
        return ws

    @staticmethod
    def _header(ws) -> List[str]:
        return [str(c.value) if c.value is not None else "" for c in ws[1]]

    def _rows(self, ws):
        """Yield ``(sheet_row_number, row_dict)`` for every non-blank data row."""
        header = self._header(ws)
        for idx, values in enumerate(ws.iter_rows(min_row=2, values_only=True), start=2):
            if all(v is None for v in values):
                continue
            yield idx, dict(zip(header, values))

    def _key_matches(self, row: Row, key: Any) -> bool:
        # Hand-typed sheets store numeric ids as numbers; compare as text like the repositories do.
        value = row.get(self.key)
        return value is not None and str(value) == str(key)

    def ensure(self) -> None:
        """Create the sheet and header row if missing."""
        with open_workbook(self._path, save=True) as wb:
            self._sheet(wb)

    def find(self, predicate: Predicate) -> List[Row]:
        with open_workbook(self._path, save=False) as wb:
            if self.name not in wb.sheetnames:
                return []
            rows = (project(row, self.columns) for _, row in self._rows(wb[self.name]))
            return [r for r in rows if predicate(r)]

    def append(self, row: Mapping[str, Any]) -> None:
        with open_workbook(self._path, save=True) as wb:
            ws = self._sheet(wb)
            header = self._header(ws)
            values = project(row, self.columns)
            ws.append([values.get(h) for h in header])

    def update(self, key: Any, fields: Mapping[str, Any]) -> bool:
        with open_workbook(self._path, save=True) as wb:
            ws = self._sheet(wb)
            header = self._header(ws)
            for idx, row in self._rows(ws):
                if not self._key_matches(row, key):
                    continue
                for column, value in fields.items():
                    if column in header and column != self.key:
                        ws.cell(row=idx, column=header.index(column) + 1, value=value)
                return True
            return False

    def delete(self, key: Any) -> bool:
        with open_workbook(self._path, save=True) as wb:
            ws = self._sheet(wb)
            for idx, row in self._rows(ws):
                if self._key_matches(row, key):
                    ws.delete_rows(idx)
                    return True
            return False
