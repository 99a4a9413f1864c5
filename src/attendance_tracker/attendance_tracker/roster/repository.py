from __future__ import annotations

from typing import Any, Mapping, Optional

from ..database.table import Row, Table
from .model import RosterEntry, attendance_percentage, format_percentage

ROSTER_COLUMNS = ("student_id", "name", "email", "present_count", "absent_count", "percentage")
ROSTER_KEY = "student_id"


def _as_int(value: Any) -> int:
    if value is None or value == "":
        return 0
    return int(float(value))


def _parse_percentage(value: Any, present: int, absent: int) -> int:
    """Read the stored ``"NN%"`` cell; recompute if it is blank or malformed."""
    if value is None or value == "":
        return attendance_percentage(present, present + absent)
    try:
        return int(round(float(str(value).strip().rstrip("%"))))
    except ValueError:
        return attendance_percentage(present, present + absent)


class RosterRepository:
    def __init__(self, table: Table):
        self._table = table

    def get(self, student_id: str) -> Optional[RosterEntry]:
        rows = self._table.find(lambda r: r.get("student_id") is not None and str(r["student_id"]) == student_id)
        if not rows:
            return None
        return self._to_entry(rows[0])

    def add(self, entry: RosterEntry) -> None:
        """Seed a roster row (roster rows are provisioned out of band)."""
        self._table.append(
            {
                "student_id": entry.student_id,
                "name": entry.name,
                "email": entry.email,
                "present_count": entry.present_count,
                "absent_count": entry.absent_count,
                "percentage": format_percentage(entry.percentage),
            }
        )

    def save_counts(self, student_id: str, *, present_count: int, absent_count: int, percentage: int) -> bool:
        return self._table.update(
            student_id,
            {
                "present_count": present_count,
                "absent_count": absent_count,
                "percentage": format_percentage(percentage),
            },
        )

    def update_fields(self, student_id: str, fields: Mapping[str, Any]) -> bool:
        return self._table.update(student_id, dict(fields))

    def _to_entry(self, r: Row) -> RosterEntry:
        present = _as_int(r.get("present_count"))
        absent = _as_int(r.get("absent_count"))
        return RosterEntry(
            student_id=str(r["student_id"]),
            name=str(r.get("name") or ""),
            email=str(r.get("email") or ""),
            present_count=present,
            absent_count=absent,
            percentage=_parse_percentage(r.get("percentage"), present, absent),
        )
