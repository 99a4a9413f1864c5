from __future__ import annotations

from datetime import datetime
from typing import Any, List

from ..common.datetime_utils import calendar_day
from ..core.constants import PRESENT_STATUS, WEATHER_NOT_AVAILABLE
from ..database.table import Row, Table
from .model import AttendanceRecord, GeoPoint

LEDGER_COLUMNS = (
    "timestamp",
    "student_id",
    "student_name",
    "date",
    "latitude",
    "longitude",
    "weather",
    "signature_data",
    "photo_data",
    "status",
)
LEDGER_KEY = "timestamp"


def _as_datetime(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            return value
    return value


def _student_id(row: Row) -> str:
    value = row.get("student_id")
    return "" if value is None else str(value)


class LedgerRepository:
    """Append-only attendance ledger over a Table.

    All lookups are linear scans with exact, case-sensitive student id
    matching.
    """

    def __init__(self, table: Table):
        self._table = table

    def append(self, record: AttendanceRecord) -> None:
        self._table.append(
            {
                "timestamp": record.timestamp,
                "student_id": record.student_id,
                "student_name": record.student_name,
                "date": record.date,
                "latitude": record.location.lat,
                "longitude": record.location.lng,
                "weather": record.weather,
                "signature_data": record.signature_data,
                "photo_data": record.photo_data,
                "status": record.status,
            }
        )

    def list_for_student(self, student_id: str) -> List[AttendanceRecord]:
        rows = self._table.find(lambda r: _student_id(r) == student_id)
        return [self._to_record(r) for r in rows]

    def count_for_student(self, student_id: str) -> int:
        return len(self._table.find(lambda r: _student_id(r) == student_id))

    def has_record_on(self, student_id: str, day: str) -> bool:
        """True if the student has a row whose date falls on ``day`` (YYYY-MM-DD, local)."""
        matches = self._table.find(
            lambda r: _student_id(r) == student_id and calendar_day(r.get("date")) == day
        )
        return bool(matches)

    def _to_record(self, r: Row) -> AttendanceRecord:
        return AttendanceRecord(
            timestamp=_as_datetime(r.get("timestamp")),
            student_id=_student_id(r),
            student_name=str(r.get("student_name") or ""),
            date=_as_datetime(r.get("date")),
            location=GeoPoint(lat=float(r.get("latitude") or 0), lng=float(r.get("longitude") or 0)),
            weather=str(r.get("weather") or WEATHER_NOT_AVAILABLE),
            signature_data=str(r.get("signature_data") or ""),
            photo_data=str(r.get("photo_data") or ""),
            status=str(r.get("status") or PRESENT_STATUS),
        )
