from __future__ import annotations

from typing import List

from ..database.table import Row, Table
from .model import WorkLocation

LOCATION_COLUMNS = ("location_id", "student_id", "name", "lat", "lng")
LOCATION_KEY = "location_id"


class WorkLocationRepository:
    def __init__(self, table: Table):
        self._table = table

    def list_for_student(self, student_id: str) -> List[WorkLocation]:
        rows = self._table.find(lambda r: r.get("student_id") is not None and str(r["student_id"]) == student_id)
        return [self._to_location(r) for r in rows]

    def add(self, location: WorkLocation) -> None:
        self._table.append(
            {
                "location_id": location.location_id,
                "student_id": location.student_id,
                "name": location.name,
                "lat": location.lat,
                "lng": location.lng,
            }
        )

    def delete(self, location_id: str) -> bool:
        return self._table.delete(location_id)

    def _to_location(self, r: Row) -> WorkLocation:
        return WorkLocation(
            location_id=str(r["location_id"]),
            student_id=str(r["student_id"]),
            name=str(r.get("name") or ""),
            lat=float(r.get("lat") or 0),
            lng=float(r.get("lng") or 0),
        )
