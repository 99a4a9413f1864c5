from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class WorkLocation:
    """Thực thể miền (domain): Địa điểm làm việc."""

    location_id: str
    student_id: str
    name: str
    lat: float
    lng: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.location_id,
            "studentId": self.student_id,
            "name": self.name,
            "lat": self.lat,
            "lng": self.lng,
        }
