from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict

from ..common.datetime_utils import iso
from ..core.constants import PRESENT_STATUS, WEATHER_NOT_AVAILABLE


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class AttendanceRecord:
    """Thực thể miền (domain): Bản ghi điểm danh.

    Rows are only ever appended.
    """

    timestamp: datetime
    student_id: str
    student_name: str
    date: datetime
    location: GeoPoint
    weather: str = WEATHER_NOT_AVAILABLE
    signature_data: str = ""
    photo_data: str = ""
    status: str = PRESENT_STATUS

    def to_public_dict(self) -> Dict[str, Any]:
        """Projection returned by record listings (no payload blobs)."""
        return {
            "timestamp": iso(self.timestamp),
            "date": iso(self.date),
            "location": self.location.to_dict(),
            "weather": self.weather,
            "status": self.status,
        }
