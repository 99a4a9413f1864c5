from __future__ import annotations

import secrets
import time
from typing import Any, Callable, List

from ..common.validators import require_float, require_non_empty
from ..core.constants import LOCATION_ID_PREFIX
from ..core.exceptions import LocationNotFoundError
from .model import WorkLocation
from .repository import WorkLocationRepository


def generate_location_id() -> str:
    """Millisecond timestamp prefix plus a random hex suffix."""
    return f"{LOCATION_ID_PREFIX}{int(time.time() * 1000)}{secrets.token_hex(4)}"


class WorkLocationService:
    def __init__(self, locations: WorkLocationRepository, *, id_factory: Callable[[], str] = generate_location_id):
        self._locations = locations
        self._id_factory = id_factory

    def list(self, student_id: str) -> List[WorkLocation]:
        return self._locations.list_for_student(require_non_empty(student_id, "studentId"))

    def add(self, *, student_id: Any, name: Any, lat: Any, lng: Any) -> WorkLocation:
        location = WorkLocation(
            location_id=self._id_factory(),
            student_id=require_non_empty(student_id, "studentId"),
            name=require_non_empty(name, "name"),
            lat=require_float(lat, "lat"),
            lng=require_float(lng, "lng"),
        )
        self._locations.add(location)
        return location

    def delete(self, location_id: Any) -> None:
        location_id = require_non_empty(location_id, "locationId")
        if not self._locations.delete(location_id):
            raise LocationNotFoundError(f"Location {location_id} not found")
