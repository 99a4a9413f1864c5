from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..common.datetime_utils import calendar_day, iso, now_local
from ..common.locks import KeyedLocks
from ..common.validators import require_float, require_non_empty
from ..core.constants import PRESENT_STATUS, WEATHER_NOT_AVAILABLE
from ..core.exceptions import DomainError, DuplicateMarkError
from ..roster.model import RosterEntry, StudentStats
from ..roster.service import RosterService
from .model import AttendanceRecord, GeoPoint
from .repository import LedgerRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarkResult:
    record: AttendanceRecord
    roster_updated: bool
    roster: Optional[RosterEntry] = None
    roster_error: Optional[str] = None
    roster_error_kind: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "studentId": self.record.student_id,
            "timestamp": iso(self.record.timestamp),
            "status": self.record.status,
            "rosterUpdated": self.roster_updated,
            "rosterError": self.roster_error,
            "rosterErrorKind": self.roster_error_kind,
            "stats": self.roster.to_stats().to_dict() if self.roster else None,
        }


@dataclass(frozen=True)
class VerifyReport:
    """Roster counters next to the ledger row count. Divergence is reported, never repaired."""

    student_id: str
    roster: Optional[StudentStats]
    ledger_count: int

    @property
    def sheets_match(self) -> bool:
        return self.roster is not None and self.roster.present_count == self.ledger_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "studentId": self.student_id,
            "roster": self.roster.to_dict() if self.roster else None,
            "ledgerCount": self.ledger_count,
            "sheetsMatch": self.sheets_match,
        }


class AttendanceService:
    def __init__(self, ledger: LedgerRepository, roster: RosterService, *, locks: KeyedLocks | None = None):
        self._ledger = ledger
        self._roster = roster
        self._locks = locks or KeyedLocks()

    def mark_attendance(
        self,
        *,
        student_id: Any,
        student_name: Any,
        lat: Any,
        lng: Any,
        weather: Optional[str] = None,
        signature_data: Optional[str] = None,
        photo_data: Optional[str] = None,
        now: datetime | None = None,
    ) -> MarkResult:
        student_id = require_non_empty(student_id, "studentId")
        location = GeoPoint(lat=require_float(lat, "lat"), lng=require_float(lng, "lng"))
        now = now or now_local()
        today = calendar_day(now)

        # Check-then-append must not interleave for the same student and day.
        with self._locks.hold((student_id, today)):
            if self._ledger.has_record_on(student_id, today):
                raise DuplicateMarkError()

            record = AttendanceRecord(
                timestamp=now,
                student_id=student_id,
                student_name="" if student_name is None else str(student_name),
                date=now,
                location=location,
                weather=weather or WEATHER_NOT_AVAILABLE,
                signature_data=signature_data or "",
                photo_data=photo_data or "",
                status=PRESENT_STATUS,
            )
            self._ledger.append(record)
            logger.info("Attendance marked for %s on %s", student_id, today)

            try:
                entry = self._roster.increment_present(student_id)
            except DomainError as e:
                # The ledger row is already saved; a retry would only hit DuplicateMarkError.
                logger.warning("Ledger row written but roster not updated (%s): %s", e.kind, e)
                return MarkResult(record=record, roster_updated=False, roster_error=str(e), roster_error_kind=e.kind)

        return MarkResult(record=record, roster_updated=True, roster=entry)

    def is_marked_today(self, student_id: Any, *, now: datetime | None = None) -> bool:
        student_id = require_non_empty(student_id, "studentId")
        now = now or now_local()
        return self._ledger.has_record_on(student_id, calendar_day(now))

    def list_records(self, student_id: Any) -> List[AttendanceRecord]:
        return self._ledger.list_for_student(require_non_empty(student_id, "studentId"))

    def verify(self, student_id: Any) -> VerifyReport:
        student_id = require_non_empty(student_id, "studentId")
        entry = self._roster.get_entry(student_id)
        return VerifyReport(
            student_id=student_id,
            roster=entry.to_stats() if entry else None,
            ledger_count=self._ledger.count_for_student(student_id),
        )
