from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..common.validators import require_non_empty, require_non_negative_int
from ..core.exceptions import StudentNotFoundError, ValidationError
from .model import RosterEntry, StudentStats, attendance_percentage, format_percentage
from .repository import RosterRepository

logger = logging.getLogger(__name__)


class RosterService:
    """Use cases over the student roster and its rolling counters."""

    def __init__(self, roster: RosterRepository):
        self._roster = roster

    def increment_present(self, student_id: str) -> RosterEntry:
        """Move one tracked day from absent to present.

        The percentage denominator is the entry's total before the change, so
        the total tracked days stay fixed. Not idempotent: call exactly once
        per successful check-in.
        """

        entry = self._roster.get(student_id)
        if not entry:
            raise StudentNotFoundError(f"Student {student_id} not found in roster")

        total = entry.total_days
        present = entry.present_count + 1
        absent = max(0, entry.absent_count - 1)
        percentage = attendance_percentage(present, total)

        if not self._roster.save_counts(student_id, present_count=present, absent_count=absent, percentage=percentage):
            raise StudentNotFoundError(f"Student {student_id} disappeared from roster during update")

        logger.info("Roster updated for %s: present=%s absent=%s (%s%%)", student_id, present, absent, percentage)
        return RosterEntry(
            student_id=entry.student_id,
            name=entry.name,
            email=entry.email,
            present_count=present,
            absent_count=absent,
            percentage=percentage,
        )

    def get_stats(self, student_id: str) -> StudentStats:
        entry = self._roster.get(student_id)
        if not entry:
            # Unknown students read as all zeros, not as an error.
            return StudentStats.zero()
        return entry.to_stats()

    def get_entry(self, student_id: str) -> Optional[RosterEntry]:
        return self._roster.get(student_id)

    def update_student(
        self,
        *,
        student_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
        present_count: Any = None,
        absent_count: Any = None,
    ) -> RosterEntry:
        student_id = require_non_empty(student_id, "studentId")
        entry = self._roster.get(student_id)
        if not entry:
            raise StudentNotFoundError(f"Student {student_id} not found in roster")

        fields: Dict[str, Any] = {}
        if name is not None:
            fields["name"] = str(name)
        if email is not None:
            fields["email"] = str(email)

        present = entry.present_count
        absent = entry.absent_count
        percentage = entry.percentage
        if present_count is not None or absent_count is not None:
            if present_count is not None:
                present = require_non_negative_int(present_count, "presentCount")
            if absent_count is not None:
                absent = require_non_negative_int(absent_count, "absentCount")
            percentage = attendance_percentage(present, present + absent)
            fields.update(
                present_count=present,
                absent_count=absent,
                percentage=format_percentage(percentage),
            )

        if not fields:
            raise ValidationError("Nothing to update")

        if not self._roster.update_fields(student_id, fields):
            raise StudentNotFoundError(f"Student {student_id} not found in roster")

        return RosterEntry(
            student_id=entry.student_id,
            name=fields.get("name", entry.name),
            email=fields.get("email", entry.email),
            present_count=present,
            absent_count=absent,
            percentage=percentage,
        )
