from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict


def attendance_percentage(present: int, total: int) -> int:
    """Rounded ``present / total * 100`` (half-up), 0 when total is 0."""
    if total <= 0:
        return 0
    return int(math.floor(present * 100 / total + 0.5))


def format_percentage(value: int) -> str:
    return f"{value}%"


@dataclass(frozen=True)
class StudentStats:
    present_count: int
    absent_count: int
    total_days: int
    percentage: int

    @classmethod
    def zero(cls) -> "StudentStats":
        return cls(present_count=0, absent_count=0, total_days=0, percentage=0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "presentCount": self.present_count,
            "absentCount": self.absent_count,
            "totalDays": self.total_days,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class RosterEntry:
    """Thực thể miền (domain): Sinh viên trong danh sách lớp.

    One pre-provisioned student row with running counters.

    ``present_count + absent_count`` is the fixed number of tracked days;
    marking attendance moves a day from absent to present but never grows it.
    """

    student_id: str
    name: str
    email: str
    present_count: int
    absent_count: int
    percentage: int

    @property
    def total_days(self) -> int:
        return self.present_count + self.absent_count

    def to_stats(self) -> StudentStats:
        return StudentStats(
            present_count=self.present_count,
            absent_count=self.absent_count,
            total_days=self.total_days,
            percentage=self.percentage,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {"studentId": self.student_id, "name": self.name, "email": self.email}
        data.update(self.to_stats().to_dict())
        return data
