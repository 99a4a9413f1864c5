from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from ..core.constants import DAY_FORMAT


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def calendar_day(value: Any) -> Optional[str]:
    """Normalize a stored date cell to a local ``YYYY-MM-DD`` string.

    Cells come back as ``datetime`` (MySQL, openpyxl), ``date`` or ISO strings
    (hand-edited sheets). Aware datetimes are converted to server local time
    first. Returns None for empty or unparseable cells so they never match.
    """

    if value is None or value == "":
        return None

    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip())
        except ValueError:
            return None

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.strftime(DAY_FORMAT)

    if isinstance(value, date):
        return value.strftime(DAY_FORMAT)

    return None


def iso(value: Any) -> Any:
    """ISO-8601 for datetimes, passthrough for anything else."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value
