"""Response envelope shared by every action.

Clients read ``success``/``error`` from the body; the HTTP status stays 200.
"""
from __future__ import annotations

from typing import Any, Optional

from flask import jsonify

from ..common.datetime_utils import now_local


def envelope(*, success: bool, message: str, data: Any = None, error: Optional[str] = None):
    return jsonify(
        {
            "success": success,
            "message": message,
            "data": data if data is not None else {},
            "timestamp": now_local().isoformat(),
            "error": error,
        }
    )


def success_response(data: Any = None, message: str = "Success"):
    return envelope(success=True, message=message, data=data)


def error_response(message: str, *, kind: str):
    return envelope(success=False, message=message, error=kind)
