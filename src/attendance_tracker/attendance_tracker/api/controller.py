from __future__ import annotations

import io
import logging
from typing import Any, Callable, Dict, Mapping, Tuple

import pandas as pd
from flask import Flask, jsonify, request, send_file

from ..common.datetime_utils import now_local
from ..core.enums import Action
from ..core.exceptions import DomainError, InvalidActionError, TransportOrStorageError, ValidationError
from ..container import Container
from .envelope import error_response, success_response

logger = logging.getLogger(__name__)

Handler = Callable[[Mapping[str, Any]], Tuple[str, Any]]

READ_ACTIONS = {
    Action.GET_STUDENT_STATS,
    Action.CHECK_TODAY_ATTENDANCE,
    Action.GET_ALL_RECORDS,
    Action.VERIFY_DATA,
    Action.GET_WORK_LOCATIONS,
}
WRITE_ACTIONS = {
    Action.MARK_ATTENDANCE,
    Action.UPDATE_STUDENT,
    Action.ADD_WORK_LOCATION,
    Action.DELETE_WORK_LOCATION,
}


def _location_param(params: Mapping[str, Any]) -> Dict[str, Any]:
    location = params.get("location")
    if isinstance(location, Mapping):
        return {"lat": location.get("lat"), "lng": location.get("lng")}
    if location is not None:
        raise ValidationError("location must be an object with lat and lng")
    # Flat form fields are accepted too.
    return {"lat": params.get("lat"), "lng": params.get("lng")}


def register(app: Flask, container: Container) -> None:
    attendance = container.attendance_service
    roster = container.roster_service
    locations = container.location_service

    def get_student_stats(params):
        stats = roster.get_stats(params.get("studentId"))
        return "Stats retrieved", stats.to_dict()

    def check_today_attendance(params):
        marked = attendance.is_marked_today(params.get("studentId"))
        return "Checked", {"marked": marked}

    def get_all_records(params):
        records = attendance.list_records(params.get("studentId"))
        return "Records retrieved", {"records": [r.to_public_dict() for r in records]}

    def verify_data(params):
        report = attendance.verify(params.get("studentId"))
        return "Verification complete", report.to_dict()

    def get_work_locations(params):
        items = locations.list(params.get("studentId"))
        return "Locations retrieved", {"locations": [loc.to_dict() for loc in items]}

    def mark_attendance(params):
        location = _location_param(params)
        result = attendance.mark_attendance(
            student_id=params.get("studentId"),
            student_name=params.get("studentName"),
            lat=location["lat"],
            lng=location["lng"],
            weather=params.get("weather"),
            signature_data=params.get("signatureData"),
            photo_data=params.get("photoData"),
        )
        return "Attendance marked successfully", result.to_dict()

    def update_student(params):
        entry = roster.update_student(
            student_id=params.get("studentId"),
            name=params.get("name"),
            email=params.get("email"),
            present_count=params.get("presentCount"),
            absent_count=params.get("absentCount"),
        )
        return "Student updated", entry.to_dict()

    def add_work_location(params):
        location = locations.add(
            student_id=params.get("studentId"),
            name=params.get("name"),
            lat=params.get("lat"),
            lng=params.get("lng"),
        )
        return "Location added", location.to_dict()

    def delete_work_location(params):
        locations.delete(params.get("locationId"))
        return "Location deleted", {}

    handlers: Dict[Action, Handler] = {
        Action.GET_STUDENT_STATS: get_student_stats,
        Action.CHECK_TODAY_ATTENDANCE: check_today_attendance,
        Action.GET_ALL_RECORDS: get_all_records,
        Action.VERIFY_DATA: verify_data,
        Action.GET_WORK_LOCATIONS: get_work_locations,
        Action.MARK_ATTENDANCE: mark_attendance,
        Action.UPDATE_STUDENT: update_student,
        Action.ADD_WORK_LOCATION: add_work_location,
        Action.DELETE_WORK_LOCATION: delete_work_location,
    }

    def _resolve(name: Any, *, allowed: set) -> Handler:
        try:
            action = Action(name)
        except ValueError:
            raise InvalidActionError() from None
        if action not in allowed:
            raise InvalidActionError()
        return handlers[action]

    def _failure(e: Exception, action: Any):
        if isinstance(e, TransportOrStorageError):
            logger.error("Storage failure on %s: %s", action, e)
            return error_response(f"Error: {e}", kind=e.kind)
        if isinstance(e, DomainError):
            return error_response(str(e), kind=e.kind)
        logger.exception("Unhandled error on %s", action)
        return error_response(f"Error: {e}", kind=TransportOrStorageError.kind)

    def _dispatch(params: Mapping[str, Any], *, allowed: set):
        try:
            handler = _resolve(params.get("action"), allowed=allowed)
            message, data = handler(params)
            return success_response(data, message)
        except Exception as e:
            return _failure(e, params.get("action"))

    @app.route("/api", methods=["GET"], endpoint="api_read")
    def api_read():
        return _dispatch(request.args.to_dict(), allowed=READ_ACTIONS)

    @app.route("/api", methods=["POST"], endpoint="api_write")
    def api_write():
        # Browser clients often post JSON as text/plain to skip the CORS preflight.
        body = request.get_json(silent=True, force=True)
        if not isinstance(body, dict):
            body = request.form.to_dict()
        params = dict(body)
        params.setdefault("action", request.args.get("action"))
        return _dispatch(params, allowed=WRITE_ACTIONS)

    @app.route("/api/export", methods=["GET"], endpoint="api_export")
    def api_export():
        student_id = request.args.get("studentId")
        try:
            records = attendance.list_records(student_id)
            out = _records_workbook(records)
        except Exception as e:
            return _failure(e, "export")

        return send_file(
            out,
            mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            as_attachment=True,
            download_name=f"attendance_{student_id}.xlsx",
        )

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "healthy", "timestamp": now_local().isoformat()})


def _records_workbook(records) -> io.BytesIO:
    df = pd.DataFrame(
        [
            {
                "Timestamp": r.timestamp,
                "Student ID": r.student_id,
                "Name": r.student_name,
                "Latitude": r.location.lat,
                "Longitude": r.location.lng,
                "Weather": r.weather,
                "Status": r.status,
            }
            for r in records
        ],
        columns=["Timestamp", "Student ID", "Name", "Latitude", "Longitude", "Weather", "Status"],
    )

    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="Attendance")
    out.seek(0)
    return out
