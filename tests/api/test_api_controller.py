from __future__ import annotations

import io
import json

import pandas as pd
import pytest
from openpyxl import load_workbook

from src.attendance_tracker.attendance_tracker.core.exceptions import TransportOrStorageError


def _mark_body(student_id="STU001", **extra):
    body = {
        "action": "markAttendance",
        "studentId": student_id,
        "studentName": "Alice Nguyen",
        "location": {"lat": 10.77, "lng": 106.69},
        "weather": "Sunny",
    }
    body.update(extra)
    return body


def _assert_envelope(payload):
    assert set(payload) == {"success", "message", "data", "timestamp", "error"}
    assert isinstance(payload["timestamp"], str) and "T" in payload["timestamp"]


def test_unknown_action_is_invalid(client):
    resp = client.get("/api?action=dropTables&studentId=STU001")

    assert resp.status_code == 200
    payload = resp.get_json()
    _assert_envelope(payload)
    assert payload["success"] is False
    assert payload["message"] == "Invalid action"
    assert payload["error"] == "invalid_action"


def test_missing_action_is_invalid(client):
    payload = client.post("/api", json={"studentId": "STU001"}).get_json()
    assert (payload["success"], payload["message"]) == (False, "Invalid action")


def test_write_action_over_get_is_invalid(client, tables):
    payload = client.get("/api?action=markAttendance&studentId=STU001&lat=1&lng=2").get_json()

    assert payload["error"] == "invalid_action"
    assert tables.ledger.rows == []


def test_mark_then_duplicate(client, tables):
    first = client.post("/api", json=_mark_body()).get_json()
    _assert_envelope(first)
    assert first["success"] is True
    assert first["data"]["rosterUpdated"] is True
    assert first["data"]["stats"] == {"presentCount": 1, "absentCount": 21, "totalDays": 22, "percentage": 5}

    second = client.post("/api", json=_mark_body()).get_json()
    assert second["success"] is False
    assert second["message"] == "Attendance already marked today"
    assert second["error"] == "duplicate_mark"
    assert len(tables.ledger.rows) == 1


def test_mark_accepts_text_plain_json(client, tables):
    resp = client.post("/api", data=json.dumps(_mark_body()), content_type="text/plain;charset=utf-8")

    assert resp.get_json()["success"] is True
    assert len(tables.ledger.rows) == 1


def test_mark_for_unrostered_student_reports_success(client, tables):
    payload = client.post("/api", json=_mark_body("NEW999")).get_json()

    assert payload["success"] is True
    assert payload["data"]["rosterUpdated"] is False
    assert payload["data"]["stats"] is None
    assert len(tables.ledger.rows) == 1


def test_mark_reports_success_when_roster_storage_fails(client, tables, monkeypatch):
    def broken_update(key, fields):
        raise TransportOrStorageError("Database unavailable: lost connection")

    monkeypatch.setattr(tables.roster, "update", broken_update)

    first = client.post("/api", json=_mark_body()).get_json()
    assert first["success"] is True
    assert first["data"]["rosterUpdated"] is False
    assert first["data"]["rosterErrorKind"] == "storage"
    assert len(tables.ledger.rows) == 1

    retry = client.post("/api", json=_mark_body()).get_json()
    assert (retry["success"], retry["error"]) == (False, "duplicate_mark")


def test_mark_with_bad_location_is_validation_error(client):
    payload = client.post("/api", json=_mark_body(location="somewhere")).get_json()
    assert (payload["success"], payload["error"]) == (False, "validation")


def test_check_today_and_records(client):
    before = client.get("/api?action=checkTodayAttendance&studentId=STU001").get_json()
    assert before["data"] == {"marked": False}

    client.post("/api", json=_mark_body())

    after = client.get("/api?action=checkTodayAttendance&studentId=STU001").get_json()
    assert after["data"] == {"marked": True}

    records = client.get("/api?action=getAllRecords&studentId=STU001").get_json()["data"]["records"]
    assert len(records) == 1
    assert set(records[0]) == {"timestamp", "date", "location", "weather", "status"}
    assert records[0]["weather"] == "Sunny"


def test_stats_for_unknown_student_are_zero(client):
    payload = client.get("/api?action=getStudentStats&studentId=UNKNOWN").get_json()

    assert payload["success"] is True
    assert payload["data"] == {"presentCount": 0, "absentCount": 0, "totalDays": 0, "percentage": 0}


def test_verify_data(client):
    client.post("/api", json=_mark_body("STU002"))

    data = client.get("/api?action=verifyData&studentId=STU002").get_json()["data"]

    assert data["ledgerCount"] == 1
    assert data["roster"]["presentCount"] == 11
    assert data["sheetsMatch"] is False


def test_update_student(client, tables):
    payload = client.post(
        "/api", json={"action": "updateStudent", "studentId": "STU001", "presentCount": 2, "absentCount": 20}
    ).get_json()

    assert payload["success"] is True
    assert payload["data"]["percentage"] == 9
    assert tables.roster.rows[0]["percentage"] == "9%"


def test_update_unknown_student_is_an_error(client):
    payload = client.post("/api", json={"action": "updateStudent", "studentId": "NOPE", "name": "x"}).get_json()
    assert (payload["success"], payload["error"]) == (False, "student_not_found")


def test_work_location_round_trip(client):
    created = client.post(
        "/api", json={"action": "addWorkLocation", "studentId": "STU001", "name": "Lab", "lat": 1, "lng": 2}
    ).get_json()
    assert created["success"] is True
    location_id = created["data"]["id"]
    assert location_id

    listed = client.get("/api?action=getWorkLocations&studentId=STU001").get_json()["data"]["locations"]
    assert [loc["id"] for loc in listed] == [location_id]

    deleted = client.post("/api", json={"action": "deleteWorkLocation", "locationId": location_id}).get_json()
    assert deleted["success"] is True
    assert client.get("/api?action=getWorkLocations&studentId=STU001").get_json()["data"]["locations"] == []

    again = client.post("/api", json={"action": "deleteWorkLocation", "locationId": location_id}).get_json()
    assert (again["success"], again["error"]) == (False, "location_not_found")


def test_storage_failure_becomes_error_envelope(client, tables):
    def broken(_predicate):
        raise TransportOrStorageError("Database unavailable: connection refused")

    tables.roster.find = broken

    payload = client.get("/api?action=getStudentStats&studentId=STU001").get_json()

    assert payload["success"] is False
    assert payload["message"] == "Error: Database unavailable: connection refused"
    assert payload["error"] == "storage"


def test_unexpected_failure_becomes_error_envelope(client, tables):
    def broken(_predicate):
        raise RuntimeError("boom")

    tables.locations.find = broken

    payload = client.get("/api?action=getWorkLocations&studentId=STU001").get_json()
    assert (payload["success"], payload["message"], payload["error"]) == (False, "Error: boom", "storage")


def test_health(client):
    assert client.get("/health").get_json()["status"] == "healthy"


def test_export_student_records(client):
    client.post("/api", json=_mark_body())

    resp = client.get("/api/export?studentId=STU001")

    assert resp.status_code == 200
    assert resp.mimetype == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    ws = load_workbook(io.BytesIO(resp.data))["Attendance"]
    assert [c.value for c in ws[1]] == ["Timestamp", "Student ID", "Name", "Latitude", "Longitude", "Weather", "Status"]
    assert ws.cell(row=2, column=2).value == "STU001"


def test_export_requires_student_id(client):
    payload = client.get("/api/export").get_json()
    assert (payload["success"], payload["error"]) == (False, "validation")


def test_export_failure_becomes_error_envelope(client, monkeypatch):
    def broken_to_excel(self, *args, **kwargs):
        raise ValueError("cannot write sheet")

    monkeypatch.setattr(pd.DataFrame, "to_excel", broken_to_excel)

    resp = client.get("/api/export?studentId=STU001")

    assert resp.status_code == 200
    payload = resp.get_json()
    _assert_envelope(payload)
    assert (payload["success"], payload["message"], payload["error"]) == (False, "Error: cannot write sheet", "storage")


def test_export_storage_failure_becomes_error_envelope(client, tables):
    def broken(_predicate):
        raise TransportOrStorageError("Cannot open workbook data/attendance.xlsx")

    tables.ledger.find = broken

    payload = client.get("/api/export?studentId=STU001").get_json()
    assert payload["success"] is False
    assert payload["message"] == "Error: Cannot open workbook data/attendance.xlsx"
    assert payload["error"] == "storage"
