from __future__ import annotations

from enum import Enum


class Action(str, Enum):
    """Operation names accepted by the action endpoint."""

    GET_STUDENT_STATS = "getStudentStats"
    CHECK_TODAY_ATTENDANCE = "checkTodayAttendance"
    GET_ALL_RECORDS = "getAllRecords"
    VERIFY_DATA = "verifyData"
    GET_WORK_LOCATIONS = "getWorkLocations"

    MARK_ATTENDANCE = "markAttendance"
    UPDATE_STUDENT = "updateStudent"
    ADD_WORK_LOCATION = "addWorkLocation"
    DELETE_WORK_LOCATION = "deleteWorkLocation"


class StorageBackend(str, Enum):
    MYSQL = "mysql"
    WORKBOOK = "workbook"
