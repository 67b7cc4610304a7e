from __future__ import annotations

import calendar
import logging
from datetime import date, datetime
from typing import Any, Mapping, Optional

from ..backend.client import BackendClient
from ..common.datetime_utils import parse_iso_date, to_iso
from ..common.validators import optional_count, optional_float, optional_timestamp
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from .model import AttendanceDay, AttendancePage, Coordinates, Pagination, PunchEvent
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_LIST_KEYS = ("attendance", "attendances", "data", "records")


class HttpAttendanceRepository(AttendanceRepository):
    def __init__(self, client: BackendClient):
        self._client = client

    async def punch_in(self, *, coordinates: Optional[Coordinates]) -> AttendanceDay:
        body = await self._client.post("attendance/punch-in", _coordinates_payload(coordinates))
        return _attendance_from(body)

    async def punch_out(self, *, coordinates: Optional[Coordinates]) -> AttendanceDay:
        body = await self._client.post("attendance/punch-out", _coordinates_payload(coordinates))
        return _attendance_from(body)

    async def punch_in_by_hr(self, employee_id: str, *, punch_time: Optional[datetime] = None) -> AttendanceDay:
        payload = {"punchInTime": to_iso(punch_time)} if punch_time else {}
        body = await self._client.post(f"attendance/{employee_id}/punch-in/by-hr", payload)
        return _attendance_from(body)

    async def punch_out_by_hr(self, employee_id: str, *, punch_time: Optional[datetime] = None) -> AttendanceDay:
        payload = {"punchOutTime": to_iso(punch_time)} if punch_time else {}
        body = await self._client.post(f"attendance/{employee_id}/punch-out/by-hr", payload)
        return _attendance_from(body)

    async def get_today(self) -> Optional[AttendanceDay]:
        body = await self._client.get("attendance/today")
        record = body.get("attendance")
        return day_from_payload(record) if record else None

    async def get_today_for_employee(self, employee_id: str) -> Optional[AttendanceDay]:
        body = await self._client.get(f"attendance/employee/{employee_id}/today")
        record = body.get("attendance")
        return day_from_payload(record) if record else None

    async def list_attendance(self, params: Mapping[str, Any]) -> AttendancePage:
        return _page_from(await self._client.get("attendance", params=dict(params)))

    async def list_my_attendance(self, params: Mapping[str, Any]) -> AttendancePage:
        return _page_from(await self._client.get("attendance/my-attendances", params=dict(params)))

    async def list_team_attendance(self, params: Mapping[str, Any]) -> AttendancePage:
        return _page_from(await self._client.get("attendance/team", params=dict(params)))

    async def get_employee_details(self, employee_id: str, params: Mapping[str, Any]) -> dict:
        return await self._client.get(f"attendance/{employee_id}/details", params=dict(params))

    async def get_month(self, employee_id: str, *, year: int, month: int) -> list[AttendanceDay]:
        last_day = calendar.monthrange(year, month)[1]
        body = await self.get_employee_details(
            employee_id,
            {
                "type": "records",
                "startDate": date(year, month, 1).isoformat(),
                "endDate": date(year, month, last_day).isoformat(),
                "page": 1,
                "limit": last_day,
                "sortBy": "date",
                "sortOrder": "asc",
            },
        )
        return _page_from(body).items


def _coordinates_payload(coordinates: Optional[Coordinates]) -> dict:
    return {"coordinates": coordinates.to_payload()} if coordinates else {}


def _attendance_from(body: Mapping[str, Any]) -> AttendanceDay:
    record = body.get("attendance")
    if not record:
        raise ValidationError("Backend response is missing the attendance record")
    return day_from_payload(record)


def _page_from(body: Mapping[str, Any]) -> AttendancePage:
    rows: list = []
    for key in _LIST_KEYS:
        value = body.get(key)
        if isinstance(value, list):
            rows = value
            break
    raw = body.get("pagination") or {}
    pagination = Pagination(
        page=optional_count(raw.get("page") or raw.get("currentPage"), "page", 1),
        total_pages=optional_count(raw.get("totalPages"), "totalPages", 1),
        total=optional_count(raw.get("total") or raw.get("totalRecords"), "total", len(rows)),
        limit=optional_count(raw.get("limit"), "limit", 0) or None,
    )
    return AttendancePage(items=[day_from_payload(r) for r in rows], pagination=pagination)


def _punch_from(raw: Any, field: str) -> Optional[PunchEvent]:
    if not raw:
        return None
    if isinstance(raw, str):
        return PunchEvent(timestamp=optional_timestamp(raw, field))
    if not isinstance(raw, Mapping):
        raise ValidationError(f"{field} must be a timestamp or an object")
    timestamp = optional_timestamp(raw.get("timestamp") or raw.get("time"), f"{field}.timestamp")
    if timestamp is None:
        return None
    coords = raw.get("coordinates") or raw.get("location")
    coordinates = None
    if isinstance(coords, Mapping) and coords.get("latitude") is not None and coords.get("longitude") is not None:
        coordinates = Coordinates(
            latitude=optional_float(coords["latitude"], f"{field}.latitude"),
            longitude=optional_float(coords["longitude"], f"{field}.longitude"),
        )
    return PunchEvent(timestamp=timestamp, coordinates=coordinates)


def _employee_id(raw: Any) -> str:
    if isinstance(raw, Mapping):
        return str(raw.get("_id") or raw.get("id") or raw.get("employeeId") or "")
    return str(raw or "")


def day_from_payload(raw: Mapping[str, Any]) -> AttendanceDay:
    """Map one backend attendance record onto ``AttendanceDay``."""
    try:
        work_date = parse_iso_date(raw["date"])
    except (KeyError, TypeError, ValueError):
        raise ValidationError("Attendance record has no valid date") from None

    status_raw = raw.get("status") or AttendanceStatus.NOT_RECORDED.value
    try:
        status = AttendanceStatus(status_raw)
    except ValueError:
        raise ValidationError(f"Unknown attendance status: {status_raw}") from None

    return AttendanceDay(
        work_date=work_date,
        employee_id=_employee_id(raw.get("employee") or raw.get("employeeId")),
        status=status,
        punch_in=_punch_from(raw.get("punchIn"), "punchIn"),
        punch_out=_punch_from(raw.get("punchOut"), "punchOut"),
        total_work_hours=optional_float(raw.get("totalWorkHours"), "totalWorkHours"),
        overtime_hours=optional_float(raw.get("overtimeHours"), "overtimeHours"),
        is_within_office_location=bool(raw.get("isWithinOfficeLocation", False)),
        notes=raw.get("notes") or None,
        attendance_id=str(raw["_id"]) if raw.get("_id") else None,
    )
