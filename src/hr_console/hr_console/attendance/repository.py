from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional, Protocol

from .model import AttendanceDay, AttendancePage, Coordinates


class AttendanceRepository(Protocol):
    async def punch_in(self, *, coordinates: Optional[Coordinates]) -> AttendanceDay:
        raise NotImplementedError

    async def punch_out(self, *, coordinates: Optional[Coordinates]) -> AttendanceDay:
        raise NotImplementedError

    async def punch_in_by_hr(self, employee_id: str, *, punch_time: Optional[datetime] = None) -> AttendanceDay:
        raise NotImplementedError

    async def punch_out_by_hr(self, employee_id: str, *, punch_time: Optional[datetime] = None) -> AttendanceDay:
        raise NotImplementedError

    async def get_today(self) -> Optional[AttendanceDay]:
        raise NotImplementedError

    async def get_today_for_employee(self, employee_id: str) -> Optional[AttendanceDay]:
        raise NotImplementedError

    async def list_attendance(self, params: Mapping[str, Any]) -> AttendancePage:
        """``GET /attendance`` (HR view over all employees)."""

        raise NotImplementedError

    async def list_my_attendance(self, params: Mapping[str, Any]) -> AttendancePage:
        raise NotImplementedError

    async def list_team_attendance(self, params: Mapping[str, Any]) -> AttendancePage:
        raise NotImplementedError

    async def get_employee_details(self, employee_id: str, params: Mapping[str, Any]) -> dict:
        """``GET /attendance/{id}/details``; shape depends on ``params['type']``."""

        raise NotImplementedError

    async def get_month(self, employee_id: str, *, year: int, month: int) -> list[AttendanceDay]:
        raise NotImplementedError
