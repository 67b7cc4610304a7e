from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float

    def to_payload(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude}


@dataclass(frozen=True)
class PunchEvent:
    timestamp: datetime
    coordinates: Optional[Coordinates] = None


@dataclass(frozen=True)
class AttendanceDay:
    """Domain entity: one employee's attendance for one calendar date.

    ``status`` and the hour fields are computed by the backend and are never
    recomputed here.
    """

    work_date: date
    employee_id: str
    status: AttendanceStatus
    punch_in: Optional[PunchEvent] = None
    punch_out: Optional[PunchEvent] = None
    total_work_hours: float = 0.0
    overtime_hours: float = 0.0
    is_within_office_location: bool = False
    notes: Optional[str] = None
    attendance_id: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.punch_in is not None and self.punch_out is None


@dataclass(frozen=True)
class Pagination:
    page: int = 1
    total_pages: int = 1
    total: int = 0
    limit: Optional[int] = None


@dataclass(frozen=True)
class AttendancePage:
    """Read-model for list views."""

    items: list[AttendanceDay]
    pagination: Pagination
