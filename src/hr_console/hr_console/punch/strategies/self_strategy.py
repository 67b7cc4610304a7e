from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...attendance.model import AttendanceDay
from ...attendance.repository import AttendanceRepository
from ...core.enums import PunchAction
from ...core.exceptions import LocationError, LocationRequired, LocationUnsupported
from ...location.model import LocationReading
from ...location.provider import LocationProvider
from ..model import Subject
from .base import PunchStrategy


class SelfPunchStrategy(PunchStrategy):
    """Employee punching for themselves; a position fix is mandatory."""

    async def capture(self, location: Optional[LocationProvider]) -> Optional[LocationReading]:
        if location is None:
            raise LocationRequired(LocationUnsupported())
        try:
            return await location.capture_location()
        except LocationError as exc:
            raise LocationRequired(exc) from exc

    async def submit(
        self,
        attendance: AttendanceRepository,
        *,
        action: PunchAction,
        subject: Subject,
        reading: Optional[LocationReading],
        manual_time: Optional[datetime],
    ) -> AttendanceDay:
        coordinates = reading.coordinates if reading else None
        if action is PunchAction.IN:
            return await attendance.punch_in(coordinates=coordinates)
        return await attendance.punch_out(coordinates=coordinates)
