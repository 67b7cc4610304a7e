from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...attendance.model import AttendanceDay
from ...attendance.repository import AttendanceRepository
from ...core.enums import PunchAction
from ...location.model import LocationReading
from ...location.provider import LocationProvider
from ..model import Subject
from .base import PunchStrategy


class ManagerPunchStrategy(PunchStrategy):
    """HR manager marking attendance for an employee (no location needed)."""

    accepts_manual_time = True

    async def capture(self, location: Optional[LocationProvider]) -> Optional[LocationReading]:
        return None

    async def submit(
        self,
        attendance: AttendanceRepository,
        *,
        action: PunchAction,
        subject: Subject,
        reading: Optional[LocationReading],
        manual_time: Optional[datetime],
    ) -> AttendanceDay:
        # Without manual_time the backend stamps its own current time.
        if action is PunchAction.IN:
            return await attendance.punch_in_by_hr(subject.employee_id, punch_time=manual_time)
        return await attendance.punch_out_by_hr(subject.employee_id, punch_time=manual_time)
