from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from ...attendance.model import AttendanceDay
from ...attendance.repository import AttendanceRepository
from ...core.enums import PunchAction
from ...location.model import LocationReading
from ...location.provider import LocationProvider
from ..model import Subject


class PunchStrategy(ABC):
    """Strategy Pattern: encapsulate how a punch reaches the backend."""

    accepts_manual_time: bool = False

    @abstractmethod
    async def capture(self, location: Optional[LocationProvider]) -> Optional[LocationReading]:
        raise NotImplementedError

    @abstractmethod
    async def submit(
        self,
        attendance: AttendanceRepository,
        *,
        action: PunchAction,
        subject: Subject,
        reading: Optional[LocationReading],
        manual_time: Optional[datetime],
    ) -> AttendanceDay:
        raise NotImplementedError
