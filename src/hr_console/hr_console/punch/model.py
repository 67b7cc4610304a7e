from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import PunchAction
from ..location.geo import format_coordinates
from ..location.model import LocationReading


@dataclass(frozen=True)
class Subject:
    """The employee whose attendance a punch targets."""

    employee_id: str
    is_self: bool = True
    display_name: Optional[str] = None


@dataclass(frozen=True)
class PendingPunch:
    """What a confirmation dialog shows before the punch is committed."""

    action: PunchAction
    subject: Subject
    target_time: datetime
    location: Optional[LocationReading] = None

    @property
    def location_label(self) -> Optional[str]:
        if self.location is None:
            return None
        return self.location.address or format_coordinates(self.location.latitude, self.location.longitude)
