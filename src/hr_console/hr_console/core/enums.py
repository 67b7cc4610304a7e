from __future__ import annotations

import re
from enum import Enum

_NORMALIZE = re.compile(r"[\s_\-]+")


def _key(value: str) -> str:
    return _NORMALIZE.sub("", value).lower()


class _WireEnum(str, Enum):
    """String enum that also accepts the backend's loosely formatted spellings."""

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            wanted = _key(value)
            for member in cls:
                if _key(member.value) == wanted or _key(member.name) == wanted:
                    return member
        return None


class AttendanceStatus(_WireEnum):
    """Authoritative day status computed by the backend."""

    PRESENT = "Present"
    LATE = "Late"
    ABSENT = "Absent"
    HALF_DAY = "Half Day"
    ON_LEAVE = "On Leave"
    HOLIDAY = "Holiday"
    WEEK_OFF = "Week Off"
    EARLY_DEPARTURE = "Early Departure"
    NOT_RECORDED = "Not Recorded"


class TaskStatus(_WireEnum):
    NEW = "New"
    ASSIGNED = "Assigned"
    IN_PROGRESS = "In Progress"
    PENDING = "Pending"
    COMPLETED = "Completed"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class TaskPriority(_WireEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    URGENT = "Urgent"


class DeadlineUrgency(str, Enum):
    """Derived label; never persisted."""

    COMPLETED = "completed"
    OVERDUE = "overdue"
    DUE_TODAY = "due_today"
    DUE_TOMORROW = "due_tomorrow"
    APPROACHING_SOON = "approaching_soon"
    ON_TRACK = "on_track"
    NO_DEADLINE = "no_deadline"


class PunchAction(_WireEnum):
    IN = "in"
    OUT = "out"


class ActingAs(_WireEnum):
    SELF = "self"
    MANAGER_ON_BEHALF = "manager"


class PunchState(str, Enum):
    NO_PUNCH = "NO_PUNCH"
    PUNCHED_IN = "PUNCHED_IN"
    PUNCHED_OUT = "PUNCHED_OUT"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def toggled(self) -> "SortOrder":
        return SortOrder.DESC if self is SortOrder.ASC else SortOrder.ASC
