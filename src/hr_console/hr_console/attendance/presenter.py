from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..common.datetime_utils import format_clock
from ..common.presentation import Badge, require_exhaustive
from ..core.enums import AttendanceStatus
from .model import AttendanceDay

STATUS_BADGES: dict[AttendanceStatus, Badge] = {
    AttendanceStatus.PRESENT: Badge("Present", "success", "check-circle", "bg-green-100 text-green-800", 0),
    AttendanceStatus.ABSENT: Badge("Absent", "danger", "x-circle", "bg-red-100 text-red-800", 1),
    AttendanceStatus.LATE: Badge("Late", "warning", "alert-circle", "bg-yellow-100 text-yellow-800", 2),
    AttendanceStatus.HALF_DAY: Badge("Half Day", "info", "clock", "bg-blue-100 text-blue-800", 3),
    AttendanceStatus.ON_LEAVE: Badge("On Leave", "secondary", "clock", "bg-purple-100 text-purple-800", 4),
    AttendanceStatus.HOLIDAY: Badge("Holiday", "purple", "clock", "bg-gray-100 text-gray-800", 5),
    AttendanceStatus.WEEK_OFF: Badge("Week Off", "blue", "clock", "bg-gray-100 text-gray-800", 6),
    AttendanceStatus.EARLY_DEPARTURE: Badge(
        "Early Departure", "orange", "alert-circle", "bg-orange-100 text-orange-800", 7
    ),
    AttendanceStatus.NOT_RECORDED: Badge("Not Recorded", "border", "clock", "bg-gray-100 text-gray-800", 8),
}

require_exhaustive(STATUS_BADGES, AttendanceStatus)


@dataclass(frozen=True)
class AttendanceTotals:
    """Simple reduction over backend-computed per-day values."""

    days: int = 0
    total_work_hours: float = 0.0
    total_overtime_hours: float = 0.0
    status_counts: dict[AttendanceStatus, int] = field(default_factory=dict)

    def count(self, status: AttendanceStatus) -> int:
        return self.status_counts.get(status, 0)


def badge_for(status: AttendanceStatus) -> Badge:
    return STATUS_BADGES[status]


def legend() -> list[Badge]:
    return sorted(STATUS_BADGES.values(), key=lambda b: b.order)


def format_hours(value: Optional[float], digits: int = 2) -> str:
    return f"{(value or 0.0):.{digits}f}h"


def summarize(days: Iterable[AttendanceDay]) -> AttendanceTotals:
    counts = {status: 0 for status in AttendanceStatus}
    total = 0
    hours = 0.0
    overtime = 0.0
    for day in days:
        total += 1
        counts[day.status] += 1
        hours += day.total_work_hours or 0.0
        overtime += day.overtime_hours or 0.0
    return AttendanceTotals(
        days=total,
        total_work_hours=round(hours, 2),
        total_overtime_hours=round(overtime, 2),
        status_counts=counts,
    )


def to_row(day: AttendanceDay) -> dict:
    badge = STATUS_BADGES[day.status]
    return {
        "date": day.work_date.strftime("%Y-%m-%d"),
        "punch_in": format_clock(day.punch_in.timestamp if day.punch_in else None),
        "punch_out": format_clock(day.punch_out.timestamp if day.punch_out else None),
        "work_hours": format_hours(day.total_work_hours),
        "overtime": format_hours(day.overtime_hours) if day.overtime_hours else None,
        "status": badge.label,
        "color": badge.color,
        "icon": badge.icon,
        "css_class": badge.css_class,
        "within_office": day.is_within_office_location,
    }
