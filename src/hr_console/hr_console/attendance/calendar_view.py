from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from ..common.datetime_utils import format_clock
from ..core.enums import AttendanceStatus
from .model import AttendanceDay
from .presenter import summarize

# Grid starts on Sunday, like the console's S M T W T F S header.
FIRST_WEEKDAY = calendar.SUNDAY

_NON_WORKING = frozenset({AttendanceStatus.HOLIDAY, AttendanceStatus.WEEK_OFF, AttendanceStatus.NOT_RECORDED})
_ATTENDED = frozenset(
    {
        AttendanceStatus.PRESENT,
        AttendanceStatus.LATE,
        AttendanceStatus.HALF_DAY,
        AttendanceStatus.EARLY_DEPARTURE,
    }
)


@dataclass(frozen=True)
class CalendarDay:
    day: int
    date: date
    day_of_week: int
    is_today: bool
    is_current_month: bool
    status: AttendanceStatus = AttendanceStatus.NOT_RECORDED
    punch_in: Optional[str] = None
    punch_out: Optional[str] = None
    work_hours: float = 0.0
    overtime: float = 0.0
    notes: Optional[str] = None


@dataclass(frozen=True)
class MonthSummary:
    total_days: int
    working_days: int
    attended_days: int
    attendance_rate: float
    total_hours: float
    total_overtime: float
    status_counts: dict[AttendanceStatus, int] = field(default_factory=dict)


@dataclass(frozen=True)
class MonthCalendar:
    year: int
    month: int
    cells: list[CalendarDay]
    summary: MonthSummary

    @property
    def month_name(self) -> str:
        return calendar.month_name[self.month]

    @property
    def days(self) -> list[CalendarDay]:
        """In-month cells only."""
        return [c for c in self.cells if c.is_current_month]

    @property
    def weeks(self) -> list[list[CalendarDay]]:
        return [self.cells[i : i + 7] for i in range(0, len(self.cells), 7)]


def build_month(year: int, month: int, days: Iterable[AttendanceDay], today: date) -> MonthCalendar:
    """Lay out one month as whole 7-day weeks.

    Cells outside the month pad the first and last week and carry
    ``is_current_month=False``. Dates without a record are NotRecorded.
    """
    by_date = {d.work_date: d for d in days if d.work_date.year == year and d.work_date.month == month}

    cells: list[CalendarDay] = []
    for cell_date in calendar.Calendar(FIRST_WEEKDAY).itermonthdates(year, month):
        in_month = cell_date.month == month
        record = by_date.get(cell_date) if in_month else None
        cells.append(_cell(cell_date, record, in_month=in_month, today=today))

    return MonthCalendar(
        year=year,
        month=month,
        cells=cells,
        summary=_summarize(by_date.values(), total_days=calendar.monthrange(year, month)[1]),
    )


def _cell(cell_date: date, record: Optional[AttendanceDay], *, in_month: bool, today: date) -> CalendarDay:
    base = dict(
        day=cell_date.day,
        date=cell_date,
        day_of_week=(cell_date.weekday() + 1) % 7,
        is_today=in_month and cell_date == today,
        is_current_month=in_month,
    )
    if record is None:
        return CalendarDay(**base)
    return CalendarDay(
        **base,
        status=record.status,
        punch_in=format_clock(record.punch_in.timestamp) if record.punch_in else None,
        punch_out=format_clock(record.punch_out.timestamp) if record.punch_out else None,
        work_hours=record.total_work_hours or 0.0,
        overtime=record.overtime_hours or 0.0,
        notes=record.notes,
    )


def _summarize(records: Iterable[AttendanceDay], *, total_days: int) -> MonthSummary:
    totals = summarize(records)
    working = sum(n for status, n in totals.status_counts.items() if status not in _NON_WORKING)
    attended = sum(n for status, n in totals.status_counts.items() if status in _ATTENDED)
    rate = round(attended * 100.0 / working, 1) if working else 0.0
    return MonthSummary(
        total_days=total_days,
        working_days=working,
        attended_days=attended,
        attendance_rate=rate,
        total_hours=totals.total_work_hours,
        total_overtime=totals.total_overtime_hours,
        status_counts=totals.status_counts,
    )


def previous_month(year: int, month: int) -> tuple[int, int]:
    return (year - 1, 12) if month == 1 else (year, month - 1)


def next_month(year: int, month: int) -> tuple[int, int]:
    return (year + 1, 1) if month == 12 else (year, month + 1)
