from datetime import date, datetime

from src.hr_console.hr_console.attendance.model import AttendanceDay, PunchEvent
from src.hr_console.hr_console.attendance.presenter import (
    STATUS_BADGES,
    badge_for,
    format_hours,
    legend,
    summarize,
    to_row,
)
from src.hr_console.hr_console.core.enums import AttendanceStatus


def test_every_status_has_a_badge():
    assert set(STATUS_BADGES) == set(AttendanceStatus)


def test_badges_for_common_statuses():
    assert badge_for(AttendanceStatus.PRESENT).color == "success"
    assert badge_for(AttendanceStatus.ABSENT).color == "danger"
    assert badge_for(AttendanceStatus.LATE).icon == "alert-circle"


def test_legend_is_ordered():
    labels = [badge.label for badge in legend()]
    assert labels[:3] == ["Present", "Absent", "Late"]
    assert labels[-1] == "Not Recorded"
    assert len(labels) == len(AttendanceStatus)


def test_format_hours():
    assert format_hours(7.5) == "7.50h"
    assert format_hours(None) == "0.00h"


def test_summarize_counts_and_rounds():
    days = [
        AttendanceDay(date(2025, 1, 6), "e1", AttendanceStatus.PRESENT, total_work_hours=8.333, overtime_hours=0.333),
        AttendanceDay(date(2025, 1, 7), "e1", AttendanceStatus.PRESENT, total_work_hours=8.0),
        AttendanceDay(date(2025, 1, 8), "e1", AttendanceStatus.ABSENT),
    ]

    totals = summarize(days)

    assert totals.days == 3
    assert totals.total_work_hours == 16.33
    assert totals.total_overtime_hours == 0.33
    assert totals.count(AttendanceStatus.PRESENT) == 2
    assert totals.count(AttendanceStatus.ABSENT) == 1
    assert totals.count(AttendanceStatus.HOLIDAY) == 0


def test_to_row():
    day = AttendanceDay(
        work_date=date(2025, 1, 6),
        employee_id="e1",
        status=AttendanceStatus.LATE,
        punch_in=PunchEvent(timestamp=datetime(2025, 1, 6, 9, 40)),
        total_work_hours=7.25,
        is_within_office_location=True,
    )

    row = to_row(day)

    assert row["date"] == "2025-01-06"
    assert row["punch_in"] == "09:40"
    assert row["punch_out"] == "--:--"
    assert row["work_hours"] == "7.25h"
    assert row["overtime"] is None
    assert row["status"] == "Late"
    assert row["color"] == "warning"
    assert row["within_office"] is True
