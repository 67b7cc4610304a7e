from __future__ import annotations

from typing import Any, Mapping

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.http import flag, json_errors, optional_datetime
from ..container import Container
from ..core.enums import ActingAs, PunchAction
from ..core.exceptions import ValidationError
from ..location.geo import format_coordinates
from ..location.model import LocationReading
from ..location.source import SubmittedPositionSource
from ..punch.model import PendingPunch, Subject
from ..queries.coordinator import QueryCoordinator
from ..queries.fetchers import build_fetcher
from ..queries.model import ATTENDANCE, MY_ATTENDANCE, TEAM_ATTENDANCE, state_from_args
from ..queries.pagination import page_numbers
from .calendar_view import build_month, next_month, previous_month
from .presenter import format_hours, legend, summarize, to_row

_LIST_VIEWS = {view.name: view for view in (ATTENDANCE, MY_ATTENDANCE, TEAM_ATTENDANCE)}

# Key the workflow uses for the signed-in user when no employee id is sent.
SELF_KEY = "me"


def register(app: Flask, container: Container) -> None:
    workflow = container.punch_workflow
    provider = container.location_provider

    def _subject(payload: Mapping[str, Any]) -> Subject:
        employee_id = (payload.get("employeeId") or "").strip()
        if not employee_id:
            return Subject(employee_id=SELF_KEY, is_self=True)
        return Subject(
            employee_id=employee_id,
            is_self=flag(payload.get("self"), default=False),
            display_name=payload.get("employeeName"),
        )

    def _action(payload: Mapping[str, Any]) -> PunchAction:
        try:
            return PunchAction(str(payload.get("action") or "").lower())
        except ValueError:
            raise ValidationError("action must be 'in' or 'out'") from None

    def _provider_for(payload: Mapping[str, Any]):
        return provider.with_source(SubmittedPositionSource.from_request(payload.get("position")))

    def _snapshot(subject: Subject) -> dict:
        day = workflow.today_attendance(subject)
        return {
            "attendance": to_row(day) if day else None,
            "state": workflow.state_of(subject).value,
            "actions": sorted(action.value for action in workflow.available_actions(subject)),
        }

    @app.route("/console/attendance/today", methods=["GET"], endpoint="attendance_today")
    @json_errors
    async def attendance_today():
        subject = _subject(request.args)
        await workflow.load_today(subject)
        return jsonify(
            {
                "success": True,
                **_snapshot(subject),
                "geolocation": provider.options.to_browser(),
            }
        )

    @app.route("/console/attendance/location", methods=["POST"], endpoint="attendance_location")
    @json_errors
    async def attendance_location():
        payload = request.get_json(silent=True) or {}
        reading = await workflow.refresh_location(_subject(payload), location=_provider_for(payload))
        return jsonify({"success": True, "location": _reading_dict(reading)})

    @app.route("/console/attendance/punch/confirm", methods=["POST"], endpoint="attendance_punch_confirm")
    @json_errors
    async def attendance_punch_confirm():
        payload = request.get_json(silent=True) or {}
        pending = workflow.request_confirmation(
            _action(payload),
            _subject(payload),
            manual_time=optional_datetime(payload, "manualTime"),
        )
        return jsonify({"success": True, "pending": _pending_dict(pending)})

    @app.route("/console/attendance/punch/cancel", methods=["POST"], endpoint="attendance_punch_cancel")
    @json_errors
    async def attendance_punch_cancel():
        payload = request.get_json(silent=True) or {}
        workflow.cancel_confirmation(_subject(payload))
        return jsonify({"success": True})

    @app.route("/console/attendance/punch", methods=["POST"], endpoint="attendance_punch")
    @json_errors
    async def attendance_punch():
        payload = request.get_json(silent=True) or {}
        subject = _subject(payload)
        acting_as = ActingAs.SELF if subject.is_self else ActingAs.MANAGER_ON_BEHALF
        action = _action(payload)

        await workflow.submit_punch(
            action,
            subject,
            acting_as,
            optional_datetime(payload, "manualTime"),
            location=_provider_for(payload) if acting_as is ActingAs.SELF else None,
        )
        verb = "Punched in" if action is PunchAction.IN else "Punched out"
        return jsonify({"success": True, "message": f"{verb} successfully", **_snapshot(subject)})

    @app.route("/console/attendance/<employee_id>/calendar", methods=["GET"], endpoint="attendance_calendar")
    @json_errors
    async def attendance_calendar(employee_id: str):
        today = now_local().date()
        year = _int_arg("year", today.year)
        month = _int_arg("month", today.month)
        if not 1 <= month <= 12:
            raise ValidationError("month must be between 1 and 12")

        records = await container.attendance_repo.get_month(employee_id, year=year, month=month)
        month_view = build_month(year, month, records, today)
        summary = month_view.summary
        return jsonify(
            {
                "success": True,
                "title": f"{month_view.month_name} {year}",
                "previous": list(previous_month(year, month)),
                "next": list(next_month(year, month)),
                "weeks": [[_cell_dict(cell) for cell in week] for week in month_view.weeks],
                "summary": {
                    "total_days": summary.total_days,
                    "working_days": summary.working_days,
                    "attended_days": summary.attended_days,
                    "attendance_rate": summary.attendance_rate,
                    "total_hours": format_hours(summary.total_hours),
                    "total_overtime": format_hours(summary.total_overtime),
                    "status_counts": {status.value: count for status, count in summary.status_counts.items()},
                },
                "legend": [{"label": b.label, "color": b.color, "icon": b.icon} for b in legend()],
            }
        )

    @app.route("/console/attendance/records", methods=["GET"], endpoint="attendance_records")
    @json_errors
    async def attendance_records():
        args = request.args.to_dict()
        view = _LIST_VIEWS.get(args.pop("view", ATTENDANCE.name))
        if view is None:
            raise ValidationError("Unknown attendance view")

        coordinator = QueryCoordinator(build_fetcher(container.attendance_repo), view, initial=state_from_args(args))
        await coordinator.refresh()
        if coordinator.error is not None:
            raise coordinator.error

        page = coordinator.result
        totals = summarize(page.items)
        return jsonify(
            {
                "success": True,
                "rows": [to_row(day) for day in page.items],
                "totals": {
                    "days": totals.days,
                    "work_hours": format_hours(totals.total_work_hours),
                    "overtime": format_hours(totals.total_overtime_hours),
                },
                "pagination": {
                    "page": page.pagination.page,
                    "total_pages": page.pagination.total_pages,
                    "total": page.pagination.total,
                    "pages": page_numbers(page.pagination.page, page.pagination.total_pages),
                },
            }
        )


def _int_arg(name: str, default: int) -> int:
    raw = request.args.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer") from None


def _reading_dict(reading: LocationReading) -> dict:
    return {
        "latitude": reading.latitude,
        "longitude": reading.longitude,
        "accuracy": reading.accuracy_meters,
        "address": reading.address,
        "coordinates": format_coordinates(reading.latitude, reading.longitude),
    }


def _pending_dict(pending: PendingPunch) -> dict:
    return {
        "action": pending.action.value,
        "employeeId": pending.subject.employee_id,
        "employeeName": pending.subject.display_name,
        "time": pending.target_time.isoformat(),
        "location": pending.location_label,
    }


def _cell_dict(cell) -> dict:
    return {
        "day": cell.day,
        "date": cell.date.isoformat(),
        "is_today": cell.is_today,
        "is_current_month": cell.is_current_month,
        "status": cell.status.value,
        "work_hours": cell.work_hours,
    }
