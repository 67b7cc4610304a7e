from __future__ import annotations

from typing import Any, Optional

from ..attendance.repository import AttendanceRepository
from ..core.exceptions import ValidationError
from ..tasks.repository import TaskRepository
from .coordinator import Fetcher
from .model import QueryView


def build_fetcher(
    attendance: AttendanceRepository,
    tasks: Optional[TaskRepository] = None,
    *,
    employee_id: Optional[str] = None,
) -> Fetcher:
    """Route each list view to the endpoint that serves it."""

    async def fetch(view: QueryView, params: dict) -> Any:
        name = view.name
        if name == "attendance":
            return await attendance.list_attendance(params)
        if name == "my_attendance":
            return await attendance.list_my_attendance(params)
        if name == "team_attendance":
            return await attendance.list_team_attendance(params)
        if name in ("summary", "records", "calendar"):
            if not employee_id:
                raise ValidationError("An employee is required for the attendance details views")
            return await attendance.get_employee_details(employee_id, params)
        if tasks is not None and name == "tasks":
            return await tasks.list_tasks(params)
        if tasks is not None and name == "my_tasks":
            return await tasks.list_my_tasks(params)
        raise ValidationError(f"No endpoint serves the {name} view")

    return fetch
