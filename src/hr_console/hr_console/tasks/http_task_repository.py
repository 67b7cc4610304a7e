from __future__ import annotations

from typing import Any, Mapping, Optional

from ..attendance.model import Pagination
from ..backend.client import BackendClient
from ..common.validators import optional_count, optional_timestamp
from ..core.enums import TaskPriority, TaskStatus
from ..core.exceptions import ValidationError
from .model import Task, TaskPage
from .repository import TaskRepository


class HttpTaskRepository(TaskRepository):
    def __init__(self, client: BackendClient):
        self._client = client

    async def list_tasks(self, params: Mapping[str, Any]) -> TaskPage:
        return _page_from(await self._client.get("tasks", params=dict(params)))

    async def list_my_tasks(self, params: Mapping[str, Any]) -> TaskPage:
        return _page_from(await self._client.get("tasks/my", params=dict(params)))

    async def update_status(self, task_id: str, *, status: TaskStatus, remarks: str = "") -> Optional[Task]:
        body = await self._client.put(f"tasks/{task_id}/status", {"status": status.value, "remarks": remarks})
        return task_from_payload(body["task"]) if body.get("task") else None

    async def review(self, task_id: str, *, status: TaskStatus, remarks: str = "") -> Optional[Task]:
        body = await self._client.put(f"tasks/{task_id}/review", {"status": status.value, "remarks": remarks})
        return task_from_payload(body["task"]) if body.get("task") else None


def _page_from(body: Mapping[str, Any]) -> TaskPage:
    rows = body.get("tasks") or body.get("data") or []
    raw = body.get("pagination") or {}
    pagination = Pagination(
        page=optional_count(raw.get("page") or raw.get("currentPage"), "page", 1),
        total_pages=optional_count(raw.get("totalPages"), "totalPages", 1),
        total=optional_count(raw.get("totalTasks") or raw.get("total"), "total", len(rows)),
        limit=optional_count(raw.get("limit"), "limit", 0) or None,
    )
    return TaskPage(items=[task_from_payload(r) for r in rows], pagination=pagination)


def _ref(raw: Any) -> Optional[str]:
    if isinstance(raw, Mapping):
        return str(raw.get("_id") or raw.get("id") or "") or None
    return str(raw) if raw else None


def task_from_payload(raw: Mapping[str, Any]) -> Task:
    try:
        status = TaskStatus(raw.get("status") or TaskStatus.NEW.value)
    except ValueError:
        raise ValidationError(f"Unknown task status: {raw.get('status')}") from None

    priority = None
    if raw.get("priority"):
        try:
            priority = TaskPriority(raw["priority"])
        except ValueError:
            raise ValidationError(f"Unknown task priority: {raw['priority']}") from None

    return Task(
        task_id=str(raw.get("_id") or raw.get("id") or ""),
        title=str(raw.get("title") or ""),
        status=status,
        priority=priority,
        deadline=optional_timestamp(raw.get("deadline"), "deadline"),
        due_date=optional_timestamp(raw.get("dueDate"), "dueDate"),
        assigned_to=_ref(raw.get("assignedTo")),
        assigned_by=_ref(raw.get("assignedBy")),
        is_active=bool(raw.get("isActive", True)),
    )
