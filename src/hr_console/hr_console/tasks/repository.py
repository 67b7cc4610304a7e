from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol

from ..core.enums import TaskStatus
from .model import Task, TaskPage


class TaskRepository(Protocol):
    async def list_tasks(self, params: Mapping[str, Any]) -> TaskPage:
        raise NotImplementedError

    async def list_my_tasks(self, params: Mapping[str, Any]) -> TaskPage:
        raise NotImplementedError

    async def update_status(self, task_id: str, *, status: TaskStatus, remarks: str = "") -> Optional[Task]:
        raise NotImplementedError

    async def review(self, task_id: str, *, status: TaskStatus, remarks: str = "") -> Optional[Task]:
        raise NotImplementedError
