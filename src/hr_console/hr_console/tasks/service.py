from __future__ import annotations

import logging
from typing import Optional

from ..common.validators import require_non_empty
from ..core.enums import TaskStatus
from ..core.exceptions import ValidationError
from .model import Task
from .repository import TaskRepository

logger = logging.getLogger(__name__)

# Statuses an assignee may move a task to; reviews only approve or reject.
ASSIGNEE_STATUSES = frozenset({TaskStatus.IN_PROGRESS, TaskStatus.PENDING, TaskStatus.COMPLETED})
REVIEW_STATUSES = frozenset({TaskStatus.APPROVED, TaskStatus.REJECTED})


class TaskService:
    def __init__(self, tasks: TaskRepository):
        self._tasks = tasks

    async def update_status(self, task_id: str, status: str, *, remarks: str = "") -> Optional[Task]:
        new_status = _parse_status(status)
        if new_status not in ASSIGNEE_STATUSES:
            raise ValidationError(f"Cannot move a task to {new_status.value}")
        task = await self._tasks.update_status(task_id, status=new_status, remarks=remarks.strip())
        logger.info("Task %s moved to %s", task_id, new_status.value)
        return task

    async def review(self, task_id: str, status: str, *, remarks: str = "") -> Optional[Task]:
        decision = _parse_status(status)
        if decision not in REVIEW_STATUSES:
            raise ValidationError("A review must approve or reject the task")
        if decision is TaskStatus.REJECTED:
            remarks = require_non_empty(remarks, "Rejection remarks")
        task = await self._tasks.review(task_id, status=decision, remarks=remarks.strip())
        logger.info("Task %s reviewed: %s", task_id, decision.value)
        return task


def _parse_status(value: str) -> TaskStatus:
    try:
        return TaskStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown task status: {value}") from None
