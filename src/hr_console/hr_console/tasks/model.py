from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..attendance.model import Pagination
from ..core.enums import TaskPriority, TaskStatus


@dataclass(frozen=True)
class Task:
    task_id: str
    title: str
    status: TaskStatus
    priority: Optional[TaskPriority] = None
    deadline: Optional[datetime] = None
    due_date: Optional[datetime] = None
    assigned_to: Optional[str] = None
    assigned_by: Optional[str] = None
    is_active: bool = True


@dataclass(frozen=True)
class TaskPage:
    items: list[Task]
    pagination: Pagination
