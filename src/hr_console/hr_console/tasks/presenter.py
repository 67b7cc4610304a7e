from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from ..common.presentation import Badge, require_exhaustive
from ..core.enums import DeadlineUrgency, TaskPriority, TaskStatus
from .deadline import classify_all
from .model import Task

URGENCY_BADGES: dict[DeadlineUrgency, Badge] = {
    DeadlineUrgency.COMPLETED: Badge("Completed", "success", "check-square"),
    DeadlineUrgency.OVERDUE: Badge("Overdue", "danger", "alert-triangle", "border-l-4"),
    DeadlineUrgency.DUE_TODAY: Badge("Due Today", "warning", "clock"),
    DeadlineUrgency.DUE_TOMORROW: Badge("Due Tomorrow", "warning", "clock"),
    DeadlineUrgency.APPROACHING_SOON: Badge("Due Soon", "accent"),
    DeadlineUrgency.ON_TRACK: Badge("On Track", "success"),
    DeadlineUrgency.NO_DEADLINE: Badge("No Deadline", "text"),
}

STATUS_BADGES: dict[TaskStatus, Badge] = {
    TaskStatus.NEW: Badge("New", "text"),
    TaskStatus.ASSIGNED: Badge("Assigned", "primary"),
    TaskStatus.IN_PROGRESS: Badge("In Progress", "warning"),
    TaskStatus.PENDING: Badge("Pending", "accent"),
    TaskStatus.COMPLETED: Badge("Completed", "success"),
    TaskStatus.APPROVED: Badge("Approved", "success"),
    TaskStatus.REJECTED: Badge("Rejected", "danger"),
}

PRIORITY_BADGES: dict[TaskPriority, Badge] = {
    TaskPriority.LOW: Badge("Low", "success"),
    TaskPriority.MEDIUM: Badge("Medium", "accent"),
    TaskPriority.HIGH: Badge("High", "warning"),
    TaskPriority.URGENT: Badge("Urgent", "danger"),
}

require_exhaustive(URGENCY_BADGES, DeadlineUrgency)
require_exhaustive(STATUS_BADGES, TaskStatus)
require_exhaustive(PRIORITY_BADGES, TaskPriority)


def _badge_dict(badge: Optional[Badge]) -> Optional[dict]:
    if badge is None:
        return None
    return {"label": badge.label, "color": badge.color, "icon": badge.icon}


def to_rows(tasks: Iterable[Task], *, now: Optional[datetime] = None) -> list[dict]:
    """Render-ready task rows; urgency is computed once for the whole batch."""
    rows = []
    for task, urgency in classify_all(tasks, now):
        rows.append(
            {
                "id": task.task_id,
                "title": task.title,
                "status": _badge_dict(STATUS_BADGES[task.status]),
                "priority": _badge_dict(PRIORITY_BADGES.get(task.priority) if task.priority else None),
                "deadline": task.deadline.isoformat() if task.deadline else None,
                "urgency": urgency.value,
                "urgency_badge": _badge_dict(URGENCY_BADGES[urgency]),
                "is_active": task.is_active,
            }
        )
    return rows
