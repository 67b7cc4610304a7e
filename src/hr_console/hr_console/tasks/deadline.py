from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Iterable, Optional

from ..common.datetime_utils import now_local
from ..core.constants import DEADLINE_APPROACHING_DAYS
from ..core.enums import DeadlineUrgency, TaskStatus
from .model import Task

_DONE = frozenset({TaskStatus.COMPLETED, TaskStatus.APPROVED})
_DAY = timedelta(days=1)


def days_until(deadline: datetime, now: datetime) -> int:
    """Whole days left before ``deadline``, rounded up (negative once overdue)."""
    deadline, now = _align(deadline, now)
    return math.ceil((deadline - now) / _DAY)


def classify(task: Task, now: datetime) -> DeadlineUrgency:
    if task.status in _DONE:
        return DeadlineUrgency.COMPLETED
    if task.deadline is None:
        return DeadlineUrgency.NO_DEADLINE

    days_diff = days_until(task.deadline, now)
    if days_diff < 0:
        return DeadlineUrgency.OVERDUE
    if days_diff == 0:
        return DeadlineUrgency.DUE_TODAY
    if days_diff == 1:
        return DeadlineUrgency.DUE_TOMORROW
    if days_diff <= DEADLINE_APPROACHING_DAYS:
        return DeadlineUrgency.APPROACHING_SOON
    return DeadlineUrgency.ON_TRACK


def classify_all(tasks: Iterable[Task], now: Optional[datetime] = None) -> list[tuple[Task, DeadlineUrgency]]:
    """Classify a batch against a single ``now`` so the batch is consistent."""
    now = now or now_local()
    return [(task, classify(task, now)) for task in tasks]


def _align(deadline: datetime, now: datetime) -> tuple[datetime, datetime]:
    # Naive values are local time.
    if (deadline.tzinfo is None) == (now.tzinfo is None):
        return deadline, now
    if deadline.tzinfo is None:
        return deadline.astimezone(now.tzinfo), now
    return deadline, now.astimezone(deadline.tzinfo)
