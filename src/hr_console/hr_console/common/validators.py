from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_datetime


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def optional_float(value: Any, field_name: str, default: float = 0.0) -> float:
    """Read a numeric payload field; missing/null counts as ``default``."""
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number") from None


def positive_int(value: Any, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer") from None
    if number < 1:
        raise ValidationError(f"{field_name} must be at least 1")
    return number


def optional_timestamp(value: Any, field_name: str) -> Optional[datetime]:
    try:
        return parse_iso_datetime(value)
    except (AttributeError, TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an ISO datetime") from None


def optional_count(value: Any, field_name: str, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer") from None
