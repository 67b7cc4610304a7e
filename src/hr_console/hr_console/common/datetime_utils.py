from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional, Union


def parse_iso_date(value: Union[str, date, datetime]) -> date:
    """Parse YYYY-MM-DD (optionally followed by a time part) into date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value[:10], "%Y-%m-%d").date()


def parse_iso_datetime(value: Union[str, datetime, None]) -> Optional[datetime]:
    """Parse the backend's ISO timestamps, including the trailing ``Z`` form."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def from_epoch_millis(value: float) -> datetime:
    return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)


def to_iso(value: datetime) -> str:
    """Serialise with an explicit offset; naive values are taken as local time."""
    if value.tzinfo is None:
        value = value.astimezone()
    return value.isoformat()


def format_clock(value: Optional[datetime]) -> str:
    """Format a punch timestamp as HH:MM, or ``--:--`` when missing."""
    if value is None:
        return "--:--"
    return value.strftime("%H:%M")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
