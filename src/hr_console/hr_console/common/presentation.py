from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional


@dataclass(frozen=True)
class Badge:
    """Visual weight of a label: theme color name, icon name and css class."""

    label: str
    color: str
    icon: Optional[str] = None
    css_class: str = ""
    order: int = 0


def require_exhaustive(table: Mapping, enum_cls: type[Enum]) -> None:
    """Fail at import time when a presentation table misses an enum member."""
    missing = [member.name for member in enum_cls if member not in table]
    if missing:
        raise RuntimeError(f"No presentation for {enum_cls.__name__}: {', '.join(missing)}")
