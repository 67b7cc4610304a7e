from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import ActingAs
from .strategies.base import PunchStrategy
from .strategies.manager_strategy import ManagerPunchStrategy
from .strategies.self_strategy import SelfPunchStrategy


@dataclass
class PunchStrategyFactory:
    """Factory Pattern: choose the submission strategy for the acting mode."""

    def for_acting(self, acting_as: ActingAs) -> PunchStrategy:
        if acting_as is ActingAs.MANAGER_ON_BEHALF:
            return ManagerPunchStrategy()
        return SelfPunchStrategy()
