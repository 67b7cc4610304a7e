from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..attendance.model import Coordinates
from ..core.constants import GEOLOCATION_TIMEOUT_SECONDS


@dataclass(frozen=True)
class PositionOptions:
    enable_high_accuracy: bool = True
    timeout: float = GEOLOCATION_TIMEOUT_SECONDS
    maximum_age: float = 0.0

    def to_browser(self) -> dict:
        """Options in the shape `navigator.geolocation.getCurrentPosition` expects."""
        return {
            "enableHighAccuracy": self.enable_high_accuracy,
            "timeout": int(self.timeout * 1000),
            "maximumAge": int(self.maximum_age * 1000),
        }


@dataclass(frozen=True)
class Position:
    """Raw fix as reported by the platform."""

    latitude: float
    longitude: float
    accuracy: float
    timestamp: datetime


@dataclass(frozen=True)
class LocationReading:
    """Captured location; lives only in workflow state, never persisted."""

    latitude: float
    longitude: float
    accuracy_meters: float
    captured_at: datetime
    address: str

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(latitude=self.latitude, longitude=self.longitude)
