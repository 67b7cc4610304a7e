from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol

from ..common.datetime_utils import from_epoch_millis, now_local, parse_iso_datetime
from .model import Position, PositionOptions

PERMISSION_DENIED = 1
POSITION_UNAVAILABLE = 2
TIMEOUT = 3


class PositionSourceError(Exception):
    """Platform-level failure, carrying the W3C geolocation error code."""

    def __init__(self, code: int, message: str = ""):
        super().__init__(message or f"geolocation error {code}")
        self.code = int(code)


class PositionSource(Protocol):
    async def get_current_position(self, options: PositionOptions) -> Position:
        raise NotImplementedError


class SubmittedPositionSource(PositionSource):
    """Replays the fix (or error) the browser posted alongside a request.

    Accepted payloads::

        {"latitude": .., "longitude": .., "accuracy": .., "timestamp": ..}
        {"error": {"code": 1, "message": "User denied Geolocation"}}
    """

    def __init__(self, payload: Mapping[str, Any]):
        self._payload = payload

    @classmethod
    def from_request(cls, payload: Optional[Mapping[str, Any]]) -> Optional["SubmittedPositionSource"]:
        # No payload means the client has no geolocation capability at all.
        if not payload:
            return None
        return cls(payload)

    async def get_current_position(self, options: PositionOptions) -> Position:
        error = self._payload.get("error")
        if error:
            code = error.get("code", POSITION_UNAVAILABLE) if isinstance(error, Mapping) else POSITION_UNAVAILABLE
            message = error.get("message", "") if isinstance(error, Mapping) else str(error)
            raise PositionSourceError(int(code), message)

        try:
            return Position(
                latitude=float(self._payload["latitude"]),
                longitude=float(self._payload["longitude"]),
                accuracy=float(self._payload.get("accuracy") or 0.0),
                timestamp=_timestamp(self._payload.get("timestamp")),
            )
        except (KeyError, TypeError, ValueError):
            raise PositionSourceError(POSITION_UNAVAILABLE, "Position payload is incomplete") from None


def _timestamp(raw: Any):
    if raw is None or raw == "":
        return now_local()
    if isinstance(raw, (int, float)):
        return from_epoch_millis(raw)
    return parse_iso_datetime(str(raw))
