from __future__ import annotations

import asyncio
import logging
from typing import Optional

from ..core.exceptions import (
    LocationError,
    LocationTimeout,
    LocationUnsupported,
    PermissionDenied,
    PositionUnavailable,
)
from .geo import coordinate_label, validate_coordinates
from .geocoder import ReverseGeocoder
from .model import LocationReading, Position, PositionOptions
from .source import PERMISSION_DENIED, POSITION_UNAVAILABLE, TIMEOUT, PositionSource, PositionSourceError

logger = logging.getLogger(__name__)


class LocationProvider:
    """Turns a one-shot platform fix into a ``LocationReading``.

    No retries happen here; the caller decides whether to try again.
    """

    def __init__(
        self,
        source: Optional[PositionSource],
        geocoder: Optional[ReverseGeocoder] = None,
        *,
        options: Optional[PositionOptions] = None,
    ):
        self._source = source
        self._geocoder = geocoder
        self._options = options or PositionOptions()

    @property
    def options(self) -> PositionOptions:
        return self._options

    def with_source(self, source: Optional[PositionSource]) -> "LocationProvider":
        return LocationProvider(source, self._geocoder, options=self._options)

    async def capture_location(self) -> LocationReading:
        position = await self._request_position()
        address = await self._describe(position.latitude, position.longitude)
        return LocationReading(
            latitude=position.latitude,
            longitude=position.longitude,
            accuracy_meters=position.accuracy,
            captured_at=position.timestamp,
            address=address,
        )

    async def _request_position(self) -> Position:
        if self._source is None:
            raise LocationUnsupported()

        try:
            position = await asyncio.wait_for(
                self._source.get_current_position(self._options),
                timeout=self._options.timeout,
            )
        except asyncio.TimeoutError:
            raise LocationTimeout() from None
        except PositionSourceError as exc:
            raise _map_platform_error(exc) from exc

        if not validate_coordinates(position.latitude, position.longitude):
            raise PositionUnavailable("Position has invalid coordinates")
        return position

    async def _describe(self, latitude: float, longitude: float) -> str:
        fallback = coordinate_label(latitude, longitude)
        if self._geocoder is None:
            return fallback
        try:
            address = await self._geocoder.reverse(latitude, longitude)
        except Exception as exc:
            # Reverse geocoding is display-only and must never fail the capture.
            logger.warning("Reverse geocoding failed, using coordinates: %s", exc)
            return fallback
        return address or fallback


def _map_platform_error(exc: PositionSourceError) -> LocationError:
    if exc.code == PERMISSION_DENIED:
        return PermissionDenied()
    if exc.code == TIMEOUT:
        return LocationTimeout()
    if exc.code == POSITION_UNAVAILABLE:
        return PositionUnavailable()
    return PositionUnavailable(f"Unable to get location ({exc})")
