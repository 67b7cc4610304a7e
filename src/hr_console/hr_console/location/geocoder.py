from __future__ import annotations

import logging
from typing import Optional, Protocol

import httpx

from ..core.constants import REQUEST_TIMEOUT_SECONDS
from ..core.exceptions import GeocodingError
from .geo import coordinate_label

logger = logging.getLogger(__name__)

GOOGLE_GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"


class ReverseGeocoder(Protocol):
    async def reverse(self, latitude: float, longitude: float) -> str:
        raise NotImplementedError


class GoogleReverseGeocoder(ReverseGeocoder):
    """Google Maps Geocoding API, used only to label a fix for display."""

    def __init__(
        self,
        api_key: Optional[str],
        *,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key) and self._api_key != "undefined"

    async def reverse(self, latitude: float, longitude: float) -> str:
        if not self.is_configured:
            raise GeocodingError("Google Maps API key is not configured")

        params = {"latlng": f"{latitude},{longitude}", "key": self._api_key}
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(GOOGLE_GEOCODE_URL, params=params)
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise GeocodingError(f"Failed to get address from Google Maps API: {exc}") from exc

        status = data.get("status")
        results = data.get("results") or []
        address = results[0].get("formatted_address") if results else None
        if status == "OK" and address:
            return address
        if status == "ZERO_RESULTS":
            return f"Location near {coordinate_label(latitude, longitude)}"
        raise GeocodingError(f"Geocoding failed: {status} - {data.get('error_message') or 'Unknown error'}")
