from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import httpx

from ..core.constants import REQUEST_TIMEOUT_SECONDS
from ..core.exceptions import BackendError, BackendUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BackendConfig:
    base_url: str
    api_prefix: str = "api"
    token: Optional[str] = None
    timeout: float = REQUEST_TIMEOUT_SECONDS

    @property
    def root_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.api_prefix.strip('/')}"


class BackendClient:
    """Thin async wrapper over the HR REST API.

    Note: A short-lived ``httpx.AsyncClient`` is opened per call, so the client
    is safe to share between requests served on different event loops.
    """

    def __init__(self, config: BackendConfig, *, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._config = config
        self._transport = transport

    @property
    def config(self) -> BackendConfig:
        return self._config

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._config.token:
            headers["Authorization"] = f"Bearer {self._config.token}"
        return headers

    async def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> dict:
        return await self._request("GET", path, params=params)

    async def post(self, path: str, json: Optional[Mapping[str, Any]] = None) -> dict:
        return await self._request("POST", path, json=dict(json or {}))

    async def put(self, path: str, json: Optional[Mapping[str, Any]] = None) -> dict:
        return await self._request("PUT", path, json=dict(json or {}))

    async def _request(self, method: str, path: str, **kwargs) -> dict:
        url = f"{self._config.root_url}/{path.lstrip('/')}"
        try:
            async with httpx.AsyncClient(
                headers=self._headers(),
                timeout=self._config.timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(method, url, **kwargs)
        except httpx.TransportError as exc:
            logger.warning("Backend unreachable: %s %s (%s)", method, url, exc)
            raise BackendUnavailable(str(exc) or "Network error") from exc

        if response.is_error:
            message = _error_message(response)
            logger.info("Backend rejected %s %s: %s %s", method, url, response.status_code, message)
            raise BackendError(message, status_code=response.status_code)

        if not response.content:
            return {}
        try:
            body = response.json()
        except ValueError:
            raise BackendError("Malformed response from backend", status_code=response.status_code) from None
        return body if isinstance(body, dict) else {"data": body}


def _error_message(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("message") or body.get("error")
        if isinstance(message, str) and message.strip():
            return message
    return None
