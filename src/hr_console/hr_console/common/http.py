from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Mapping, Optional

from flask import jsonify

from ..core.exceptions import (
    AlreadyPunched,
    BackendError,
    BackendUnavailable,
    DomainError,
    LocationError,
    LocationRequired,
    NotYetPunchedIn,
    QueryError,
    ValidationError,
)
from .validators import optional_timestamp

logger = logging.getLogger(__name__)

_STATUS_CODES = (
    (ValidationError, 400),
    (AlreadyPunched, 409),
    (NotYetPunchedIn, 409),
    (LocationRequired, 422),
    (LocationError, 422),
    (BackendUnavailable, 503),
    (BackendError, 502),
    (QueryError, 502),
)


def status_code_for(exc: DomainError) -> int:
    for exc_type, code in _STATUS_CODES:
        if isinstance(exc, exc_type):
            return code
    return 400


def json_errors(view):
    """Turn domain errors into ``{"success": false, "message": ...}`` responses."""

    @wraps(view)
    async def wrapper(*args, **kwargs):
        try:
            return await view(*args, **kwargs)
        except DomainError as e:
            return jsonify({"success": False, "message": str(e)}), status_code_for(e)
        except Exception:
            logger.exception("Unhandled error in %s", view.__name__)
            return jsonify({"success": False, "message": "System error"}), 500

    return wrapper


def optional_datetime(payload: Mapping[str, Any], key: str):
    return optional_timestamp(payload.get(key), key)


def flag(value: Optional[Any], default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}
