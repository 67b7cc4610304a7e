from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class BackendError(DomainError):
    """Raised by the backend client when the REST API rejects a request."""

    def __init__(self, message: Optional[str] = None, *, status_code: Optional[int] = None):
        super().__init__(message or "Backend request failed")
        self.message = message
        self.status_code = status_code


class BackendUnavailable(BackendError):
    """The backend could not be reached (transport failure, timeout)."""


# Location


class LocationError(DomainError):
    """Base for failures of a one-shot position fix."""


class PermissionDenied(LocationError):
    def __init__(self, message: str = "Location access denied"):
        super().__init__(message)


class PositionUnavailable(LocationError):
    def __init__(self, message: str = "Position unavailable"):
        super().__init__(message)


class LocationTimeout(LocationError):
    def __init__(self, message: str = "Location request timed out"):
        super().__init__(message)


class LocationUnsupported(LocationError):
    def __init__(self, message: str = "Geolocation is not supported"):
        super().__init__(message)


class GeocodingError(DomainError):
    """Reverse geocoding failed. Always recovered locally by the provider."""


# Punch


class PunchError(DomainError):
    """Base for rejected punch submissions."""


class AlreadyPunched(PunchError):
    pass


class NotYetPunchedIn(PunchError):
    pass


class LocationRequired(PunchError):
    """Self punch aborted because no position fix could be captured."""

    def __init__(self, location_error: LocationError):
        super().__init__(f"Location Error: {location_error}")
        self.location_error = location_error


class PunchRejected(PunchError):
    """The backend refused the punch; ``message`` is shown verbatim."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# Queries


class QueryError(DomainError):
    """Base for failed list fetches."""


class NetworkFailure(QueryError):
    pass


class QueryRejected(QueryError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
