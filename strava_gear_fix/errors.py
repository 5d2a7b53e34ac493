"""Central error types used across the application."""

from __future__ import annotations

from typing import Optional


class StravaGearFixError(RuntimeError):
    """Base error for every failure surfaced to the top-level caller."""


class NotAuthorizedError(StravaGearFixError):
    """Raised when no usable tokens are stored; run the OAuth bootstrap first."""


class StorageError(StravaGearFixError):
    """Raised when the local data file cannot be read, parsed or written."""


class StravaAPIError(StravaGearFixError):
    """Base error for Strava API failures."""


class TransportError(StravaAPIError):
    """Raised when Strava cannot be reached (DNS, connection, timeout)."""


class RemoteAPIError(StravaAPIError):
    """Raised when Strava answers with a non-2xx status."""

    def __init__(
        self, status: int, message: str, detail: Optional[str] = None
    ) -> None:
        super().__init__(message)
        self.status = status
        self.detail = detail


class StravaPermissionError(RemoteAPIError):
    """Raised when the API reports insufficient scopes or authentication issues."""


class StravaResourceNotFoundError(RemoteAPIError):
    """Raised when an activity or other resource does not exist."""


class DecodeError(StravaAPIError):
    """Raised when a successful response does not have the expected shape."""


__all__ = [
    "StravaGearFixError",
    "NotAuthorizedError",
    "StorageError",
    "StravaAPIError",
    "TransportError",
    "RemoteAPIError",
    "StravaPermissionError",
    "StravaResourceNotFoundError",
    "DecodeError",
]
