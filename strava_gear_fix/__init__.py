"""Strava gear fixer package."""

from .errors import (
    DecodeError,
    NotAuthorizedError,
    RemoteAPIError,
    StorageError,
    StravaAPIError,
    StravaGearFixError,
    TransportError,
)
from .models import Activity, Credentials, TokenResponse
from .strava_api import StravaClient

__all__ = [
    "Activity",
    "Credentials",
    "TokenResponse",
    "StravaClient",
    "StravaGearFixError",
    "NotAuthorizedError",
    "StorageError",
    "StravaAPIError",
    "TransportError",
    "RemoteAPIError",
    "DecodeError",
]
