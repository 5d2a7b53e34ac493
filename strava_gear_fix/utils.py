"""General utility helpers shared across modules."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from .config import LOG_FORMAT


def utcnow() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""

    return datetime.now(timezone.utc)


def to_utc_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_datetime(value: str) -> datetime:
    """Parse an RFC 3339 timestamp such as ``2024-01-05T09:00:00Z``.

    Raises:
        ValueError: If ``value`` is not a valid timestamp.
    """

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return to_utc_aware(datetime.fromisoformat(text))


def format_datetime(value: datetime) -> str:
    """Format ``value`` as an RFC 3339 UTC timestamp with a ``Z`` suffix."""

    return to_utc_aware(value).isoformat().replace("+00:00", "Z")


def from_timestamp(seconds: int | float) -> datetime:
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def mask_token(token: str | None, visible: int = 4) -> str:
    """Return ``token`` with all but the trailing ``visible`` chars masked."""

    if not token:
        return ""
    visible = max(0, visible)
    if visible == 0:
        return "*" * len(token)
    hidden_length = max(len(token) - visible, 0)
    if hidden_length == 0:
        return token
    return ("*" * hidden_length) + token[-visible:]


def setup_logging(level: str) -> None:
    """Configure root logging unless the host application already did."""

    if not logging.getLogger().hasHandlers():
        logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
