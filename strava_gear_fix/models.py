from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from .errors import DecodeError
from .utils import from_timestamp, parse_datetime


@dataclass
class Credentials:
    client_id: str
    client_secret: str
    trainer_bike_id: str
    refresh_token: Optional[str] = None
    # access_token and token_expires_at are always set together
    access_token: Optional[str] = None
    token_expires_at: Optional[datetime] = None
    # Latest activity start time already processed (watermark)
    last_activity_date: Optional[datetime] = None

    @property
    def is_authorized(self) -> bool:
        return bool(self.refresh_token) and self.token_expires_at is not None


def _field(data: Mapping[str, Any], key: str, kind: type, context: str) -> Any:
    """Return ``data[key]`` if it is an instance of ``kind``.

    ``bool`` is not accepted where ``int`` is expected.

    Raises:
        DecodeError: If the key is missing or the value has the wrong type.
    """

    if key not in data:
        raise DecodeError(f"{context} missing field '{key}'")
    value = data[key]
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise DecodeError(
            f"{context} field '{key}' must be {kind.__name__}, "
            f"got {type(value).__name__}"
        )
    return value


@dataclass(frozen=True)
class TokenResponse:
    """Payload returned by the Strava token endpoint for both grant types."""

    token_type: str
    access_token: str
    refresh_token: str
    expires_at: datetime
    expires_in: int

    @classmethod
    def from_dict(cls, data: Any) -> "TokenResponse":
        if not isinstance(data, Mapping):
            raise DecodeError(
                f"Unexpected token response shape: {type(data).__name__}"
            )
        context = "Token response"
        expires_at = _field(data, "expires_at", int, context)
        try:
            expires_at_dt = from_timestamp(expires_at)
        except (ValueError, OverflowError, OSError) as exc:
            raise DecodeError(f"{context} has invalid expires_at: {exc}") from exc
        return cls(
            token_type=_field(data, "token_type", str, context),
            access_token=_field(data, "access_token", str, context),
            refresh_token=_field(data, "refresh_token", str, context),
            expires_at=expires_at_dt,
            expires_in=_field(data, "expires_in", int, context),
        )


@dataclass
class Activity:
    id: int
    name: str
    # Legacy Strava "type"; sport_type is the finer-grained classification
    type: str
    trainer: bool
    gear_id: Optional[str]
    sport_type: str
    start_date: datetime

    @classmethod
    def from_dict(cls, data: Any) -> "Activity":
        """Build an activity from a Strava summary/detailed activity payload.

        ``gear_id`` must be present but may be ``null`` for activities without
        gear. Every other field is required and non-null.

        Raises:
            DecodeError: If a required field is missing or malformed.
        """

        if not isinstance(data, Mapping):
            raise DecodeError(f"Unexpected activity shape: {type(data).__name__}")
        context = "Activity"
        if "gear_id" not in data:
            raise DecodeError(f"{context} missing field 'gear_id'")
        gear_id = data["gear_id"]
        if gear_id is not None and not isinstance(gear_id, str):
            raise DecodeError(
                f"{context} field 'gear_id' must be str or null, "
                f"got {type(gear_id).__name__}"
            )
        start_date = _field(data, "start_date", str, context)
        try:
            start = parse_datetime(start_date)
        except ValueError as exc:
            raise DecodeError(f"{context} has invalid start_date: {exc}") from exc
        return cls(
            id=_field(data, "id", int, context),
            name=_field(data, "name", str, context),
            type=_field(data, "type", str, context),
            trainer=_field(data, "trainer", bool, context),
            gear_id=gear_id,
            sport_type=_field(data, "sport_type", str, context),
            start_date=start,
        )
