"""JSON file persistence for credentials, tokens and the activity watermark."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from .config import DATA_FILE
from .errors import StorageError
from .models import Credentials
from .utils import format_datetime, parse_datetime

LOGGER = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("client_id", "client_secret", "trainer_bike_id")


def _optional_str(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise StorageError(f"Field '{key}' must be a string or null")
    return value


def _optional_datetime(data: Dict[str, Any], key: str) -> Optional[datetime]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise StorageError(f"Field '{key}' must be an RFC 3339 string or null")
    try:
        return parse_datetime(value)
    except ValueError as exc:
        raise StorageError(f"Field '{key}' is not a valid timestamp: {exc}") from exc


def credentials_from_dict(data: Any) -> Credentials:
    if not isinstance(data, dict):
        raise StorageError("Data file must contain a JSON object")
    missing = [key for key in _REQUIRED_FIELDS if key not in data]
    if missing:
        raise StorageError(f"Data file missing fields: {', '.join(missing)}")
    return Credentials(
        client_id=str(data["client_id"]),
        client_secret=str(data["client_secret"]),
        trainer_bike_id=str(data["trainer_bike_id"]),
        refresh_token=_optional_str(data, "refresh_token"),
        access_token=_optional_str(data, "access_token"),
        token_expires_at=_optional_datetime(data, "token_expires_at"),
        last_activity_date=_optional_datetime(data, "last_activity_date"),
    )


def credentials_to_dict(credentials: Credentials) -> Dict[str, Any]:
    def _fmt(value):
        return format_datetime(value) if value is not None else None

    return {
        "client_id": credentials.client_id,
        "client_secret": credentials.client_secret,
        "refresh_token": credentials.refresh_token,
        "access_token": credentials.access_token,
        "trainer_bike_id": credentials.trainer_bike_id,
        "token_expires_at": _fmt(credentials.token_expires_at),
        "last_activity_date": _fmt(credentials.last_activity_date),
    }


class DataStore:
    """Durable holder of a single :class:`Credentials` record.

    The file is pretty-printed JSON. Writes go to a sibling ``.tmp`` file that
    then replaces the data file.
    """

    def __init__(self, path: str | Path = DATA_FILE) -> None:
        self.path = Path(path)

    def load(self) -> Credentials:
        """Read credentials from disk.

        Raises:
            StorageError: If the file is missing, unreadable or malformed.
        """

        try:
            with self.path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except OSError as exc:
            raise StorageError(f"Failed to read data file {self.path}: {exc}") from exc
        except ValueError as exc:
            raise StorageError(f"Invalid JSON in data file {self.path}: {exc}") from exc
        LOGGER.debug("Loaded data file %s", self.path)
        return credentials_from_dict(data)

    def save(self, credentials: Credentials) -> None:
        """Write the whole credentials record to disk.

        Raises:
            StorageError: If the file cannot be written.
        """

        payload = credentials_to_dict(credentials)
        temp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with temp_path.open("w", encoding="utf-8") as handle:
                json.dump(payload, handle, ensure_ascii=True, indent=2)
            temp_path.replace(self.path)
        except OSError as exc:
            raise StorageError(f"Failed to write data file {self.path}: {exc}") from exc
        LOGGER.debug("Saved data file %s", self.path)
