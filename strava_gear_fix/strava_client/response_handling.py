"""Shared HTTP response helpers for Strava API interactions."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from ..errors import (
    RemoteAPIError,
    StravaPermissionError,
    StravaResourceNotFoundError,
)

LOGGER = logging.getLogger(__name__)

__all__ = [
    "classify_response_status",
    "extract_error",
]


def classify_response_status(
    response: requests.Response, context: str
) -> Optional[RemoteAPIError]:
    """Return the error for a non-2xx response, or None for success."""

    status = response.status_code
    if 200 <= status < 300:
        return None
    detail = extract_error(response)

    def with_detail(message: str) -> str:
        return f"{message} | {detail}" if detail else message

    if status == 401:
        message = with_detail(
            f"{context} returned 401 - probably need to re-authorize the application"
        )
        LOGGER.error(message)
        return StravaPermissionError(status, message, detail)

    if status == 403:
        message = with_detail(f"{context} forbidden (status 403)")
        LOGGER.error(message)
        return StravaPermissionError(status, message, detail)

    if status == 404:
        message = with_detail(f"{context} not found (status 404)")
        LOGGER.error(message)
        return StravaResourceNotFoundError(status, message, detail)

    message = with_detail(f"{context} request failed (status {status})")
    LOGGER.error(message)
    return RemoteAPIError(status, message, detail)


def extract_error(resp: Optional[requests.Response]) -> Optional[str]:
    """Return compact string with Strava error info (message + codes) if present."""

    if resp is None:
        return None
    data = _safe_json(resp)
    if data is None:
        return _extract_error_text(resp)
    if not isinstance(data, dict):
        return None
    parts = _collect_error_parts(data)
    return " | ".join(parts) if parts else None


def _safe_json(resp: requests.Response) -> Optional[Any]:
    """Safely parse JSON; return None if parsing fails."""

    try:
        return resp.json()
    except ValueError as exc:
        LOGGER.debug(
            "Failed to decode JSON from %s: %s", getattr(resp, "url", "?"), exc
        )
        return None


def _extract_error_text(resp: requests.Response) -> Optional[str]:
    """Best-effort plain-text extraction when JSON parsing fails."""

    text = getattr(resp, "text", "")
    if not isinstance(text, str):
        return None
    trimmed = text.strip()
    if not trimmed:
        return None
    return (trimmed[:297] + "...") if len(trimmed) > 300 else trimmed


def _collect_error_parts(data: Dict[str, Any]) -> List[str]:
    """Build error snippets from the standard Strava error response."""

    parts: List[str] = []
    message = data.get("message")
    if message:
        parts.append(str(message))
    errors = data.get("errors")
    if isinstance(errors, list):
        for err in errors:
            if not isinstance(err, dict):
                continue
            resource = err.get("resource")
            field = err.get("field")
            code = err.get("code")
            target = "/".join(filter(None, (resource, field)))
            if code and target:
                parts.append(f"{target}:{code}")
            elif code:
                parts.append(str(code))
    return parts
