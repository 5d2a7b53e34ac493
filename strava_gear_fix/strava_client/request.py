"""Authenticated single-shot request executor for the Strava API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, TypeVar

import requests

from ..auth import ensure_valid_token
from ..config import REQUEST_TIMEOUT
from ..data_store import DataStore
from ..errors import DecodeError, TransportError
from ..models import Credentials
from ..utils import mask_token
from .base import auth_headers, resolve_url
from .response_handling import classify_response_status
from .session import get_default_session

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class StravaRequest:
    """One outbound API call; ``path`` is relative to the API base URL."""

    method: str
    path: str
    params: Optional[Mapping[str, str]] = None
    body: Optional[Mapping[str, str]] = None


def execute(
    request: StravaRequest,
    credentials: Credentials,
    store: DataStore,
    decode: Callable[[Any], T],
    *,
    session: requests.Session | None = None,
    timeout: float = REQUEST_TIMEOUT,
) -> T:
    """Send ``request`` with a valid bearer token and decode the JSON body.

    A single attempt is made; nothing is retried and a 401 does not trigger
    re-authorisation.

    Args:
        request: Method, path, query parameters and JSON body.
        credentials: Token state; refreshed in place when stale.
        store: Where refreshed tokens are persisted.
        decode: Turns the parsed JSON into the result, raising
            :class:`~strava_gear_fix.errors.DecodeError` on shape mismatch.
        session: HTTP session; defaults to the shared session.
        timeout: Per-request timeout in seconds.

    Raises:
        NotAuthorizedError: If the application was never authorised.
        StorageError: If refreshed tokens cannot be persisted.
        TransportError: If Strava cannot be reached.
        RemoteAPIError: If Strava answers with a non-2xx status.
        DecodeError: If a 2xx body is not the expected shape.
        ValueError: If ``request.path`` cannot be resolved.
    """

    access_token = ensure_valid_token(credentials, store, session=session)
    url = resolve_url(request.path)
    LOGGER.debug(
        "Making request to Strava method=%s url=%s params=%s body=%s "
        "token_expires_at=%s access_token=%s",
        request.method,
        url,
        request.params,
        request.body,
        credentials.token_expires_at,
        mask_token(access_token),
    )

    headers: Dict[str, str] = auth_headers(access_token)
    kwargs: Dict[str, Any] = {"headers": headers, "timeout": timeout}
    if request.body is not None:
        headers["Content-Type"] = "application/json"
        kwargs["json"] = dict(request.body)
    if request.params is not None:
        kwargs["params"] = dict(request.params)

    http = session or get_default_session()
    context = f"{request.method} {request.path}"
    try:
        resp = http.request(request.method, url, **kwargs)
    except requests.exceptions.RequestException as exc:
        LOGGER.error("Request error calling Strava %s: %s", context, exc)
        raise TransportError(f"Error from request to Strava: {exc}") from exc

    error = classify_response_status(resp, context)
    if error is not None:
        raise error

    try:
        data = resp.json()
    except ValueError as exc:
        LOGGER.error("Invalid JSON in response to %s: %s", context, exc)
        raise DecodeError("Error converting response to JSON") from exc
    try:
        return decode(data)
    except DecodeError as exc:
        LOGGER.error("Unexpected response shape for %s: %s", context, exc)
        raise
