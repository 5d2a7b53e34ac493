"""OAuth token lifecycle for the Strava API.

This module decides whether the stored access token is still usable, exchanges
the refresh token for a new one when it is not, and persists the result. The
same fold-and-persist path (:func:`update_and_save_token`) is used for the
initial authorisation-code exchange performed by :mod:`.oauth`.

Refresh failures are logged and swallowed: the stale token stays in place and
the next API call fails with a :class:`~.errors.StravaPermissionError` instead.
Persistence failures after a successful exchange are never swallowed.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Dict, Optional

import requests

from .config import REQUEST_TIMEOUT, STRAVA_OAUTH_URL, TOKEN_EXPIRY_MARGIN_SECONDS
from .data_store import DataStore
from .errors import (
    DecodeError,
    NotAuthorizedError,
    RemoteAPIError,
    StravaAPIError,
    TransportError,
)
from .models import Credentials, TokenResponse
from .strava_client.response_handling import extract_error
from .strava_client.session import get_default_session
from .utils import mask_token, utcnow

LOGGER = logging.getLogger(__name__)


def request_token(
    credentials: Credentials,
    grant: Dict[str, str],
    *,
    session: requests.Session | None = None,
) -> TokenResponse:
    """POST to the token endpoint and parse the response.

    Args:
        credentials: Supplies ``client_id`` and ``client_secret``.
        grant: ``grant_type`` plus ``code`` or ``refresh_token``.
        session: HTTP session; defaults to the shared session.

    Raises:
        TransportError: If the token endpoint cannot be reached.
        RemoteAPIError: If the endpoint answers with a non-2xx status.
        DecodeError: If the body is not a complete token response.
    """

    http = session or get_default_session()
    payload = {
        "client_id": credentials.client_id,
        "client_secret": credentials.client_secret,
        **grant,
    }
    LOGGER.debug(
        "Token request url=%s grant_type=%s", STRAVA_OAUTH_URL, grant.get("grant_type")
    )
    try:
        resp = http.post(STRAVA_OAUTH_URL, data=payload, timeout=REQUEST_TIMEOUT)
    except requests.exceptions.RequestException as exc:
        raise TransportError(f"Transport failure calling token endpoint: {exc}") from exc

    status = resp.status_code
    if not 200 <= status < 300:
        detail = extract_error(resp)
        message = f"Token endpoint returned status {status}"
        raise RemoteAPIError(
            status, f"{message} | {detail}" if detail else message, detail
        )
    try:
        data = resp.json()
    except ValueError as exc:
        raise DecodeError("Invalid JSON in token response") from exc
    return TokenResponse.from_dict(data)


def update_and_save_token(
    token: TokenResponse, credentials: Credentials, store: DataStore
) -> None:
    """Fold a token response into ``credentials`` and persist the whole record.

    The record is written first; ``credentials`` is left untouched if the
    write fails.

    Raises:
        StorageError: If the data file cannot be written.
    """

    LOGGER.debug(
        "Updating tokens access_token=%s refresh_token=%s expires_at=%s",
        mask_token(token.access_token),
        mask_token(token.refresh_token),
        token.expires_at,
    )
    updated = replace(
        credentials,
        refresh_token=token.refresh_token,
        access_token=token.access_token,
        token_expires_at=token.expires_at,
    )
    store.save(updated)
    # Only commit in memory once the file matches.
    credentials.refresh_token = updated.refresh_token
    credentials.access_token = updated.access_token
    credentials.token_expires_at = updated.token_expires_at


def exchange_code_for_token(
    code: str,
    credentials: Credentials,
    store: DataStore,
    *,
    session: requests.Session | None = None,
) -> TokenResponse:
    """Exchange an authorisation code for tokens and persist them."""

    LOGGER.info("Exchanging authorisation code for tokens...")
    token = request_token(
        credentials,
        {"code": code, "grant_type": "authorization_code"},
        session=session,
    )
    update_and_save_token(token, credentials, store)
    LOGGER.info(
        "Token exchange succeeded: access_token=%s refresh_token=%s expires_at=%s",
        mask_token(token.access_token),
        mask_token(token.refresh_token),
        token.expires_at,
    )
    return token


def refresh_and_save_token(
    credentials: Credentials,
    store: DataStore,
    *,
    session: requests.Session | None = None,
) -> bool:
    """Refresh the access token; return ``False`` when the exchange failed.

    Raises:
        NotAuthorizedError: If no refresh token is stored.
        StorageError: If the refreshed tokens cannot be written.
    """

    refresh_token = credentials.refresh_token
    if not refresh_token:
        raise NotAuthorizedError("Missing refresh token; need to authorize application.")
    LOGGER.info("Refreshing Strava token refresh_token=%s", mask_token(refresh_token))
    try:
        token = request_token(
            credentials,
            {"grant_type": "refresh_token", "refresh_token": refresh_token},
            session=session,
        )
    except StravaAPIError as exc:
        LOGGER.warning("Token refresh failed, keeping current token: %s", exc)
        return False
    update_and_save_token(token, credentials, store)
    LOGGER.info(
        "Token refresh succeeded refresh_token_changed=%s expires_at=%s",
        token.refresh_token != refresh_token,
        token.expires_at,
    )
    return True


def token_is_expired(credentials: Credentials, now: Optional[datetime] = None) -> bool:
    """Return True when the access token expires within the safety margin."""

    expires_at = credentials.token_expires_at
    if expires_at is None:
        return True
    current = now or utcnow()
    return current + timedelta(seconds=TOKEN_EXPIRY_MARGIN_SECONDS) >= expires_at


def ensure_valid_token(
    credentials: Credentials,
    store: DataStore,
    *,
    session: requests.Session | None = None,
    now: Optional[datetime] = None,
) -> str:
    """Return a usable access token, refreshing and persisting it when stale.

    Raises:
        NotAuthorizedError: If the application was never authorised.
        StorageError: If refreshed tokens cannot be persisted.
    """

    if not credentials.refresh_token:
        raise NotAuthorizedError("Missing refresh token; need to authorize application.")
    if credentials.token_expires_at is None:
        raise NotAuthorizedError(
            "Missing token expiration datetime; need to authorize application."
        )
    if token_is_expired(credentials, now):
        refresh_and_save_token(credentials, store, session=session)
    if not credentials.access_token:
        raise NotAuthorizedError("Missing access token; need to authorize application.")
    return credentials.access_token
