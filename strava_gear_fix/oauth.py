"""One-time interactive Strava authorisation (OAuth authorisation-code flow).

Opens the Strava consent page in a browser, serves the redirect on a local
Flask app, exchanges the received code for tokens and stores them in the data
file. Run with ``python -m strava_gear_fix.oauth`` or ``strava-gear-fix-auth``.
"""

from __future__ import annotations

import argparse
import logging
import secrets
import threading
import time
import urllib.parse
import webbrowser
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import requests
from flask import Flask, request
from flask.typing import ResponseReturnValue
from werkzeug.serving import BaseWSGIServer, make_server

from .auth import exchange_code_for_token
from .config import (
    DATA_FILE,
    LOG_LEVEL,
    LOG_LEVELS,
    OAUTH_CALLBACK_PATH,
    OAUTH_HOST,
    OAUTH_PORT,
    OAUTH_SCOPE,
    OAUTH_SHUTDOWN_GRACE_SECONDS,
    OAUTH_WAIT_TIMEOUT,
    REDIRECT_URI,
    STRAVA_AUTHORIZE_URL,
)
from .data_store import DataStore
from .errors import NotAuthorizedError, StravaGearFixError
from .models import Credentials, TokenResponse
from .utils import setup_logging

LOGGER = logging.getLogger(__name__)


@dataclass
class OAuthSession:
    """State of a single authorisation attempt.

    The callback sets ``completed`` once tokens are stored; the driver waits on
    it and owns shutting the server down.
    """

    credentials: Credentials
    store: DataStore
    http: Optional[requests.Session] = None
    expected_state: str = field(default_factory=lambda: secrets.token_urlsafe(16))
    token: Optional[TokenResponse] = None
    completed: threading.Event = field(default_factory=threading.Event)


def build_auth_url(credentials: Credentials, state: str) -> str:
    params = {
        "client_id": credentials.client_id,
        "redirect_uri": REDIRECT_URI,
        "response_type": "code",
        "scope": OAUTH_SCOPE,
        "state": state,
    }
    return f"{STRAVA_AUTHORIZE_URL}?{urllib.parse.urlencode(params)}"


def create_app(oauth: OAuthSession) -> Flask:
    app = Flask(__name__)

    @app.route(OAUTH_CALLBACK_PATH)
    def callback() -> ResponseReturnValue:
        code = request.args.get("code")
        if not code:
            error = request.args.get("error") or "unknown error"
            LOGGER.error("Authorisation failed: %s", error)
            return error, 500
        if request.args.get("state") != oauth.expected_state:
            LOGGER.error("Invalid OAuth state received; possible CSRF. Ignoring.")
            return "Invalid state", 500
        if oauth.completed.is_set():
            return "Authorisation already completed", 500
        LOGGER.info("Authorisation code received via callback.")
        try:
            oauth.token = exchange_code_for_token(
                code, oauth.credentials, oauth.store, session=oauth.http
            )
        except StravaGearFixError as exc:
            LOGGER.error("Failed to exchange code for tokens: %s", exc)
            return str(exc), 500
        oauth.completed.set()
        return "OK"

    return app


def run_authorization(
    credentials: Credentials,
    store: DataStore,
    *,
    wait_timeout: float = OAUTH_WAIT_TIMEOUT,
    open_browser: Callable[[str], object] = webbrowser.open,
    http: Optional[requests.Session] = None,
    host: str = OAUTH_HOST,
    port: int = OAUTH_PORT,
) -> TokenResponse:
    """Run the flow end-to-end and return the stored token.

    Raises:
        NotAuthorizedError: If no successful callback arrives in time.
        OSError: If the local callback port cannot be bound.
    """

    oauth = OAuthSession(credentials=credentials, store=store, http=http)
    server: BaseWSGIServer = make_server(host, port, create_app(oauth))
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    LOGGER.info("Listening for Strava callback on %s:%s", host, port)
    try:
        auth_url = build_auth_url(credentials, oauth.expected_state)
        LOGGER.info("Opening browser for authorisation...")
        LOGGER.debug("Authorisation URL: %s", auth_url)
        open_browser(auth_url)
        if not oauth.completed.wait(timeout=wait_timeout):
            raise NotAuthorizedError("Timeout waiting for authorisation code.")
        # Let the browser receive the final response before stopping.
        time.sleep(OAUTH_SHUTDOWN_GRACE_SECONDS)
    finally:
        LOGGER.info("Shutting down local OAuth server.")
        server.shutdown()
        thread.join(timeout=5)
    if oauth.token is None:
        raise NotAuthorizedError("Authorisation completed without a token.")
    return oauth.token


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Build and parse CLI arguments."""

    parser = argparse.ArgumentParser(description="Strava OAuth helper")
    parser.add_argument(
        "--data-file",
        default=DATA_FILE,
        help="JSON file holding client credentials and tokens",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=OAUTH_WAIT_TIMEOUT,
        help="Seconds to wait for browser authorisation before exiting",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=LOG_LEVEL,
        help="Logging level",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point when executing ``python -m strava_gear_fix.oauth``."""

    args = _parse_args(argv)
    setup_logging(args.log_level)
    store = DataStore(args.data_file)
    try:
        credentials = store.load()
        run_authorization(credentials, store, wait_timeout=args.timeout)
    except (StravaGearFixError, OSError) as exc:
        LOGGER.error("Authorisation failed: %s", exc)
        return 1
    LOGGER.info("Authorisation complete; tokens saved to %s", store.path)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI helper
    raise SystemExit(main())
