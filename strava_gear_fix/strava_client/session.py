"""Shared ``requests`` session used for the token endpoint and API calls.

Every call is a single attempt: the adapter never retries connection errors or
error statuses, and failures surface to the caller as classified errors.
"""

from __future__ import annotations

from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..config import HTTP_POOL_CONNECTIONS, HTTP_POOL_MAXSIZE, USER_AGENT

__all__ = ["create_default_session", "get_default_session"]

_default_session: Optional[requests.Session] = None


def _single_attempt_adapter() -> HTTPAdapter:
    return HTTPAdapter(
        pool_connections=HTTP_POOL_CONNECTIONS,
        pool_maxsize=HTTP_POOL_MAXSIZE,
        max_retries=Retry(total=0, raise_on_status=False),
    )


def create_default_session() -> requests.Session:
    """Build a session that sends JSON-accepting requests without retries."""

    session = requests.Session()
    adapter = _single_attempt_adapter()
    for prefix in ("https://", "http://"):
        session.mount(prefix, adapter)
    session.headers.update({"Accept": "application/json", "User-Agent": USER_AGENT})
    return session


def get_default_session() -> requests.Session:
    """Return the process-wide session, creating it on first use."""

    global _default_session
    if _default_session is None:
        _default_session = create_default_session()
    return _default_session
