"""Shared Strava client helpers (auth headers, URL resolution)."""

from __future__ import annotations

from typing import Dict
from urllib.parse import urljoin, urlsplit

from ..config import STRAVA_BASE_URL


def auth_headers(access_token: str) -> Dict[str, str]:
    """Return bearer auth headers for ``access_token``."""

    return {"Authorization": f"Bearer {access_token}"}


def resolve_url(path: str, base_url: str = STRAVA_BASE_URL) -> str:
    """Resolve a relative API path such as ``activities/42`` against the base URL.

    Raises:
        ValueError: If ``path`` is empty, absolute or starts with ``/``; API
            paths are fixed in code so this is a programming error.
    """

    parts = urlsplit(path)
    if not path or parts.scheme or parts.netloc or path.startswith("/"):
        raise ValueError(f'failed to create URL from path "{path}"')
    return urljoin(base_url, path)
