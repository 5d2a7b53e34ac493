"""Shared HTTP session configuration."""

from strava_gear_fix.config import USER_AGENT
from strava_gear_fix.strava_client import session as session_module


def test_default_session_is_created_once(monkeypatch):
    monkeypatch.setattr(session_module, "_default_session", None)

    first = session_module.get_default_session()

    assert session_module.get_default_session() is first


def test_session_identifies_itself_and_never_retries():
    http = session_module.create_default_session()

    assert http.headers["User-Agent"] == USER_AGENT
    assert http.headers["Accept"] == "application/json"
    adapter = http.get_adapter("https://www.strava.com/api/v3/athlete")
    assert adapter.max_retries.total == 0
