"""Global pytest fixtures & helpers.

Adds project root to path and provides a fake HTTP session, a temporary data
store and credential factories shared by the test modules.
"""
from __future__ import annotations

import json
import os
import sys
from datetime import timedelta

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from strava_gear_fix.data_store import DataStore
from strava_gear_fix.models import Credentials
from strava_gear_fix.utils import utcnow


class FakeResp:
    """Minimal fake response matching needed parts of requests.Response."""

    def __init__(self, status_code=200, data=None, text=None):
        self.status_code = status_code
        self._data = data
        self._text = text
        self.url = "https://fake.local"

    def json(self):
        if isinstance(self._data, Exception):  # force JSON error
            raise self._data
        return self._data

    @property
    def text(self):
        if self._text is not None:
            return self._text
        try:
            return json.dumps(self._data)
        except Exception:
            return str(self._data)


class FakeSession:
    """Records calls and replays queued responses (or raises queued errors)."""

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls = []

    def queue(self, *responses):
        self.responses.extend(responses)

    def _next(self):
        if not self.responses:
            raise AssertionError("unexpected HTTP call")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def post(self, url, data=None, timeout=None, **kwargs):
        self.calls.append({"method": "POST", "url": url, "data": data, **kwargs})
        return self._next()

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        return self._next()


def token_payload(access="A2", refresh="R2", expires_in=21600):
    expires_at = int((utcnow() + timedelta(seconds=expires_in)).timestamp())
    return {
        "token_type": "Bearer",
        "access_token": access,
        "refresh_token": refresh,
        "expires_at": expires_at,
        "expires_in": expires_in,
    }


def activity_payload(activity_id=1, **overrides):
    data = {
        "id": activity_id,
        "name": f"Ride {activity_id}",
        "type": "VirtualRide",
        "trainer": True,
        "gear_id": "b_road",
        "sport_type": "VirtualRide",
        "start_date": "2024-01-05T09:00:00Z",
    }
    data.update(overrides)
    return data


def make_credentials(**overrides) -> Credentials:
    values = dict(
        client_id="cid",
        client_secret="csec",
        trainer_bike_id="b_trainer",
        refresh_token="R1",
        access_token="A1",
        token_expires_at=utcnow() + timedelta(hours=6),
    )
    values.update(overrides)
    return Credentials(**values)


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def credentials():
    return make_credentials()


@pytest.fixture
def store(tmp_path):
    return DataStore(tmp_path / "data.json")


@pytest.fixture
def save_counter(store, monkeypatch):
    """Count DataStore.save calls while still writing to disk."""

    counter = {"count": 0}
    original = store.save

    def counting_save(credentials):
        counter["count"] += 1
        original(credentials)

    monkeypatch.setattr(store, "save", counting_save)
    return counter
