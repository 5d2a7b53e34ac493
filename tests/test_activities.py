from datetime import datetime, timezone

import pytest

from strava_gear_fix.errors import DecodeError
from strava_gear_fix.models import Activity
from strava_gear_fix.strava_api import StravaClient

from conftest import FakeResp, FakeSession, activity_payload


def test_list_activities_since_sends_unix_after(credentials, store):
    since = datetime(2024, 1, 1, tzinfo=timezone.utc)
    session = FakeSession(
        [FakeResp(200, data=[activity_payload(2), activity_payload(1)])]
    )
    client = StravaClient(store, session=session)

    activities = client.list_activities_since(since, credentials)

    assert [a.id for a in activities] == [2, 1]
    call = session.calls[0]
    assert call["method"] == "GET"
    assert call["url"].endswith("/api/v3/athlete/activities")
    assert call["params"] == {"after": str(int(since.timestamp()))}


def test_list_activities_naive_since_is_treated_as_utc(credentials, store):
    session = FakeSession([FakeResp(200, data=[])])
    client = StravaClient(store, session=session)

    client.list_activities_since(datetime(2024, 1, 1), credentials)

    assert session.calls[0]["params"] == {"after": "1704067200"}


def test_list_activities_rejects_non_list_body(credentials, store):
    session = FakeSession([FakeResp(200, data={"message": "oops"})])
    client = StravaClient(store, session=session)

    with pytest.raises(DecodeError):
        client.list_activities_since(datetime(2024, 1, 1), credentials)


def test_update_activity_puts_fields_and_returns_server_copy(credentials, store):
    returned = activity_payload(99, gear_id="b_trainer")
    session = FakeSession([FakeResp(200, data=returned)])
    client = StravaClient(store, session=session)

    activity = client.update_activity(99, {"gear_id": "b_trainer"}, credentials)

    assert activity.id == 99
    assert activity.gear_id == "b_trainer"
    call = session.calls[0]
    assert call["method"] == "PUT"
    assert call["url"].endswith("/api/v3/activities/99")
    assert call["json"] == {"gear_id": "b_trainer"}


def test_ensure_token_delegates_to_lifecycle(credentials, store):
    client = StravaClient(store, session=FakeSession())

    assert client.ensure_token(credentials) == "A1"


def test_activity_from_dict_parses_fields():
    activity = Activity.from_dict(activity_payload(5, gear_id=None, trainer=False))

    assert activity.id == 5
    assert activity.type == "VirtualRide"
    assert activity.trainer is False
    assert activity.gear_id is None
    assert activity.start_date == datetime(2024, 1, 5, 9, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("field", ["id", "name", "type", "trainer", "gear_id", "sport_type", "start_date"])
def test_activity_from_dict_requires_every_field(field):
    payload = activity_payload(1)
    del payload[field]

    with pytest.raises(DecodeError, match=field):
        Activity.from_dict(payload)


def test_activity_from_dict_rejects_bad_timestamp():
    with pytest.raises(DecodeError):
        Activity.from_dict(activity_payload(1, start_date="not a date"))
