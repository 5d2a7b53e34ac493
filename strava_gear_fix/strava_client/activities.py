"""Activity list and update calls."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, List, Mapping

import requests

from ..data_store import DataStore
from ..errors import DecodeError
from ..models import Activity, Credentials
from ..utils import to_utc_aware
from .request import StravaRequest, execute
from .session import get_default_session

LOGGER = logging.getLogger(__name__)


def decode_activity_list(data: Any) -> List[Activity]:
    if not isinstance(data, list):
        raise DecodeError(f"Expected a list of activities, got {type(data).__name__}")
    return [Activity.from_dict(item) for item in data]


class ActivitiesAPI:
    def __init__(
        self,
        store: DataStore,
        *,
        session: requests.Session | None = None,
    ) -> None:
        self._store = store
        self._session = session or get_default_session()

    def list_activities_since(
        self, since: datetime, credentials: Credentials
    ) -> List[Activity]:
        """Fetch activities that started after ``since``, in API order."""

        after_ts = int(to_utc_aware(since).timestamp())
        request = StravaRequest(
            "GET", "athlete/activities", params={"after": str(after_ts)}
        )
        activities = execute(
            request, credentials, self._store, decode_activity_list, session=self._session
        )
        LOGGER.debug("Fetched %d activities after=%s", len(activities), after_ts)
        return activities

    def update_activity(
        self,
        activity_id: int,
        fields: Mapping[str, str],
        credentials: Credentials,
    ) -> Activity:
        """PUT ``fields`` onto an activity and return Strava's resulting copy.

        Strava may silently ignore unknown or invalid values, so callers should
        compare the returned activity with what they asked for.
        """

        request = StravaRequest("PUT", f"activities/{activity_id}", body=dict(fields))
        return execute(
            request, credentials, self._store, Activity.from_dict, session=self._session
        )
