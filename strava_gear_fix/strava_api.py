"""Strava API facade.

Public surface:
- StravaClient(store, session=None)
- StravaClient.ensure_token(credentials)
- StravaClient.list_activities_since(since, credentials)
- StravaClient.update_activity(activity_id, fields, credentials)
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Mapping

import requests

from .auth import ensure_valid_token
from .data_store import DataStore
from .models import Activity, Credentials
from .strava_client.activities import ActivitiesAPI
from .strava_client.session import get_default_session


class StravaClient:
    """Binds an HTTP session and a data store to the Strava calls."""

    def __init__(
        self,
        store: DataStore,
        *,
        session: requests.Session | None = None,
    ) -> None:
        self.store = store
        self._session = session or get_default_session()
        self._activities = ActivitiesAPI(store, session=self._session)

    def ensure_token(self, credentials: Credentials) -> str:
        return ensure_valid_token(credentials, self.store, session=self._session)

    def list_activities_since(
        self, since: datetime, credentials: Credentials
    ) -> List[Activity]:
        return self._activities.list_activities_since(since, credentials)

    def update_activity(
        self,
        activity_id: int,
        fields: Mapping[str, str],
        credentials: Credentials,
    ) -> Activity:
        return self._activities.update_activity(activity_id, fields, credentials)
