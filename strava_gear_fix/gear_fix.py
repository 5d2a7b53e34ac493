"""Assign the trainer bike to newly recorded virtual rides."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import List

from .config import DEFAULT_LOOKBACK_DAYS, VIRTUAL_RIDE_SPORT_TYPE
from .models import Activity, Credentials
from .strava_api import StravaClient
from .utils import utcnow

LOGGER = logging.getLogger(__name__)


def get_unchecked_activities(
    client: StravaClient, credentials: Credentials
) -> List[Activity]:
    """Return activities newer than the watermark and advance it.

    The watermark becomes the latest ``start_date`` in the batch regardless of
    the order Strava returns them in, and is persisted before returning.
    """

    since = credentials.last_activity_date or (
        utcnow() - timedelta(days=DEFAULT_LOOKBACK_DAYS)
    )
    activities = client.list_activities_since(since, credentials)
    if not activities:
        return []
    credentials.last_activity_date = max(
        activity.start_date for activity in activities
    )
    client.store.save(credentials)
    return activities


def needs_trainer_bike(activity: Activity, trainer_bike_id: str) -> bool:
    return (
        activity.sport_type == VIRTUAL_RIDE_SPORT_TYPE
        and activity.gear_id != trainer_bike_id
    )


def set_bike_to_trainer_for_virtual_rides(
    client: StravaClient, credentials: Credentials
) -> int:
    """Check new activities and fix gear on virtual rides.

    Returns:
        Number of activities Strava confirmed as updated.
    """

    LOGGER.info("Checking for new activities")
    activities = get_unchecked_activities(client, credentials)
    if not activities:
        LOGGER.info("No new activities found.")
        return 0
    LOGGER.info(
        "Found %d new activit%s",
        len(activities),
        "y" if len(activities) == 1 else "ies",
    )

    trainer_bike_id = credentials.trainer_bike_id
    updated = 0
    for activity in activities:
        LOGGER.info('Found new activity "%s"', activity.name)
        if not needs_trainer_bike(activity, trainer_bike_id):
            continue
        LOGGER.info(
            '"%s" is a virtual ride, but bike is not trainer bike. '
            "Setting to trainer bike.",
            activity.name,
        )
        response = client.update_activity(
            activity.id, {"gear_id": trainer_bike_id}, credentials
        )
        if response.gear_id == trainer_bike_id:
            updated += 1
            LOGGER.info(
                'Successfully set bike to trainer bike for activity "%s"',
                activity.name,
            )
        else:
            LOGGER.warning(
                'Gear id on activity "%s" doesn\'t match trainer bike id "%s"',
                activity.id,
                trainer_bike_id,
            )
    return updated
