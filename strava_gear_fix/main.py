"""Command-line entry point for the gear fix job.

Loads the data file, runs :func:`~.gear_fix.set_bike_to_trainer_for_virtual_rides`
and maps failures to a non-zero exit code. Run with ``strava-gear-fix``,
``python -m strava_gear_fix`` or ``python run.py``.
"""

from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from .config import DATA_FILE, LOG_LEVEL, LOG_LEVELS
from .data_store import DataStore
from .errors import NotAuthorizedError, StravaGearFixError
from .gear_fix import set_bike_to_trainer_for_virtual_rides
from .strava_api import StravaClient
from .utils import setup_logging


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Set the trainer bike as gear on new Strava virtual rides"
    )
    parser.add_argument(
        "--data-file",
        default=DATA_FILE,
        help="JSON file holding client credentials, tokens and the watermark",
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
    args = _parse_args(argv)
    setup_logging(args.log_level)
    store = DataStore(args.data_file)
    try:
        credentials = store.load()
        set_bike_to_trainer_for_virtual_rides(StravaClient(store), credentials)
    except NotAuthorizedError as exc:
        logging.error("%s Run strava-gear-fix-auth first.", exc)
        return 1
    except StravaGearFixError as exc:
        logging.error("Run failed: %s", exc)
        return 1
    return 0
