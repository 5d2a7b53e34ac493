"""Strava HTTP client components (session, response handling, request executor).

Only the modules without a dependency on :mod:`strava_gear_fix.auth` are
re-exported here; import ``request`` and ``activities`` by full path.
"""

from .response_handling import classify_response_status, extract_error  # noqa: F401
from .session import create_default_session, get_default_session  # noqa: F401
