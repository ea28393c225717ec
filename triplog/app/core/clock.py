"""
Server clock in the deployment's timezone.

Waypoint dates and times are recorded as local wall-clock strings.
"""

from datetime import datetime
from zoneinfo import ZoneInfo

from triplog.app.core.config import settings


def local_now() -> datetime:
    return datetime.now(ZoneInfo(settings.timezone))
