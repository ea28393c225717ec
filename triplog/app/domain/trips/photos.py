"""
Display helpers for photo references.

Evidence photos are stored as opaque strings (inline data URIs or links).
Google Drive sharing links cannot be embedded directly, so they are rewritten
to a direct-fetch URL for display. Stored references are never modified.
"""

import re
from typing import Dict, Optional

from triplog.app.schemas.trip import Trip


_DRIVE_FILE = re.compile(r"drive\.google\.com/file/d/([\w-]+)")
_DRIVE_QUERY = re.compile(r"drive\.google\.com/(?:open|uc)\?(?:[^#]*&)?id=([\w-]+)")

DRIVE_DIRECT_URL = "https://drive.google.com/uc?export=view&id={file_id}"

PHOTO_FIELDS = (
    "photo_initial",
    "factory_arrival_photo",
    "factory_departure_photo",
    "photo_final",
)


def to_display_url(reference: Optional[str]) -> Optional[str]:
    """Rewrite Drive sharing links; anything else is returned unchanged."""
    if not reference:
        return reference
    for pattern in (_DRIVE_FILE, _DRIVE_QUERY):
        match = pattern.search(reference)
        if match:
            return DRIVE_DIRECT_URL.format(file_id=match.group(1))
    return reference


def display_urls(trip: Trip) -> Dict[str, str]:
    """Display URL for every photo present on the trip, keyed by wire name."""
    urls = {}
    for field_name in PHOTO_FIELDS:
        reference = getattr(trip, field_name)
        if reference:
            alias = Trip.model_fields[field_name].alias or field_name
            urls[alias] = to_display_url(reference)
    return urls
