"""
Wire codec for trip records.

Spreadsheet rows come back loosely typed: numbers as strings, dates as
timestamps, empty rows, legacy column names. Rows are normalized here so the
rest of the system only ever sees typed `Trip` values.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError as PydanticValidationError

from triplog.app.core.exceptions import ValidationError
from triplog.app.domain.trips.coercion import (
    clean_text,
    normalize_date,
    normalize_numero_dt,
    normalize_plate,
    parse_number,
)
from triplog.app.models.trip_enums import TripStatus
from triplog.app.schemas.trip import Trip

logger = logging.getLogger(__name__)

NUMERIC_FIELDS = ("kmInitial", "kmFinal", "valor_comissao")
DATE_FIELDS = ("startDate", "endDate")
# Older sheets stored the departure date under "date"
LEGACY_ALIASES = {"date": "startDate"}


def encode_trip(trip: Trip) -> Dict[str, Any]:
    """Trip as a JSON-ready dict with wire names; numbers stay numbers."""
    return trip.model_dump(by_alias=True, mode="json")


def decode_trip_row(row: Any) -> Optional[Trip]:
    """
    Build a Trip from one backend row.

    Returns None for rows that cannot be a trip (empty, no id, no driver,
    unknown status). Malformed numbers are dropped with a warning rather
    than failing the whole load.
    """
    if not isinstance(row, dict) or not row.get("id"):
        return None

    data = dict(row)
    for legacy, current in LEGACY_ALIASES.items():
        if legacy in data and not data.get(current):
            data[current] = data.pop(legacy)

    for key, value in data.items():
        if value == "":
            data[key] = None
        elif isinstance(value, (int, float)) and not isinstance(value, bool) and key not in NUMERIC_FIELDS:
            data[key] = str(int(value)) if float(value).is_integer() else str(value)

    trip_id = data["id"]
    if data.get("driverId") is None:
        logger.warning("Skipping trip row %s without driverId", trip_id)
        return None

    for field in NUMERIC_FIELDS:
        try:
            data[field] = parse_number(data.get(field), field)
        except ValidationError:
            logger.warning("Trip %s has non-numeric %s=%r, ignoring it", trip_id, field, data.get(field))
            data[field] = None

    for field in DATE_FIELDS:
        data[field] = normalize_date(data.get(field))

    try:
        data["status"] = TripStatus(str(data.get("status") or "").strip())
    except ValueError:
        logger.warning("Skipping trip row %s with unknown status %r", trip_id, data.get("status"))
        return None

    data["numero_dt"] = normalize_numero_dt(data.get("numero_dt")) or None
    data["vehiclePlate"] = normalize_plate(data.get("vehiclePlate"))
    data["driverName"] = clean_text(data.get("driverName")) or ""

    known = {field.alias or name for name, field in Trip.model_fields.items()}
    try:
        return Trip.model_validate({k: v for k, v in data.items() if k in known})
    except PydanticValidationError as exc:
        logger.warning("Skipping malformed trip row %s: %s", trip_id, exc)
        return None


def decode_trip_rows(rows: Iterable[Any]) -> List[Trip]:
    """Decode every row, dropping null or empty entries."""
    trips = []
    for row in rows:
        trip = decode_trip_row(row)
        if trip is not None:
            trips.append(trip)
    return trips
