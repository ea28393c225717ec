"""
Reporting over approved trips.

Read-only projection: filter, sort, aggregate distance, and flatten each
trip into an export row. The export format itself is left to the caller.
"""

import math
from typing import Iterable, List, Optional

from triplog.app.domain.trips.coercion import normalize_plate
from triplog.app.models.trip_enums import TripStatus
from triplog.app.schemas.report import ReportFilters, ReportRow, TripReport
from triplog.app.schemas.trip import Trip


def select_approved(
    trips: Iterable[Trip],
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    vehicle_plate: Optional[str] = None,
) -> List[Trip]:
    """
    Approved trips within the inclusive [start_date, end_date] range on
    `start_date`, optionally for one plate, newest first.

    Dates are zero-padded YYYY-MM-DD strings, so plain string comparison
    orders them correctly.
    """
    plate = normalize_plate(vehicle_plate)
    selected = []
    for trip in trips:
        if trip.status != TripStatus.APPROVED:
            continue
        if start_date and (not trip.start_date or trip.start_date < start_date):
            continue
        if end_date and (not trip.start_date or trip.start_date > end_date):
            continue
        if plate and normalize_plate(trip.vehicle_plate) != plate:
            continue
        selected.append(trip)
    return sorted(selected, key=lambda t: t.start_date or "", reverse=True)


def trip_distance(trip: Trip) -> float:
    """Driven distance, floored at zero. Missing or malformed readings count as zero."""
    if trip.km_initial is None or trip.km_final is None:
        return 0.0
    distance = trip.km_final - trip.km_initial
    if not math.isfinite(distance) or distance < 0:
        return 0.0
    return distance


def total_distance(trips: Iterable[Trip]) -> float:
    return sum(trip_distance(trip) for trip in trips)


def project_row(trip: Trip) -> ReportRow:
    return ReportRow(
        trip_id=trip.id,
        date=trip.start_date,
        end_date=trip.end_date,
        driver=trip.driver_name,
        plate=trip.vehicle_plate,
        origin=trip.origin,
        destination=trip.destination,
        start_time=trip.start_time,
        factory_name=trip.factory_name,
        factory_arrival_time=trip.factory_arrival_time,
        factory_departure_time=trip.factory_departure_time,
        end_time=trip.end_time,
        km_initial=trip.km_initial,
        km_final=trip.km_final,
        distance_km=trip_distance(trip),
        numero_dt=trip.numero_dt,
        valor_comissao=trip.valor_comissao,
        status=trip.status.value,
        comment=trip.admin_comment,
    )


def build_report(
    trips: Iterable[Trip],
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    vehicle_plate: Optional[str] = None,
) -> TripReport:
    """Filter approved trips and return export rows with the distance total."""
    selected = select_approved(trips, start_date, end_date, vehicle_plate)
    return TripReport(
        filters=ReportFilters(
            start_date=start_date,
            end_date=end_date,
            vehicle_plate=normalize_plate(vehicle_plate),
        ),
        rows=[project_row(trip) for trip in selected],
        trip_count=len(selected),
        total_distance_km=total_distance(selected),
    )
