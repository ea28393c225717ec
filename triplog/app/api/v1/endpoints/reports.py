"""
Report API Endpoints.

Approved trips filtered by date range and vehicle, with total distance.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from triplog.app.core.dependencies import get_trip_repository, get_trip_store
from triplog.app.core.guards import require_admin
from triplog.app.domain.trips.coercion import parse_date_filter
from triplog.app.domain.trips.reporting import build_report
from triplog.app.repositories.base import TripRepository
from triplog.app.repositories.store import TripStore
from triplog.app.schemas.report import TripReport

router = APIRouter(prefix="/admin/reports", tags=["Admin - Reports"])


@router.get("/trips", response_model=TripReport)
async def trip_report(
    start_date: Optional[str] = Query(None, description="First departure date (YYYY-MM-DD), inclusive"),
    end_date: Optional[str] = Query(None, description="Last departure date (YYYY-MM-DD), inclusive"),
    vehicle_plate: Optional[str] = Query(None, description="Exact vehicle plate"),
    current_user: dict = Depends(require_admin),
    repository: TripRepository = Depends(get_trip_repository),
    store: TripStore = Depends(get_trip_store)
):
    trips = await store.refresh(repository)
    return build_report(
        trips,
        start_date=parse_date_filter(start_date, "start_date"),
        end_date=parse_date_filter(end_date, "end_date"),
        vehicle_plate=vehicle_plate,
    )
