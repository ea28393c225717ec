"""
Driver Trip API Endpoints.

Drivers start a trip, optionally stop at a factory, and finish it, attaching
odometer readings and photos along the way.
"""

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from triplog.app.db.session import get_db
from triplog.app.core.dependencies import actor_from_user, get_driver_trip_service, get_evidence_policy
from triplog.app.core.guards import require_driver
from triplog.app.domain.trips.policy import EvidencePolicy
from triplog.app.repositories.store import SaveOutcome
from triplog.app.schemas.trip import (
    FactoryArrivalRequest,
    FactoryDepartureRequest,
    TripActionResponse,
    TripFinishRequest,
    TripListResponse,
    TripStartRequest,
)
from triplog.app.services.audit import log_event, AuditAction
from triplog.app.services.notification_service import notify_trip_started
from triplog.app.services.trip_presenter import to_action_response, to_list_response
from triplog.app.services.trip_service import DriverTripService

router = APIRouter(prefix="/driver/trips", tags=["Driver - Trips"])


async def _audit(db: AsyncSession, action: str, current_user: dict, outcome: SaveOutcome, **metadata):
    await log_event(
        db=db,
        action=action,
        actor_id=current_user["user_id"],
        actor_name=current_user.get("name"),
        trip_id=outcome.trip.id,
        metadata={"status": outcome.trip.status.value, "persisted": outcome.persisted, **metadata}
    )


@router.get("", response_model=TripListResponse)
async def list_my_trips(
    current_user: dict = Depends(require_driver),
    service: DriverTripService = Depends(get_driver_trip_service),
    policy: EvidencePolicy = Depends(get_evidence_policy)
):
    """The driver's own trips, newest first."""
    actor = actor_from_user(current_user)
    trips = await service.list_for_driver(actor)
    return to_list_response(trips, policy, actor)


@router.post("", response_model=TripActionResponse, status_code=status.HTTP_201_CREATED)
async def start_trip(
    request: TripStartRequest,
    current_user: dict = Depends(require_driver),
    service: DriverTripService = Depends(get_driver_trip_service),
    policy: EvidencePolicy = Depends(get_evidence_policy),
    db: AsyncSession = Depends(get_db)
):
    """
    Start a trip (Driver only).

    Requires origin, initial odometer and departure photo. Administrators
    are notified.
    """
    actor = actor_from_user(current_user)
    outcome = await service.start(request, actor)

    await notify_trip_started(db, outcome.trip)
    await _audit(db, AuditAction.TRIP_STARTED, current_user, outcome, km_initial=outcome.trip.km_initial)

    return to_action_response(outcome, policy, actor)


@router.post("/{trip_id}/factory-arrival", response_model=TripActionResponse)
async def arrive_at_factory(
    request: FactoryArrivalRequest,
    trip_id: str = Path(..., description="Trip ID"),
    current_user: dict = Depends(require_driver),
    service: DriverTripService = Depends(get_driver_trip_service),
    policy: EvidencePolicy = Depends(get_evidence_policy),
    db: AsyncSession = Depends(get_db)
):
    """Confirm arrival at a known factory."""
    actor = actor_from_user(current_user)
    outcome = await service.arrive_factory(trip_id, request, actor)
    await _audit(db, AuditAction.FACTORY_ARRIVED, current_user, outcome, factory=outcome.trip.factory_name)
    return to_action_response(outcome, policy, actor)


@router.post("/{trip_id}/factory-departure", response_model=TripActionResponse)
async def depart_from_factory(
    request: FactoryDepartureRequest,
    trip_id: str = Path(..., description="Trip ID"),
    current_user: dict = Depends(require_driver),
    service: DriverTripService = Depends(get_driver_trip_service),
    policy: EvidencePolicy = Depends(get_evidence_policy),
    db: AsyncSession = Depends(get_db)
):
    """Confirm departure from the factory."""
    actor = actor_from_user(current_user)
    outcome = await service.depart_factory(trip_id, request, actor)
    await _audit(db, AuditAction.FACTORY_DEPARTED, current_user, outcome)
    return to_action_response(outcome, policy, actor)


@router.post("/{trip_id}/finish", response_model=TripActionResponse)
async def finish_trip(
    request: TripFinishRequest,
    trip_id: str = Path(..., description="Trip ID"),
    current_user: dict = Depends(require_driver),
    service: DriverTripService = Depends(get_driver_trip_service),
    policy: EvidencePolicy = Depends(get_evidence_policy),
    db: AsyncSession = Depends(get_db)
):
    """
    Finish a trip and send it for review.

    The final odometer must exceed the initial one.
    """
    actor = actor_from_user(current_user)
    outcome = await service.finish(trip_id, request, actor)
    await _audit(db, AuditAction.TRIP_FINISHED, current_user, outcome, km_final=outcome.trip.km_final)
    return to_action_response(outcome, policy, actor)
