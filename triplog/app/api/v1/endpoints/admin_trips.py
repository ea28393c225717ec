"""
Admin Trip Review API Endpoints.

Administrators list trips and decide on finished ones. Only super
administrators may amend the audit fields of an approved trip.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from triplog.app.db.session import get_db
from triplog.app.core.dependencies import (
    actor_from_user,
    get_approval_service,
    get_evidence_policy,
    get_trip_repository,
    get_trip_store,
)
from triplog.app.core.guards import require_admin
from triplog.app.domain.trips.approval import ApprovalService
from triplog.app.domain.trips.policy import EvidencePolicy
from triplog.app.models.trip_enums import TripStatus
from triplog.app.repositories.base import TripRepository
from triplog.app.repositories.store import TripStore
from triplog.app.schemas.trip import TripActionResponse, TripListResponse, TripResponse
from triplog.app.schemas.trip_review import TripAmendRequest, TripDecisionRequest
from triplog.app.services.audit import log_event, AuditAction
from triplog.app.services.notification_service import notify_trip_decided
from triplog.app.services.trip_presenter import to_action_response, to_list_response, to_trip_response

router = APIRouter(prefix="/admin/trips", tags=["Admin - Trip Review"])


@router.get("/pending", response_model=TripListResponse)
async def list_pending_trips(
    current_user: dict = Depends(require_admin),
    repository: TripRepository = Depends(get_trip_repository),
    store: TripStore = Depends(get_trip_store),
    policy: EvidencePolicy = Depends(get_evidence_policy)
):
    """Trips awaiting review, newest first."""
    trips = await store.refresh(repository)
    pending = [trip for trip in trips if trip.status == TripStatus.PENDING_REVIEW]
    return to_list_response(pending, policy, actor_from_user(current_user))


@router.get("", response_model=TripListResponse)
async def list_trips(
    status: Optional[TripStatus] = Query(None, description="Filter by status"),
    current_user: dict = Depends(require_admin),
    repository: TripRepository = Depends(get_trip_repository),
    store: TripStore = Depends(get_trip_store),
    policy: EvidencePolicy = Depends(get_evidence_policy)
):
    """Every trip, optionally filtered by status."""
    trips = await store.refresh(repository)
    if status is not None:
        trips = [trip for trip in trips if trip.status == status]
    return to_list_response(trips, policy, actor_from_user(current_user))


@router.get("/{trip_id}", response_model=TripResponse)
async def get_trip(
    trip_id: str = Path(..., description="Trip ID"),
    current_user: dict = Depends(require_admin),
    repository: TripRepository = Depends(get_trip_repository),
    store: TripStore = Depends(get_trip_store),
    policy: EvidencePolicy = Depends(get_evidence_policy)
):
    trip = await store.get(trip_id, repository)
    return to_trip_response(trip, policy, actor_from_user(current_user))


@router.post("/{trip_id}/decision", response_model=TripActionResponse)
async def decide_trip(
    request: TripDecisionRequest,
    trip_id: str = Path(..., description="Trip ID"),
    current_user: dict = Depends(require_admin),
    service: ApprovalService = Depends(get_approval_service),
    policy: EvidencePolicy = Depends(get_evidence_policy),
    db: AsyncSession = Depends(get_db)
):
    """
    Approve or reject a pending trip.

    Approval requires the DT number and the commission value. The driver
    is notified either way.
    """
    actor = actor_from_user(current_user)
    outcome = await service.decide(
        trip_id,
        request.decision,
        actor,
        comment=request.comment,
        numero_dt=request.numero_dt,
        valor_comissao=request.valor_comissao,
    )
    trip = outcome.trip

    await notify_trip_decided(db, trip)
    await log_event(
        db=db,
        action=AuditAction.TRIP_APPROVED if trip.status == TripStatus.APPROVED else AuditAction.TRIP_REJECTED,
        actor_id=actor.id,
        actor_name=actor.name,
        trip_id=trip.id,
        metadata={
            "numero_dt": trip.numero_dt,
            "valor_comissao": trip.valor_comissao,
            "comment": trip.admin_comment,
            "persisted": outcome.persisted,
        }
    )

    return to_action_response(outcome, policy, actor)


@router.patch("/{trip_id}/audit-fields", response_model=TripActionResponse)
async def amend_trip(
    request: TripAmendRequest,
    trip_id: str = Path(..., description="Trip ID"),
    current_user: dict = Depends(require_admin),
    service: ApprovalService = Depends(get_approval_service),
    policy: EvidencePolicy = Depends(get_evidence_policy),
    db: AsyncSession = Depends(get_db)
):
    """Correct the DT number and commission of an approved trip (super admin only)."""
    actor = actor_from_user(current_user)
    outcome = await service.amend(
        trip_id,
        actor,
        numero_dt=request.numero_dt,
        valor_comissao=request.valor_comissao,
        comment=request.comment,
    )

    await log_event(
        db=db,
        action=AuditAction.TRIP_AMENDED,
        actor_id=actor.id,
        actor_name=actor.name,
        trip_id=outcome.trip.id,
        metadata={
            "numero_dt": outcome.trip.numero_dt,
            "valor_comissao": outcome.trip.valor_comissao,
            "persisted": outcome.persisted,
        }
    )

    return to_action_response(outcome, policy, actor)
