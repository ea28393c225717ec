"""
Trip lifecycle state machine.

    Em Andamento -> [Na Fábrica -> Em Trânsito] -> Pendente -> Aprovado | Rejeitado

The factory stop is optional unless the evidence policy makes it mandatory.
`transition` is pure: it returns a new Trip value and never mutates its input.
Waypoint timestamps come from `now`, the server clock at confirmation time.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, FrozenSet, List, Optional

from triplog.app.core.exceptions import AuthorizationError, TransitionError
from triplog.app.domain.trips.authorization import Actor, DRIVER_EVENTS, can_perform
from triplog.app.domain.trips.coercion import clean_text, normalize_plate
from triplog.app.domain.trips.policy import EvidencePolicy
from triplog.app.domain.trips.validation import (
    FactoryArrivalPayload,
    FactoryDeparturePayload,
    FinishPayload,
    ReviewPayload,
    StartPayload,
    ensure_record_invariants,
    validate_audit_fields,
    validate_factory_arrival,
    validate_factory_departure,
    validate_finish,
    validate_start,
)
from triplog.app.models.trip_enums import TripEvent, TripStatus
from triplog.app.schemas.trip import Trip


TEMP_ID_PREFIX = "tmp-"


@dataclass(frozen=True)
class Transition:
    sources: FrozenSet[Optional[TripStatus]]
    target: TripStatus


TRANSITIONS: Dict[TripEvent, Transition] = {
    TripEvent.START: Transition(frozenset({None}), TripStatus.IN_PROGRESS),
    TripEvent.ARRIVE_FACTORY: Transition(
        frozenset({TripStatus.IN_PROGRESS}), TripStatus.AT_FACTORY
    ),
    TripEvent.DEPART_FACTORY: Transition(
        frozenset({TripStatus.AT_FACTORY}), TripStatus.IN_TRANSIT
    ),
    TripEvent.FINISH: Transition(
        frozenset({TripStatus.IN_PROGRESS, TripStatus.IN_TRANSIT}), TripStatus.PENDING_REVIEW
    ),
    TripEvent.APPROVE: Transition(
        frozenset({TripStatus.PENDING_REVIEW}), TripStatus.APPROVED
    ),
    TripEvent.REJECT: Transition(
        frozenset({TripStatus.PENDING_REVIEW}), TripStatus.REJECTED
    ),
    TripEvent.AMEND: Transition(
        frozenset({TripStatus.APPROVED}), TripStatus.APPROVED
    ),
}


def new_temporary_id() -> str:
    """Client-side id used until the persistence backend assigns one."""
    return f"{TEMP_ID_PREFIX}{uuid.uuid4().hex}"


def is_temporary_id(trip_id: str) -> bool:
    return trip_id.startswith(TEMP_ID_PREFIX)


def allowed_sources(event: TripEvent, policy: EvidencePolicy) -> FrozenSet[Optional[TripStatus]]:
    sources = TRANSITIONS[event].sources
    if event == TripEvent.FINISH and policy.factory_stop_required:
        return frozenset({TripStatus.IN_TRANSIT})
    return sources


def next_status(
    current: Optional[TripStatus],
    event: TripEvent,
    policy: EvidencePolicy
) -> TripStatus:
    """
    Resolve the status reached by `event` from `current`.

    Raises:
        TransitionError: if the event is not legal from the current status
    """
    if current not in allowed_sources(event, policy):
        if current is None:
            raise TransitionError(f"Cannot '{event.value}' a trip that does not exist")
        raise TransitionError(
            f"Cannot '{event.value}' a trip with status '{current.value}'",
            current_status=current.value
        )
    return TRANSITIONS[event].target


def available_events(trip: Trip, policy: EvidencePolicy) -> List[TripEvent]:
    """Events that are legal from the trip's current status."""
    return [
        event for event in TRANSITIONS
        if event != TripEvent.START and trip.status in allowed_sources(event, policy)
    ]


def _date(now: datetime) -> str:
    return now.strftime("%Y-%m-%d")


def _time(now: datetime) -> str:
    return now.strftime("%H:%M")


def _start(actor: Actor, payload: StartPayload, policy: EvidencePolicy, now: datetime) -> Trip:
    validate_start(payload, policy)
    return Trip(
        id=new_temporary_id(),
        driver_id=actor.id,
        driver_name=actor.name,
        vehicle_plate=normalize_plate(payload.vehicle_plate),
        start_date=_date(now),
        start_time=_time(now),
        origin=clean_text(payload.origin),
        km_initial=payload.km_initial,
        photo_initial=payload.photo_initial,
        status=TripStatus.IN_PROGRESS,
        created_at=now.isoformat(timespec="seconds"),
    )


def _arrive_factory(trip: Trip, payload: FactoryArrivalPayload, policy, now) -> Dict[str, Any]:
    factory = validate_factory_arrival(payload, policy)
    return {
        "factory_name": factory,
        "factory_arrival_time": _time(now),
        "factory_arrival_photo": payload.photo,
    }


def _depart_factory(trip: Trip, payload: Optional[FactoryDeparturePayload], policy, now) -> Dict[str, Any]:
    payload = payload or FactoryDeparturePayload()
    validate_factory_departure(payload, policy)
    updates = {"factory_departure_time": _time(now)}
    if payload.photo:
        updates["factory_departure_photo"] = payload.photo
    return updates


def _finish(trip: Trip, payload: FinishPayload, policy, now) -> Dict[str, Any]:
    validate_finish(trip, payload, policy)
    return {
        "destination": clean_text(payload.destination),
        "km_final": payload.km_final,
        "photo_final": payload.photo_final,
        "end_date": _date(now),
        "end_time": _time(now),
    }


def _approve(trip: Trip, payload: ReviewPayload, policy, now) -> Dict[str, Any]:
    fields = validate_audit_fields(payload.numero_dt, payload.valor_comissao)
    return {
        "numero_dt": fields.numero_dt,
        "valor_comissao": fields.valor_comissao,
        "admin_comment": clean_text(payload.comment),
    }


def _reject(trip: Trip, payload: Optional[ReviewPayload], policy, now) -> Dict[str, Any]:
    payload = payload or ReviewPayload()
    return {"admin_comment": clean_text(payload.comment)}


def _amend(trip: Trip, payload: ReviewPayload, policy, now) -> Dict[str, Any]:
    fields = validate_audit_fields(payload.numero_dt, payload.valor_comissao)
    updates = {
        "numero_dt": fields.numero_dt,
        "valor_comissao": fields.valor_comissao,
    }
    if payload.comment is not None:
        updates["admin_comment"] = clean_text(payload.comment)
    return updates


_HANDLERS: Dict[TripEvent, Callable[..., Dict[str, Any]]] = {
    TripEvent.ARRIVE_FACTORY: _arrive_factory,
    TripEvent.DEPART_FACTORY: _depart_factory,
    TripEvent.FINISH: _finish,
    TripEvent.APPROVE: _approve,
    TripEvent.REJECT: _reject,
    TripEvent.AMEND: _amend,
}


def transition(
    trip: Optional[Trip],
    event: TripEvent,
    payload: Any = None,
    *,
    actor: Actor,
    policy: EvidencePolicy,
    now: datetime,
) -> Trip:
    """
    Apply `event` to `trip` and return the resulting trip.

    Order of checks: role permission, trip ownership (driver events),
    legal source status, then the event's own validation. Any failure
    raises and leaves the caller's trip untouched.

    Args:
        trip: Current trip, or None when starting a new one
        event: Lifecycle event
        payload: Event payload (StartPayload, FinishPayload, ReviewPayload...)
        actor: User performing the event
        policy: Evidence policy of the deployment
        now: Confirmation time, used for every waypoint timestamp

    Raises:
        AuthorizationError, TransitionError, ValidationError, OrderingError
    """
    if not can_perform(actor.role, event):
        raise AuthorizationError(
            f"Role '{actor.role.value}' cannot perform '{event.value}'",
            details={"event": event.value}
        )
    if trip is not None and event in DRIVER_EVENTS and trip.driver_id != actor.id:
        raise AuthorizationError("This trip is not assigned to you")

    target = next_status(trip.status if trip else None, event, policy)

    if event == TripEvent.START:
        result = _start(actor, payload, policy, now)
    else:
        updates = _HANDLERS[event](trip, payload, policy, now)
        updates["status"] = target
        result = trip.model_copy(update=updates)

    # Reject has no field requirements; stored readings stay unchecked.
    if event != TripEvent.REJECT:
        ensure_record_invariants(result)
    return result
