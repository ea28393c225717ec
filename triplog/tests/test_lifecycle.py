"""
Unit tests for the trip lifecycle state machine.
"""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from triplog.app.core.exceptions import (
    AuthorizationError,
    OrderingError,
    TransitionError,
    ValidationError,
)
from triplog.app.domain.trips.authorization import Actor, can_perform
from triplog.app.domain.trips.lifecycle import available_events, is_temporary_id, transition
from triplog.app.domain.trips.policy import EvidencePolicy
from triplog.app.domain.trips.validation import (
    FactoryArrivalPayload,
    FactoryDeparturePayload,
    FinishPayload,
    ReviewPayload,
    StartPayload,
)
from triplog.app.models.enums import UserRole
from triplog.app.models.trip_enums import TripEvent, TripStatus
from triplog.app.schemas.trip import Trip

NOW = datetime(2024, 5, 10, 8, 30, tzinfo=ZoneInfo("America/Sao_Paulo"))
DRIVER = Actor("motorista1", "Matheus Prux", UserRole.DRIVER)
OTHER_DRIVER = Actor("motorista2", "Ana Souza", UserRole.DRIVER)
ADMIN = Actor("revisor", "Revisor", UserRole.ADMIN)
POLICY = EvidencePolicy(factory_names=("FB ITU", "FB JUNDIAÍ"))


def apply(trip, event, payload=None, actor=DRIVER, policy=POLICY):
    return transition(trip, event, payload, actor=actor, policy=policy, now=NOW)


def started(km_initial=100.0):
    payload = StartPayload(origin="Itu", km_initial=km_initial, photo_initial="photo-1", vehicle_plate="abc1d23")
    return apply(None, TripEvent.START, payload)


def test_start_creates_trip_in_progress():
    trip = started()

    assert trip.status == TripStatus.IN_PROGRESS
    assert is_temporary_id(trip.id)
    assert trip.driver_id == "motorista1"
    assert trip.driver_name == "Matheus Prux"
    assert trip.vehicle_plate == "ABC1D23"
    assert trip.start_date == "2024-05-10"
    assert trip.start_time == "08:30"
    assert trip.km_initial == 100.0


@pytest.mark.parametrize("payload,field", [
    (StartPayload(origin="", km_initial=10, photo_initial="p"), "origin"),
    (StartPayload(origin="Itu", km_initial=None, photo_initial="p"), "kmInitial"),
    (StartPayload(origin="Itu", km_initial=-1, photo_initial="p"), "kmInitial"),
    (StartPayload(origin="Itu", km_initial=10, photo_initial=None), "photoInitial"),
])
def test_start_rejects_incomplete_payload(payload, field):
    with pytest.raises(ValidationError) as exc_info:
        apply(None, TripEvent.START, payload)
    assert exc_info.value.field == field


def test_admin_cannot_start_trip():
    payload = StartPayload(origin="Itu", km_initial=10, photo_initial="p")
    with pytest.raises(AuthorizationError):
        apply(None, TripEvent.START, payload, actor=ADMIN)


def test_factory_arrival_requires_photo_and_keeps_status():
    trip = started()

    with pytest.raises(ValidationError) as exc_info:
        apply(trip, TripEvent.ARRIVE_FACTORY, FactoryArrivalPayload(factory_name="FB ITU", photo=None))

    assert exc_info.value.field == "factoryArrivalPhoto"
    assert trip.status == TripStatus.IN_PROGRESS


def test_factory_arrival_photo_optional_when_policy_allows():
    policy = EvidencePolicy(
        photo_required={},
        factory_names=("FB ITU",),
    )
    trip = apply(
        started(), TripEvent.ARRIVE_FACTORY, FactoryArrivalPayload(factory_name="FB ITU"), policy=policy
    )
    assert trip.status == TripStatus.AT_FACTORY


def test_factory_arrival_rejects_unknown_factory():
    with pytest.raises(ValidationError) as exc_info:
        apply(started(), TripEvent.ARRIVE_FACTORY, FactoryArrivalPayload(factory_name="FB NOWHERE", photo="p"))
    assert exc_info.value.field == "factoryName"


def test_factory_round_trip():
    trip = apply(started(), TripEvent.ARRIVE_FACTORY, FactoryArrivalPayload(factory_name="fb itu", photo="p2"))
    assert trip.status == TripStatus.AT_FACTORY
    assert trip.factory_name == "FB ITU"
    assert trip.factory_arrival_time == "08:30"

    trip = apply(trip, TripEvent.DEPART_FACTORY, FactoryDeparturePayload())
    assert trip.status == TripStatus.IN_TRANSIT
    assert trip.factory_departure_time == "08:30"
    assert trip.factory_departure_photo is None


def test_finish_directly_when_factory_stop_optional():
    trip = apply(started(), TripEvent.FINISH, FinishPayload(destination="Jundiaí", km_final=150, photo_final="p3"))

    assert trip.status == TripStatus.PENDING_REVIEW
    assert trip.km_final == 150
    assert trip.end_date == "2024-05-10"


def test_finish_requires_factory_when_mandatory():
    policy = EvidencePolicy(factory_names=("FB ITU",), factory_stop_required=True)
    with pytest.raises(TransitionError):
        apply(started(), TripEvent.FINISH, FinishPayload("Jundiaí", 150, "p3"), policy=policy)


@pytest.mark.parametrize("km_final", [100.0, 99.0, 0.0])
def test_finish_rejects_non_increasing_odometer(km_final):
    trip = started(km_initial=100.0)

    with pytest.raises(OrderingError) as exc_info:
        apply(trip, TripEvent.FINISH, FinishPayload(destination="Jundiaí", km_final=km_final, photo_final="p3"))

    assert exc_info.value.error_code == "ERR_TRIP_ODOMETER"
    assert trip.status == TripStatus.IN_PROGRESS
    assert trip.km_final is None


def test_finish_rejects_nan_odometer():
    trip = started()

    with pytest.raises(ValidationError) as exc_info:
        apply(trip, TripEvent.FINISH, FinishPayload("Jundiaí", float("nan"), "p3"))

    assert exc_info.value.field == "kmFinal"
    assert trip.status == TripStatus.IN_PROGRESS


@pytest.mark.parametrize("km_initial", [float("nan"), float("inf")])
def test_start_rejects_non_finite_odometer(km_initial):
    payload = StartPayload(origin="Itu", km_initial=km_initial, photo_initial="photo-1")
    with pytest.raises(ValidationError) as exc_info:
        apply(None, TripEvent.START, payload)
    assert exc_info.value.field == "kmInitial"


def test_finish_requires_arrival_photo():
    with pytest.raises(ValidationError) as exc_info:
        apply(started(), TripEvent.FINISH, FinishPayload(destination="Jundiaí", km_final=150, photo_final=""))
    assert exc_info.value.field == "photoFinal"


def test_driver_cannot_touch_another_drivers_trip():
    with pytest.raises(AuthorizationError):
        apply(started(), TripEvent.FINISH, FinishPayload("Jundiaí", 150, "p3"), actor=OTHER_DRIVER)


def test_finish_twice_is_illegal():
    trip = apply(started(), TripEvent.FINISH, FinishPayload("Jundiaí", 150, "p3"))
    with pytest.raises(TransitionError) as exc_info:
        apply(trip, TripEvent.FINISH, FinishPayload("Jundiaí", 160, "p3"))
    assert exc_info.value.details["current_status"] == TripStatus.PENDING_REVIEW.value


def test_available_events_follow_status():
    trip = started()
    assert available_events(trip, POLICY) == [TripEvent.ARRIVE_FACTORY, TripEvent.FINISH]

    strict = EvidencePolicy(factory_names=("FB ITU",), factory_stop_required=True)
    assert available_events(trip, strict) == [TripEvent.ARRIVE_FACTORY]


def test_can_perform_matrix():
    assert can_perform(UserRole.DRIVER, TripEvent.FINISH)
    assert not can_perform(UserRole.DRIVER, TripEvent.APPROVE)
    assert can_perform("admin", TripEvent.APPROVE)
    assert not can_perform(UserRole.ADMIN, TripEvent.AMEND)
    assert can_perform(UserRole.SUPER_ADMIN, TripEvent.AMEND)
    assert not can_perform("fleet_owner", TripEvent.START)
    assert not can_perform(None, TripEvent.START)


def pending_with_readings(km_initial, km_final):
    return Trip(
        id="7",
        driver_id="motorista1",
        status=TripStatus.PENDING_REVIEW,
        km_initial=km_initial,
        km_final=km_final,
    )


def test_reject_pending_trip_with_inconsistent_readings():
    trip = pending_with_readings(200.0, 180.0)

    rejected = apply(trip, TripEvent.REJECT, ReviewPayload(comment="km inconsistente"), actor=ADMIN)

    assert rejected.status == TripStatus.REJECTED
    assert rejected.admin_comment == "km inconsistente"
    assert rejected.km_final == 180.0


def test_approve_still_checks_stored_readings():
    trip = pending_with_readings(200.0, 180.0)
    payload = ReviewPayload(numero_dt="1", valor_comissao=10)

    with pytest.raises(OrderingError):
        apply(trip, TripEvent.APPROVE, payload, actor=ADMIN)


@pytest.mark.parametrize("valor", [float("nan"), float("inf")])
def test_approve_rejects_non_finite_commission(valor):
    trip = pending_with_readings(100.0, 150.0)

    with pytest.raises(ValidationError) as exc_info:
        apply(trip, TripEvent.APPROVE, ReviewPayload(numero_dt="1", valor_comissao=valor), actor=ADMIN)

    assert exc_info.value.field == "valor_comissao"
    assert trip.status == TripStatus.PENDING_REVIEW
