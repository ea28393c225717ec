"""
Per-transition validation rules.

All checks are pure: they inspect a payload (and, for finish, the stored
trip) and raise `ValidationError` with a readable reason. Nothing here
mutates a trip.
"""

import math
from dataclasses import dataclass
from typing import Optional

from triplog.app.core.exceptions import OrderingError, ValidationError
from triplog.app.domain.trips.coercion import normalize_numero_dt
from triplog.app.domain.trips.policy import EvidencePolicy
from triplog.app.models.trip_enums import TripStatus, Waypoint
from triplog.app.schemas.trip import Trip


@dataclass(frozen=True)
class StartPayload:
    origin: Optional[str]
    km_initial: Optional[float]
    photo_initial: Optional[str]
    vehicle_plate: Optional[str] = None


@dataclass(frozen=True)
class FactoryArrivalPayload:
    factory_name: Optional[str]
    photo: Optional[str] = None


@dataclass(frozen=True)
class FactoryDeparturePayload:
    photo: Optional[str] = None


@dataclass(frozen=True)
class FinishPayload:
    destination: Optional[str]
    km_final: Optional[float]
    photo_final: Optional[str]


@dataclass(frozen=True)
class ReviewPayload:
    """Administrator input for approve, reject and amend."""
    comment: Optional[str] = None
    numero_dt: Optional[str] = None
    valor_comissao: Optional[float] = None


@dataclass(frozen=True)
class AuditFields:
    numero_dt: str
    valor_comissao: float


def _require(value, field: str, label: str) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{label} is required", field=field)


def _require_finite(value: float, field: str, label: str) -> None:
    if not math.isfinite(value):
        raise ValidationError(f"{label} must be a finite number", field=field)


def check_odometer(km_initial: Optional[float], km_final: Optional[float]) -> None:
    """Final reading must be strictly greater than the initial one."""
    if km_initial is None or km_final is None:
        return
    _require_finite(km_initial, "kmInitial", "Initial odometer")
    _require_finite(km_final, "kmFinal", "Final odometer")
    if km_final <= km_initial:
        raise OrderingError(km_initial, km_final)


def validate_start(payload: StartPayload, policy: EvidencePolicy) -> None:
    _require(payload.origin, "origin", "Origin")
    _require(payload.km_initial, "kmInitial", "Initial odometer")
    _require_finite(payload.km_initial, "kmInitial", "Initial odometer")
    if payload.km_initial < 0:
        raise ValidationError("Initial odometer cannot be negative", field="kmInitial")
    if policy.requires_photo(Waypoint.DEPARTURE):
        _require(payload.photo_initial, "photoInitial", "Departure photo")


def validate_factory_arrival(payload: FactoryArrivalPayload, policy: EvidencePolicy) -> str:
    """Validate factory arrival and return the canonical facility name."""
    _require(payload.factory_name, "factoryName", "Factory")
    factory = policy.match_factory(payload.factory_name)
    if factory is None:
        raise ValidationError(
            f"Unknown factory '{payload.factory_name}'",
            field="factoryName"
        )
    if policy.requires_photo(Waypoint.FACTORY_ARRIVAL):
        _require(payload.photo, "factoryArrivalPhoto", "Factory arrival photo")
    return factory


def validate_factory_departure(payload: FactoryDeparturePayload, policy: EvidencePolicy) -> None:
    if policy.requires_photo(Waypoint.FACTORY_DEPARTURE):
        _require(payload.photo, "factoryDeparturePhoto", "Factory departure photo")


def validate_finish(trip: Trip, payload: FinishPayload, policy: EvidencePolicy) -> None:
    """Finish is checked against the stored initial odometer, not a new one."""
    _require(payload.destination, "destination", "Destination")
    _require(payload.km_final, "kmFinal", "Final odometer")
    if policy.requires_photo(Waypoint.DESTINATION):
        _require(payload.photo_final, "photoFinal", "Arrival photo")
    if trip.km_initial is None:
        raise ValidationError("Trip has no initial odometer reading", field="kmInitial")
    check_odometer(trip.km_initial, payload.km_final)


def validate_audit_fields(numero_dt, valor_comissao: Optional[float]) -> AuditFields:
    """
    Validate the fields required to approve a trip.

    Returns:
        AuditFields with the document number reduced to its digits
    """
    digits = normalize_numero_dt(numero_dt)
    if not digits:
        raise ValidationError("DT number is required", field="numero_dt")
    if valor_comissao is None:
        raise ValidationError("Commission value is required", field="valor_comissao")
    _require_finite(valor_comissao, "valor_comissao", "Commission value")
    if valor_comissao < 0:
        raise ValidationError("Commission value cannot be negative", field="valor_comissao")
    return AuditFields(numero_dt=digits, valor_comissao=float(valor_comissao))


def ensure_record_invariants(trip: Trip) -> None:
    """Checks that hold for every stored version of a trip."""
    check_odometer(trip.km_initial, trip.km_final)
    if trip.status == TripStatus.APPROVED:
        validate_audit_fields(trip.numero_dt, trip.valor_comissao)
