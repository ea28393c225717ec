"""
Role-based authorization for trip lifecycle events.

`can_perform` is the single predicate consulted before any transition runs.
"""

from dataclasses import dataclass
from typing import Union

from triplog.app.models.enums import UserRole
from triplog.app.models.trip_enums import TripEvent


_PERMISSIONS = {
    UserRole.DRIVER: frozenset({
        TripEvent.START,
        TripEvent.ARRIVE_FACTORY,
        TripEvent.DEPART_FACTORY,
        TripEvent.FINISH,
    }),
    UserRole.ADMIN: frozenset({
        TripEvent.APPROVE,
        TripEvent.REJECT,
    }),
    UserRole.SUPER_ADMIN: frozenset({
        TripEvent.APPROVE,
        TripEvent.REJECT,
        TripEvent.AMEND,
    }),
}

DRIVER_EVENTS = _PERMISSIONS[UserRole.DRIVER]


@dataclass(frozen=True)
class Actor:
    """The authenticated user performing an action."""
    id: str
    name: str
    role: UserRole


def can_perform(role: Union[UserRole, str, None], event: TripEvent) -> bool:
    """Return True if `role` may trigger `event`. Unknown roles may do nothing."""
    try:
        user_role = UserRole(role)
    except ValueError:
        return False
    return event in _PERMISSIONS.get(user_role, frozenset())
