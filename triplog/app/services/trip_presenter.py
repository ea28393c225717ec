"""
API views of trips.
"""

from typing import Iterable, Optional

from triplog.app.domain.trips.authorization import Actor, can_perform
from triplog.app.domain.trips.lifecycle import available_events
from triplog.app.domain.trips.photos import display_urls
from triplog.app.domain.trips.policy import EvidencePolicy
from triplog.app.repositories.store import SaveOutcome
from triplog.app.schemas.trip import Trip, TripActionResponse, TripListResponse, TripResponse


def to_trip_response(trip: Trip, policy: EvidencePolicy, actor: Optional[Actor] = None) -> TripResponse:
    """Trip plus photo display URLs and the events `actor` may trigger next."""
    events = available_events(trip, policy)
    if actor is not None:
        events = [event for event in events if can_perform(actor.role, event)]
    return TripResponse(
        **trip.model_dump(),
        photo_urls=display_urls(trip),
        available_actions=[event.value for event in events],
    )


def to_action_response(outcome: SaveOutcome, policy: EvidencePolicy, actor: Actor) -> TripActionResponse:
    return TripActionResponse(
        trip=to_trip_response(outcome.trip, policy, actor),
        persisted=outcome.persisted,
        notice=outcome.notice,
    )


def to_list_response(trips: Iterable[Trip], policy: EvidencePolicy, actor: Actor) -> TripListResponse:
    items = [to_trip_response(trip, policy, actor) for trip in trips]
    return TripListResponse(trips=items, total=len(items))
