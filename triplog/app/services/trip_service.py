"""
Driver trip service.

Turns driver requests into lifecycle events. Numbers arriving as text are
parsed here; everything else is checked by the lifecycle engine.
"""

import logging
from datetime import datetime
from typing import Callable, List

from triplog.app.domain.trips.authorization import Actor
from triplog.app.domain.trips.coercion import parse_number
from triplog.app.domain.trips.lifecycle import transition
from triplog.app.domain.trips.policy import EvidencePolicy
from triplog.app.domain.trips.validation import (
    FactoryArrivalPayload,
    FactoryDeparturePayload,
    FinishPayload,
    StartPayload,
)
from triplog.app.models.trip_enums import TripEvent
from triplog.app.repositories.base import TripRepository
from triplog.app.repositories.store import SaveOutcome, TripStore
from triplog.app.schemas.trip import (
    FactoryArrivalRequest,
    FactoryDepartureRequest,
    Trip,
    TripFinishRequest,
    TripStartRequest,
)

logger = logging.getLogger(__name__)


class DriverTripService:

    def __init__(
        self,
        repository: TripRepository,
        store: TripStore,
        policy: EvidencePolicy,
        clock: Callable[[], datetime],
    ):
        self.repository = repository
        self.store = store
        self.policy = policy
        self.clock = clock

    async def _apply(self, trip_id: str, event: TripEvent, payload, actor: Actor) -> SaveOutcome:
        trip = await self.store.get(trip_id, self.repository)
        updated = transition(trip, event, payload, actor=actor, policy=self.policy, now=self.clock())
        logger.info("Trip %s: %s -> %s", trip.id, event.value, updated.status.value)
        return await self.store.commit(updated, self.repository)

    async def start(self, request: TripStartRequest, actor: Actor) -> SaveOutcome:
        payload = StartPayload(
            origin=request.origin,
            km_initial=parse_number(request.km_initial, "kmInitial"),
            photo_initial=request.photo_initial,
            vehicle_plate=request.vehicle_plate,
        )
        trip = transition(None, TripEvent.START, payload, actor=actor, policy=self.policy, now=self.clock())
        logger.info("Trip started by driver %s", actor.id)
        return await self.store.commit(trip, self.repository)

    async def arrive_factory(self, trip_id: str, request: FactoryArrivalRequest, actor: Actor) -> SaveOutcome:
        payload = FactoryArrivalPayload(factory_name=request.factory_name, photo=request.photo)
        return await self._apply(trip_id, TripEvent.ARRIVE_FACTORY, payload, actor)

    async def depart_factory(self, trip_id: str, request: FactoryDepartureRequest, actor: Actor) -> SaveOutcome:
        payload = FactoryDeparturePayload(photo=request.photo)
        return await self._apply(trip_id, TripEvent.DEPART_FACTORY, payload, actor)

    async def finish(self, trip_id: str, request: TripFinishRequest, actor: Actor) -> SaveOutcome:
        payload = FinishPayload(
            destination=request.destination,
            km_final=parse_number(request.km_final, "kmFinal"),
            photo_final=request.photo_final,
        )
        return await self._apply(trip_id, TripEvent.FINISH, payload, actor)

    async def list_for_driver(self, actor: Actor) -> List[Trip]:
        """The driver's own trips, newest first, after a full refresh."""
        trips = await self.store.refresh(self.repository)
        return [trip for trip in trips if trip.driver_id == actor.id]
