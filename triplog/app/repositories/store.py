"""
In-memory trip mirror.

Transitions are applied here first and then pushed to the repository. A save
failure leaves the local change in place and is reported as a notice; the
next refresh replaces the mirror with whatever the repository holds.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from triplog.app.core.exceptions import PersistenceError, ResourceNotFoundError
from triplog.app.repositories.base import TripRepository
from triplog.app.schemas.trip import Trip

logger = logging.getLogger(__name__)

SAVE_FAILED_NOTICE = "Trip updated locally but could not be saved. Please retry."


@dataclass(frozen=True)
class SaveOutcome:
    trip: Trip
    persisted: bool
    notice: Optional[str] = None


class TripStore:
    """Process-wide mirror of the repository's trips, keyed by id."""

    def __init__(self):
        self._trips: Dict[str, Trip] = {}

    def __len__(self):
        return len(self._trips)

    def put(self, trip: Trip):
        self._trips[trip.id] = trip

    def all(self) -> List[Trip]:
        """Every mirrored trip, newest first."""
        return sorted(self._trips.values(), key=lambda t: t.created_at or "", reverse=True)

    async def refresh(self, repository: TripRepository) -> List[Trip]:
        """Replace the mirror with the repository snapshot. Raises PersistenceError."""
        trips = await repository.list_trips()
        self._trips = {trip.id: trip for trip in trips}
        return self.all()

    async def get(self, trip_id: str, repository: TripRepository) -> Trip:
        trip = self._trips.get(trip_id)
        if trip is None:
            await self.refresh(repository)
            trip = self._trips.get(trip_id)
        if trip is None:
            raise ResourceNotFoundError("Trip", trip_id)
        return trip

    async def commit(self, trip: Trip, repository: TripRepository) -> SaveOutcome:
        """
        Apply `trip` locally, then save it.

        When the repository assigns a different id (first save of a trip
        carrying a temporary id) the mirror entry is re-keyed.
        """
        self.put(trip)
        try:
            ack = await repository.save_trip(trip)
        except PersistenceError as exc:
            logger.warning("Trip %s kept locally, save failed: %s", trip.id, exc.message)
            return SaveOutcome(trip=trip, persisted=False, notice=SAVE_FAILED_NOTICE)

        if ack.id != trip.id:
            self._trips.pop(trip.id, None)
            trip = trip.model_copy(update={"id": ack.id})
            self.put(trip)
        return SaveOutcome(trip=trip, persisted=True)
