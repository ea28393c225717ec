"""
Approval and audit engine.

Administrators decide on finished trips; super administrators may later
correct the audit fields of an approved trip. Both go through the lifecycle
state machine and are then pushed to the repository. A failed save is
reported, never rolled back.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Optional

from triplog.app.domain.trips.authorization import Actor
from triplog.app.domain.trips.coercion import parse_number
from triplog.app.domain.trips.lifecycle import transition
from triplog.app.domain.trips.policy import EvidencePolicy
from triplog.app.domain.trips.validation import ReviewPayload
from triplog.app.models.trip_enums import Decision, TripEvent
from triplog.app.repositories.base import TripRepository
from triplog.app.repositories.store import SaveOutcome, TripStore

logger = logging.getLogger(__name__)

DECISION_EVENTS = {
    Decision.APPROVE: TripEvent.APPROVE,
    Decision.REJECT: TripEvent.REJECT,
}


class ApprovalService:
    """Review operations over trips held in a TripStore."""

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

    async def decide(
        self,
        trip_id: str,
        decision: Decision,
        actor: Actor,
        comment: Optional[str] = None,
        numero_dt: Any = None,
        valor_comissao: Any = None,
    ) -> SaveOutcome:
        """
        Approve or reject a trip awaiting review.

        Approval requires a DT number and a non-negative commission value.
        Rejection ignores both and only records the comment.

        Raises:
            ResourceNotFoundError, AuthorizationError, TransitionError, ValidationError
        """
        trip = await self.store.get(trip_id, self.repository)
        event = DECISION_EVENTS[Decision(decision)]

        if event == TripEvent.APPROVE:
            payload = ReviewPayload(
                comment=comment,
                numero_dt=numero_dt,
                valor_comissao=parse_number(valor_comissao, "valor_comissao"),
            )
        else:
            payload = ReviewPayload(comment=comment)

        updated = transition(trip, event, payload, actor=actor, policy=self.policy, now=self.clock())
        logger.info("Trip %s %s by %s", trip.id, updated.status.value, actor.id)
        return await self.store.commit(updated, self.repository)

    async def amend(
        self,
        trip_id: str,
        actor: Actor,
        numero_dt: Any = None,
        valor_comissao: Any = None,
        comment: Optional[str] = None,
    ) -> SaveOutcome:
        """
        Overwrite the audit fields of an approved trip.

        Status is unchanged and repeating the same amendment yields the same
        record. The previous comment is kept unless a new one is given.

        Raises:
            ResourceNotFoundError, AuthorizationError, TransitionError, ValidationError
        """
        trip = await self.store.get(trip_id, self.repository)
        payload = ReviewPayload(
            comment=comment,
            numero_dt=numero_dt,
            valor_comissao=parse_number(valor_comissao, "valor_comissao"),
        )
        updated = transition(trip, TripEvent.AMEND, payload, actor=actor, policy=self.policy, now=self.clock())
        logger.info("Trip %s audit fields amended by %s", trip.id, actor.id)
        return await self.store.commit(updated, self.repository)
