"""
Trip-related enumerations.
"""

import enum


class TripStatus(str, enum.Enum):
    """Trip status enumeration. Values are the labels stored in the spreadsheet."""
    IN_PROGRESS = "Em Andamento"  # Driver has departed
    AT_FACTORY = "Na Fábrica"  # Arrived at the factory waypoint
    IN_TRANSIT = "Em Trânsito"  # Left the factory, heading to destination
    PENDING_REVIEW = "Pendente"  # Finished, awaiting administrator review
    APPROVED = "Aprovado"
    REJECTED = "Rejeitado"


class TripEvent(str, enum.Enum):
    """Events that move a trip through its lifecycle."""
    START = "start"
    ARRIVE_FACTORY = "arrive_factory"
    DEPART_FACTORY = "depart_factory"
    FINISH = "finish"
    APPROVE = "approve"
    REJECT = "reject"
    AMEND = "amend"


class Decision(str, enum.Enum):
    """Administrator decision on a pending trip."""
    APPROVE = "approve"
    REJECT = "reject"


class Waypoint(str, enum.Enum):
    """Checkpoints that may require photographic evidence."""
    DEPARTURE = "departure"
    FACTORY_ARRIVAL = "factory_arrival"
    FACTORY_DEPARTURE = "factory_departure"
    DESTINATION = "destination"


TERMINAL_STATUSES = frozenset({TripStatus.APPROVED, TripStatus.REJECTED})
