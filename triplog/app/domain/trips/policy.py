"""
Evidence policy for trip waypoints.

Which waypoints need a photo, which facilities are known, and whether the
factory stop is mandatory are deployment choices, not lifecycle branches.
"""

from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from triplog.app.models.trip_enums import Waypoint


DEFAULT_PHOTO_REQUIREMENTS = {
    Waypoint.DEPARTURE: True,
    Waypoint.FACTORY_ARRIVAL: True,
    Waypoint.FACTORY_DEPARTURE: False,
    Waypoint.DESTINATION: True,
}


@dataclass(frozen=True)
class EvidencePolicy:
    """
    Lifecycle configuration for one deployment.

    Attributes:
        photo_required: Waypoint -> whether a photo must be attached there
        factory_names: Facilities a driver may select on factory arrival
        factory_stop_required: If True, every trip goes through the factory
            before it can be finished
    """
    photo_required: Mapping[Waypoint, bool] = field(
        default_factory=lambda: dict(DEFAULT_PHOTO_REQUIREMENTS)
    )
    factory_names: Tuple[str, ...] = ()
    factory_stop_required: bool = False

    def requires_photo(self, waypoint: Waypoint) -> bool:
        return self.photo_required.get(waypoint, False)

    def match_factory(self, name: Optional[str]) -> Optional[str]:
        """Return the canonical facility name for `name`, or None if unknown."""
        if not name:
            return None
        wanted = name.strip().casefold()
        for known in self.factory_names:
            if known.casefold() == wanted:
                return known
        return None

    @classmethod
    def from_settings(cls, settings) -> "EvidencePolicy":
        photo_required = dict(DEFAULT_PHOTO_REQUIREMENTS)
        photo_required[Waypoint.FACTORY_ARRIVAL] = settings.require_factory_arrival_photo
        photo_required[Waypoint.FACTORY_DEPARTURE] = settings.require_factory_departure_photo
        return cls(
            photo_required=photo_required,
            factory_names=tuple(settings.factory_names),
            factory_stop_required=settings.factory_stop_required,
        )
