"""
Trip persistence contract.

The lifecycle core only needs to list trips, save one trip, and check
credentials. Implementations decide how that travels.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from triplog.app.schemas.auth import UserAccount
from triplog.app.schemas.trip import Trip


@dataclass(frozen=True)
class SaveAck:
    """Acknowledgement of a save, carrying the durable trip id."""
    id: str


class TripRepository(ABC):
    """Persistence collaborator for trips and users."""

    @abstractmethod
    async def list_trips(self) -> List[Trip]:
        """Return every stored trip. Raises PersistenceError on failure."""

    @abstractmethod
    async def save_trip(self, trip: Trip) -> SaveAck:
        """Insert or overwrite a trip (last write wins). Raises PersistenceError on failure."""

    @abstractmethod
    async def authenticate(self, user_id: str, password: str) -> Optional[UserAccount]:
        """Return the user if the credentials are valid, else None."""

    @abstractmethod
    async def register_user(self, account: UserAccount, password: str) -> UserAccount:
        """Create a user. Raises ValidationError if the id is taken."""
