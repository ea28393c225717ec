"""
Trip persistence on the spreadsheet web app.

The web app exposes one URL: GET with ?action=getTrips to list trips, POST
with a JSON body carrying an "action" for everything else. Apps Script
answers through a redirect, so redirects are followed.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from triplog.app.core.exceptions import PersistenceError, ValidationError
from triplog.app.core.reliability import CircuitBreaker, CircuitOpenError
from triplog.app.repositories.base import SaveAck, TripRepository
from triplog.app.repositories.codec import decode_trip_rows, encode_trip
from triplog.app.schemas.auth import UserAccount
from triplog.app.schemas.trip import Trip

logger = logging.getLogger(__name__)


class SheetsTripRepository(TripRepository):
    """TripRepository speaking the spreadsheet web app's JSON protocol."""

    def __init__(
        self,
        base_url: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
        breaker: Optional[CircuitBreaker] = None,
    ):
        self.base_url = base_url
        self.client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        self.breaker = breaker or CircuitBreaker(name="sheets", failure_threshold=3, reset_timeout=30)

    async def aclose(self):
        await self.client.aclose()

    async def _send(self, method: str, **kwargs) -> Any:
        response = await self.client.request(method, self.base_url, **kwargs)
        response.raise_for_status()
        return response.json()

    async def _call(self, method: str, **kwargs) -> Any:
        try:
            return await self.breaker.call(self._send, method, **kwargs)
        except CircuitOpenError as exc:
            raise PersistenceError("Spreadsheet backend temporarily unavailable") from exc
        except httpx.HTTPError as exc:
            logger.warning("Spreadsheet request failed: %s", exc)
            raise PersistenceError("Spreadsheet backend request failed") from exc
        except ValueError as exc:
            logger.warning("Spreadsheet returned invalid JSON: %s", exc)
            raise PersistenceError("Spreadsheet backend returned an invalid response") from exc

    async def _post(self, body: Dict[str, Any]) -> Dict[str, Any]:
        data = await self._call("POST", json=body)
        if not isinstance(data, dict):
            raise PersistenceError("Unexpected spreadsheet response", details={"action": body["action"]})
        return data

    async def list_trips(self) -> List[Trip]:
        data = await self._call("GET", params={"action": "getTrips"})
        if not isinstance(data, list):
            raise PersistenceError("Unexpected spreadsheet response", details={"action": "getTrips"})
        return decode_trip_rows(data)

    async def save_trip(self, trip: Trip) -> SaveAck:
        data = await self._post({"action": "saveTrip", "trip": encode_trip(trip)})
        if data.get("status") != "success":
            raise PersistenceError(
                data.get("message") or "Spreadsheet rejected the trip",
                details={"trip_id": trip.id}
            )
        return SaveAck(id=str(data.get("id") or trip.id))

    async def authenticate(self, user_id: str, password: str) -> Optional[UserAccount]:
        data = await self._post({"action": "login", "id": user_id, "password": password})
        if data.get("status") != "success" or not isinstance(data.get("user"), dict):
            return None
        account = UserAccount.model_validate(data["user"])
        return account if account.is_active else None

    async def register_user(self, account: UserAccount, password: str) -> UserAccount:
        data = await self._post({
            "action": "register",
            "user": account.model_dump(mode="json"),
            "password": password,
        })
        if data.get("status") != "success":
            raise ValidationError(data.get("message") or "Registration rejected", field="id")
        if isinstance(data.get("user"), dict):
            return UserAccount.model_validate(data["user"])
        return account
