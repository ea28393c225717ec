"""
Tests for the spreadsheet repository against a mocked web app.
"""

import json

import httpx
import pytest

from triplog.app.core.exceptions import PersistenceError, ValidationError
from triplog.app.core.reliability import CircuitBreaker
from triplog.app.models.enums import UserRole
from triplog.app.models.trip_enums import TripStatus
from triplog.app.repositories.sheets import SheetsTripRepository
from triplog.app.schemas.auth import UserAccount
from triplog.app.schemas.trip import Trip

SHEETS_URL = "https://script.example.com/macros/s/abc/exec"


def make_repository(handler, breaker=None):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SheetsTripRepository(SHEETS_URL, client=client, breaker=breaker)


@pytest.mark.asyncio
async def test_list_trips_decodes_rows():
    def handler(request):
        assert request.method == "GET"
        assert request.url.params["action"] == "getTrips"
        return httpx.Response(200, json=[
            {"id": 1, "driverId": "motorista1", "status": "Pendente", "kmInitial": "100", "kmFinal": 150},
            None,
            {"id": "", "driverId": ""},
        ])

    repository = make_repository(handler)
    trips = await repository.list_trips()

    assert len(trips) == 1
    assert trips[0].id == "1"
    assert trips[0].km_initial == 100.0
    assert trips[0].status == TripStatus.PENDING_REVIEW


@pytest.mark.asyncio
async def test_save_trip_posts_wire_payload():
    sent = {}

    def handler(request):
        sent.update(json.loads(request.content))
        return httpx.Response(200, json={"status": "success", "id": "42"})

    repository = make_repository(handler)
    trip = Trip(id="tmp-1", driver_id="motorista1", status=TripStatus.IN_PROGRESS, km_initial=100)

    ack = await repository.save_trip(trip)

    assert ack.id == "42"
    assert sent["action"] == "saveTrip"
    assert sent["trip"]["driverId"] == "motorista1"
    assert sent["trip"]["kmInitial"] == 100


@pytest.mark.asyncio
async def test_save_trip_error_status_is_persistence_error():
    repository = make_repository(lambda request: httpx.Response(200, json={"status": "error", "message": "locked"}))
    trip = Trip(id="1", driver_id="m1", status=TripStatus.IN_PROGRESS)

    with pytest.raises(PersistenceError) as exc_info:
        await repository.save_trip(trip)
    assert exc_info.value.message == "locked"


@pytest.mark.asyncio
async def test_transport_failures_become_persistence_errors():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    repository = make_repository(handler)
    with pytest.raises(PersistenceError):
        await repository.list_trips()

    repository = make_repository(lambda request: httpx.Response(500, text="oops"))
    with pytest.raises(PersistenceError):
        await repository.list_trips()

    repository = make_repository(lambda request: httpx.Response(200, text="<html>login</html>"))
    with pytest.raises(PersistenceError):
        await repository.list_trips()


@pytest.mark.asyncio
async def test_open_circuit_short_circuits_calls():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(503)

    repository = make_repository(handler, breaker=CircuitBreaker(name="sheets", failure_threshold=2, reset_timeout=60))

    for _ in range(3):
        with pytest.raises(PersistenceError):
            await repository.list_trips()

    assert len(calls) == 2
    assert repository.breaker.state == "OPEN"


@pytest.mark.asyncio
async def test_authenticate():
    def handler(request):
        body = json.loads(request.content)
        if body["password"] == "123":
            return httpx.Response(200, json={
                "status": "success",
                "user": {"id": body["id"], "name": "Matheus Prux", "role": "driver"},
            })
        return httpx.Response(200, json={"status": "error", "message": "Credenciais inválidas"})

    repository = make_repository(handler)

    account = await repository.authenticate("motorista1", "123")
    assert account.id == "motorista1"
    assert account.role == UserRole.DRIVER

    assert await repository.authenticate("motorista1", "wrong") is None


@pytest.mark.asyncio
async def test_register_duplicate_is_validation_error():
    repository = make_repository(lambda request: httpx.Response(200, json={"status": "error", "message": "ID já existe"}))

    with pytest.raises(ValidationError):
        await repository.register_user(UserAccount(id="motorista1", name="M"), "123")


@pytest.mark.asyncio
async def test_aclose_closes_client(mocker):
    repository = make_repository(lambda request: httpx.Response(200, json=[]))
    spy = mocker.spy(repository.client, "aclose")

    await repository.aclose()

    spy.assert_called_once()
