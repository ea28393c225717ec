"""
Tests for boundary coercion, audit field validation and the row codec.
"""

import math

import pytest

from triplog.app.core.exceptions import ValidationError
from triplog.app.domain.trips.coercion import (
    normalize_date,
    normalize_numero_dt,
    normalize_plate,
    parse_date_filter,
    parse_number,
)
from triplog.app.domain.trips.photos import display_urls, to_display_url
from triplog.app.domain.trips.validation import validate_audit_fields
from triplog.app.models.trip_enums import TripStatus
from triplog.app.repositories.codec import decode_trip_row, decode_trip_rows, encode_trip
from triplog.app.schemas.trip import Trip


@pytest.mark.parametrize("raw,expected", [
    (150, 150.0),
    (150.5, 150.5),
    ("150", 150.0),
    (" 150.5 ", 150.5),
    ("500,00", 500.0),
    ("1.234,56", 1234.56),
    ("", None),
    (None, None),
])
def test_parse_number_accepts_numeric_input(raw, expected):
    assert parse_number(raw, "kmInitial") == expected


@pytest.mark.parametrize("raw", ["abc", "12km", True, "nan", "inf", math.inf])
def test_parse_number_rejects_non_numeric(raw):
    with pytest.raises(ValidationError) as exc_info:
        parse_number(raw, "kmFinal")
    assert exc_info.value.field == "kmFinal"
    assert exc_info.value.status_code == 400


def test_normalizers():
    assert normalize_numero_dt("DT-123.456") == "123456"
    assert normalize_numero_dt(98765.0) == "98765"
    assert normalize_numero_dt(None) == ""
    assert normalize_plate(" abc1d23 ") == "ABC1D23"
    assert normalize_plate("  ") is None
    assert normalize_date("2024-5-3T10:00:00.000Z") == "2024-05-03"
    assert normalize_date("03/05/2024") == "2024-05-03"
    assert normalize_date("") is None


def test_date_filter_accepts_calendar_dates():
    assert parse_date_filter("2024-05-10", "start_date") == "2024-05-10"
    assert parse_date_filter("10/05/2024", "start_date") == "2024-05-10"
    assert parse_date_filter(" ", "start_date") is None


@pytest.mark.parametrize("raw", ["abc", "2024-13-01", "2024-02-30", "10-05-2024"])
def test_date_filter_rejects_malformed_dates(raw):
    with pytest.raises(ValidationError) as exc_info:
        parse_date_filter(raw, "end_date")
    assert exc_info.value.field == "end_date"


def test_audit_fields_valid():
    fields = validate_audit_fields("DT 4521", 350.0)
    assert fields.numero_dt == "4521"
    assert fields.valor_comissao == 350.0


def test_audit_fields_zero_commission_allowed():
    assert validate_audit_fields("1", 0).valor_comissao == 0.0


@pytest.mark.parametrize("numero_dt,valor,field", [
    ("", 100.0, "numero_dt"),
    ("abc", 100.0, "numero_dt"),
    (None, 100.0, "numero_dt"),
    ("123", None, "valor_comissao"),
    ("123", -0.01, "valor_comissao"),
    ("123", math.nan, "valor_comissao"),
    ("123", math.inf, "valor_comissao"),
])
def test_audit_fields_invalid(numero_dt, valor, field):
    with pytest.raises(ValidationError) as exc_info:
        validate_audit_fields(numero_dt, valor)
    assert exc_info.value.field == field


def test_decode_row_normalizes_spreadsheet_types():
    trip = decode_trip_row({
        "id": 17,
        "driverId": "motorista1",
        "driverName": "Matheus Prux",
        "vehiclePlate": "abc1d23",
        "date": "2024-05-03T03:00:00.000Z",
        "kmInitial": "1.000,5",
        "kmFinal": 1100,
        "status": "Aprovado",
        "numero_dt": 4521,
        "valor_comissao": "350,00",
        "photoInitial": "",
        "unknownColumn": "ignored",
    })

    assert trip.id == "17"
    assert trip.start_date == "2024-05-03"
    assert trip.vehicle_plate == "ABC1D23"
    assert trip.km_initial == 1000.5
    assert trip.km_final == 1100.0
    assert trip.status == TripStatus.APPROVED
    assert trip.numero_dt == "4521"
    assert trip.valor_comissao == 350.0
    assert trip.photo_initial is None


def test_decode_row_keeps_trip_with_malformed_number():
    trip = decode_trip_row({
        "id": "8", "driverId": "m1", "status": "Pendente", "kmInitial": 10, "kmFinal": "n/a",
    })
    assert trip is not None
    assert trip.km_final is None


def test_decode_rows_drops_empty_and_invalid_rows():
    rows = [
        None,
        {},
        {"id": ""},
        {"id": "1", "status": "Pendente"},
        {"id": "2", "driverId": "m1", "status": "Desconhecido"},
        {"id": "3", "driverId": "m1", "status": "Em Andamento"},
    ]
    trips = decode_trip_rows(rows)
    assert [trip.id for trip in trips] == ["3"]


def test_encode_uses_wire_names():
    trip = Trip(id="1", driver_id="m1", status=TripStatus.PENDING_REVIEW, km_initial=10, km_final=20)
    row = encode_trip(trip)

    assert row["driverId"] == "m1"
    assert row["kmInitial"] == 10
    assert row["status"] == "Pendente"
    assert decode_trip_row(row) == trip


@pytest.mark.parametrize("reference,expected", [
    ("https://drive.google.com/file/d/AbC_1-x/view?usp=sharing", "https://drive.google.com/uc?export=view&id=AbC_1-x"),
    ("https://drive.google.com/open?id=XyZ9", "https://drive.google.com/uc?export=view&id=XyZ9"),
    ("https://drive.google.com/uc?export=download&id=Q1", "https://drive.google.com/uc?export=view&id=Q1"),
    ("data:image/jpeg;base64,AAA", "data:image/jpeg;base64,AAA"),
    ("https://example.com/foto.jpg", "https://example.com/foto.jpg"),
    ("", ""),
])
def test_photo_display_url(reference, expected):
    assert to_display_url(reference) == expected


def test_display_urls_leave_stored_references_raw():
    link = "https://drive.google.com/file/d/abc/view"
    trip = Trip(id="1", driver_id="m1", status=TripStatus.IN_PROGRESS, photo_initial=link)

    assert display_urls(trip) == {"photoInitial": "https://drive.google.com/uc?export=view&id=abc"}
    assert trip.photo_initial == link
