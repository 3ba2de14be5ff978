import json
from datetime import date

import pytest

from data_validator import validate_airports, validate_date, validate_flights, validate_sources

TODAY = date(2024, 6, 1)


@pytest.mark.parametrize("value", ["1/1/2020", "12/31/1990", "2/29/2024", "5/1/2025"])
def test_valid_dates(value):
    assert validate_date(value, TODAY) is None


@pytest.mark.parametrize("value,fragment", [
    ("", "Empty"),
    ("2020-01-01", "Invalid format"),
    ("a/b/c", "Non-numeric"),
    ("13/1/2020", "Invalid month"),
    ("1/32/2020", "Invalid day"),
    ("2/30/2021", "Invalid date"),
    ("1/1/1980", "too old"),
    ("1/1/2030", "too far in future"),
])
def test_invalid_dates(value, fragment):
    assert fragment in validate_date(value, TODAY)


def test_airport_rules(airport_records):
    errors, warnings = validate_airports(airport_records)
    assert errors == []
    assert warnings == []

    bad = airport_records + [
        {"code": "JFK", "lat": 1, "lon": 2, "continent": "NA"},
        {"name": "nameless"},
        {"code": "XXX", "lat": "n/a", "lon": 2, "continent": "ZZ"},
    ]
    errors, warnings = validate_airports(bad)
    assert any("Duplicate code" in e for e in errors)
    assert any("Missing code" in e for e in errors)
    assert any("invalid lat" in e for e in errors)
    assert any("Invalid continent 'ZZ'" in e for e in errors)
    assert any("(XXX): Empty name" in w for w in warnings)


def test_flight_rules(flight_records):
    codes = {"JFK", "LAX", "ORD", "CDG"}
    errors, warnings = validate_flights(flight_records, codes, TODAY)
    assert errors == []
    assert warnings == []

    records = flight_records + [
        {"date": "1/1/2020", "airline": "Delta", "origin": "JFK", "destination": "LAX"},
        {"date": "2/2/2020", "airline": "delta", "origin": "SFO", "destination": "SFO"},
        {"date": "2/3/2020", "airline": "", "origin": "J1", "destination": "LAX"},
    ]
    errors, warnings = validate_flights(records, codes, TODAY)
    assert any("Flight 6: Origin and destination are the same (SFO)" in e for e in errors)
    assert any('Invalid airport code: "J1"' in e for e in errors)
    assert any("Possible duplicate of flight 1" in w for w in warnings)
    assert any("SFO not in airport catalog" in w for w in warnings)
    assert any("Flight 7: Empty airline name" in w for w in warnings)
    assert "Inconsistent airline naming: Delta, delta" in warnings


def test_validate_sources_reports(tmp_path, airport_records, flight_records, capsys):
    airports = tmp_path / "airports.json"
    flights = tmp_path / "flights.json"
    airports.write_text(json.dumps(airport_records), encoding="utf-8")
    flights.write_text(json.dumps(flight_records), encoding="utf-8")

    assert validate_sources(str(airports), str(flights))
    out = capsys.readouterr().out
    assert "Total flights: 4" in out
    assert "Validation passed" in out

    assert not validate_sources(str(tmp_path / "missing.json"), str(flights))
