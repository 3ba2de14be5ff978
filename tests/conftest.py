import pytest

from airports import AirportDB
from models import Airport, Flight

AIRPORT_RECORDS = [
    {"code": "JFK", "name": "John F Kennedy International Airport", "municipality": "New York",
     "region": "US-NY", "regionName": "New York", "country": "US", "countryName": "United States",
     "continent": "NA", "continentName": "North America", "lat": 40.6413, "lon": -73.7781, "elevationFt": 13},
    {"code": "LAX", "name": "Los Angeles International Airport", "municipality": "Los Angeles",
     "region": "US-CA", "regionName": "California", "country": "US", "countryName": "United States",
     "continent": "NA", "continentName": "North America", "lat": 33.9416, "lon": -118.4085, "elevationFt": 125},
    {"code": "ORD", "name": "Chicago O'Hare International Airport", "municipality": "Chicago",
     "region": "US-IL", "regionName": "Illinois", "country": "US", "countryName": "United States",
     "continent": "NA", "continentName": "North America", "lat": 41.9742, "lon": -87.9073, "elevationFt": 672},
    {"code": "CDG", "name": "Charles de Gaulle International Airport", "municipality": "Paris",
     "region": "FR-IDF", "regionName": "Ile-de-France", "country": "FR", "countryName": "France",
     "continent": "EU", "continentName": "Europe", "lat": 49.0097, "lon": 2.5479, "elevationFt": 392},
    {"code": "EWR", "name": "Newark Liberty International Airport", "municipality": "Newark",
     "region": "US-NJ", "regionName": "New Jersey", "country": "US", "countryName": "United States",
     "continent": "NA", "continentName": "North America", "lat": 40.6895, "lon": -74.1745, "elevationFt": 18},
]


@pytest.fixture
def catalog() -> AirportDB:
    return AirportDB.from_records(AIRPORT_RECORDS)


@pytest.fixture
def make_flight(catalog):
    """Factory: make_flight("1/1/2020", "JFK", "LAX", airline="Delta")."""
    counter = {"id": 0}

    def _make(date: str, origin: str, destination: str, airline: str = "Delta") -> Flight:
        counter["id"] += 1
        return Flight(
            id=counter["id"],
            date=date,
            airline=airline,
            origin=catalog.get_airport(origin) or Airport(code=origin),
            destination=catalog.get_airport(destination) or Airport(code=destination),
        )

    return _make


@pytest.fixture
def round_trip(make_flight):
    return [
        make_flight("1/1/2020", "JFK", "LAX"),
        make_flight("6/1/2020", "LAX", "JFK"),
    ]


@pytest.fixture
def three_flights(round_trip, make_flight):
    return round_trip + [make_flight("3/1/2021", "JFK", "ORD", airline="United")]


@pytest.fixture
def airport_records():
    return [dict(r) for r in AIRPORT_RECORDS]


@pytest.fixture
def flight_records():
    return [
        {"date": "1/1/2020", "airline": "Delta", "origin": "JFK", "destination": "LAX"},
        {"date": "6/1/2020", "airline": "Delta", "origin": "LAX", "destination": "JFK"},
        {"date": "3/1/2021", "airline": "United", "origin": "JFK", "destination": "ORD"},
        {"date": "4/1/2021", "airline": "Air France", "origin": "ORD", "destination": "CDG"},
    ]
