"""Geo and date helpers shared by the route index, aggregator and projection."""

import math
from datetime import date

EARTH_RADIUS_KM = 6371
CRUISE_SPEED_KMH = 800
GROUND_OVERHEAD_HOURS = 1


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points (haversine)."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def flight_distance_km(flight) -> float:
    o, d = flight.origin, flight.destination
    return distance_km(o.lat, o.lon, d.lat, d.lon)


def _date_parts(date_str: str):
    parts = (date_str or "").split("/")
    if len(parts) != 3:
        raise ValueError(f"Invalid date {date_str!r} (expected M/D/YYYY)")
    return parts


def year_of(date_str: str) -> int:
    """Year of a ``M/D/YYYY`` date string, e.g. ``"6/15/2008"`` -> 2008."""
    return int(_date_parts(date_str)[2])


def parse_date(date_str: str) -> date:
    """Parse ``M/D/YYYY`` into a date. Raises ValueError on malformed input."""
    month, day, year = (int(p) for p in _date_parts(date_str))
    return date(year, month, day)


def route_key(code_a: str, code_b: str) -> str:
    """Direction-independent route identity: ``route_key("LAX", "JFK") == "JFK-LAX"``."""
    return "-".join(sorted((code_a, code_b)))


def route_label(origin: str, destination: str) -> str:
    return f"{origin} → {destination}"


def estimated_flight_hours(distance: float) -> float:
    # cruise at ~800 km/h plus an hour for taxi, climb and descent
    return distance / CRUISE_SPEED_KMH + GROUND_OVERHEAD_HOURS
