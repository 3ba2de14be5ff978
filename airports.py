"""Airport catalog.

This module provides `AirportDB`, the in-memory airport catalog used by the
loader (flight enrichment), the aggregator (elevation extremes, selected
airport details) and the projection (marker positions), plus
`build_visited_airports()` which tallies visits per airport from a flight
collection.

Data source: `visitedAirports.geojson` (or a JSON list of airport records),
see `config.LoadedConfig.airports_source`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Mapping, Optional

from models import Airport, Flight, VisitedAirport

logger = logging.getLogger(__name__)

# source property name -> Airport attribute
_FIELD_ALIASES = {
    "name": ("name",),
    "municipality": ("municipality", "city"),
    "region": ("region", "iso_region"),
    "region_name": ("regionName", "region_name"),
    "country": ("country", "iso_country", "country_code"),
    "country_name": ("countryName", "country_name"),
    "continent": ("continent",),
    "continent_name": ("continentName", "continent_name"),
}


def _first(record: Mapping[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        value = record.get(key)
        if value not in (None, ""):
            return value
    return None


def _to_float(value: Any) -> Optional[float]:
    if value in (None, ""):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def airport_from_record(record: Mapping[str, Any]) -> Optional[Airport]:
    """Build an Airport from a source record; None when it has no code."""
    code = str(_first(record, ("code", "iata_code", "iata", "ident")) or "").strip().upper()
    if not code:
        return None

    attrs = {
        attr: str(_first(record, keys) or "").strip()
        for attr, keys in _FIELD_ALIASES.items()
    }
    elevation_ft = _to_float(_first(record, ("elevationFt", "elevation_ft")))
    elevation_m = _to_float(_first(record, ("elevationM", "elevation_m")))
    if elevation_m is None and elevation_ft is not None:
        elevation_m = round(elevation_ft * 0.3048)

    return Airport(
        code=code,
        lat=_to_float(_first(record, ("lat", "latitude", "latitude_deg"))) or 0.0,
        lon=_to_float(_first(record, ("lon", "lng", "longitude", "longitude_deg"))) or 0.0,
        elevation_ft=elevation_ft,
        elevation_m=elevation_m,
        **attrs,
    )


class AirportDB:
    """In-memory airport catalog keyed by IATA/ICAO code."""

    def __init__(self, airports: Iterable[Airport]):
        self._by_code: Dict[str, Airport] = {}
        for a in airports:
            code = (a.code or "").strip().upper()
            if not code:
                continue
            # keep first occurrence
            self._by_code.setdefault(code, a)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> 'AirportDB':
        airports = []
        for record in records:
            airport = airport_from_record(record)
            if airport is None:
                logger.warning(f"Skipping airport record without a code: {dict(record)!r:.80}")
                continue
            airports.append(airport)
        return cls(airports)

    def __len__(self) -> int:
        return len(self._by_code)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code.strip().upper() in self._by_code

    def __iter__(self):
        return iter(self._by_code.values())

    def get_airport(self, code: str) -> Optional[Airport]:
        return self._by_code.get((code or "").strip().upper())


def build_visited_airports(flights: Iterable[Flight], catalog: Optional[AirportDB] = None) -> Dict[str, VisitedAirport]:
    """Tally arrivals, departures and visit dates per airport.

    Always computed from scratch. The origin's visit is recorded before the
    destination's, so ``visit_dates`` follows flight processing order.
    """
    visited: Dict[str, VisitedAirport] = {}

    def _entry(endpoint: Airport) -> VisitedAirport:
        entry = visited.get(endpoint.code)
        if entry is None:
            airport = (catalog.get_airport(endpoint.code) if catalog is not None else None) or endpoint
            entry = visited[endpoint.code] = VisitedAirport(airport=airport)
        return entry

    for f in flights:
        dep = _entry(f.origin)
        dep.departure_count += 1
        dep.visit_count += 1
        dep.visit_dates.append(f.date)

        arr = _entry(f.destination)
        arr.arrival_count += 1
        arr.visit_count += 1
        arr.visit_dates.append(f.date)

    return visited
