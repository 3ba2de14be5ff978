"""
Statistics aggregator.

`compute_statistics()` folds the filtered flight subset into one
`FlightStatistics` snapshot in a single forward pass, then derives rankings
and extremes from the accumulated tallies. Nothing here keeps state between
calls, so results are safe to memoize per filter combination.

Ranking ties are broken by code (ascending) so the output does not depend on
the order flights happen to arrive in.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from airports import AirportDB
from filters import airline_counts, available_years
from geo import estimated_flight_hours, flight_distance_km, parse_date, route_label
from models import (
    Airport,
    CodeCount,
    DatedFlight,
    DistanceRecord,
    ElevationRecord,
    Flight,
    FlightStatistics,
    NamedCount,
    RegionCount,
    SelectedAirportInfo,
    TrafficCount,
    VisitInfo,
    VisitedAirport,
)
from routes import build_route_index, top_routes

logger = logging.getLogger(__name__)

# Hops of this length or shorter are treated as data artifacts.
SHORT_HOP_FLOOR_KM = 50
TOP_ROUTES_LIMIT = 10
TOP_CONNECTIONS_LIMIT = 5

Catalog = Union[AirportDB, Mapping[str, Union[Airport, VisitedAirport]]]


def _half_up(value: float) -> int:
    return int(value + 0.5)


def _ranked(counts: Mapping[str, int]) -> List[Tuple[str, int]]:
    return sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))


def _catalog_airports(airports: Optional[Catalog]) -> List[Airport]:
    if airports is None:
        return []
    values = airports if isinstance(airports, AirportDB) else airports.values()
    return [a.airport if isinstance(a, VisitedAirport) else a for a in values]


def _catalog_lookup(airports: Optional[Catalog], code: str) -> Optional[Airport]:
    if airports is None:
        return None
    if isinstance(airports, AirportDB):
        return airports.get_airport(code)
    found = airports.get(code)
    return found.airport if isinstance(found, VisitedAirport) else found


class _Tally:
    """Running totals for one aggregation pass."""

    def __init__(self):
        self.airlines = set()

        self.continent_visits = Counter()
        self.country_visits = Counter()
        self.country_departures = Counter()
        self.country_arrivals = Counter()
        self.region_visits = Counter()
        self.airport_visits = Counter()
        self.airport_departures = Counter()
        self.airport_arrivals = Counter()

        # first-seen-wins display names
        self.continent_names: Dict[str, str] = {}
        self.country_names: Dict[str, str] = {}
        self.region_names: Dict[str, str] = {}
        self.region_countries: Dict[str, str] = {}
        self.airport_names: Dict[str, str] = {}

        self.total_distance = 0.0
        self.total_hours = 0.0
        self.international = 0
        self.intercontinental = 0
        self.longest: Optional[DistanceRecord] = None
        self.shortest: Optional[DistanceRecord] = None
        self.first = None
        self.last = None

    def _visit(self, endpoint: Airport) -> None:
        self.continent_visits[endpoint.continent] += 1
        self.continent_names.setdefault(endpoint.continent, endpoint.continent_name)
        self.country_visits[endpoint.country] += 1
        self.country_names.setdefault(endpoint.country, endpoint.country_name)
        self.region_visits[endpoint.region] += 1
        self.region_names.setdefault(endpoint.region, endpoint.region_name)
        self.region_countries.setdefault(endpoint.region, endpoint.country_name)
        self.airport_visits[endpoint.code] += 1
        self.airport_names.setdefault(endpoint.code, endpoint.name)

    def add(self, f: Flight) -> None:
        o, d = f.origin, f.destination
        self.airlines.add(f.airline)

        self._visit(o)
        self._visit(d)
        self.country_departures[o.country] += 1
        self.country_arrivals[d.country] += 1
        self.airport_departures[o.code] += 1
        self.airport_arrivals[d.code] += 1

        if o.country != d.country:
            self.international += 1
        if o.continent != d.continent:
            self.intercontinental += 1

        distance = flight_distance_km(f)
        self.total_distance += distance
        self.total_hours += estimated_flight_hours(distance)

        label = route_label(o.code, d.code)
        if self.longest is None or distance > self.longest.distance:
            self.longest = DistanceRecord(route=label, distance=distance)
        if distance > SHORT_HOP_FLOOR_KM and (self.shortest is None or distance < self.shortest.distance):
            self.shortest = DistanceRecord(route=label, distance=distance)

        when = parse_date(f.date)
        if self.first is None or when < self.first[0]:
            self.first = (when, DatedFlight(route=label, date=f.date))
        if self.last is None or when > self.last[0]:
            self.last = (when, DatedFlight(route=label, date=f.date))

    def traffic(self, code: str, visits: Counter, departures: Counter, arrivals: Counter,
                names: Mapping[str, str]) -> TrafficCount:
        return TrafficCount(
            code=code,
            name=names.get(code) or code,
            count=visits[code],
            departures=departures[code],
            arrivals=arrivals[code],
        )


def _elevation_extremes(airports: Optional[Catalog], codes: Iterable[str]):
    codes = set(codes)
    highest = lowest = None
    for airport in sorted(_catalog_airports(airports), key=lambda a: a.code):
        if airport.code not in codes or airport.elevation_ft is None:
            continue
        if highest is None or airport.elevation_ft > highest.elevation_ft:
            highest = ElevationRecord(airport.code, airport.name, airport.elevation_ft, airport.elevation_m)
        if lowest is None or airport.elevation_ft < lowest.elevation_ft:
            lowest = ElevationRecord(airport.code, airport.name, airport.elevation_ft, airport.elevation_m)
    return highest, lowest


def _visit_info(flight: Flight, code: str) -> VisitInfo:
    if flight.destination.code == code:
        return VisitInfo(date=flight.date, direction="from", counterpart=flight.origin.code)
    return VisitInfo(date=flight.date, direction="to", counterpart=flight.destination.code)


def selected_airport_info(flights: Sequence[Flight], code: str,
                          airport: Optional[Airport] = None) -> SelectedAirportInfo:
    """Airport-centric view of ``flights``.

    Flights not touching ``code`` are ignored. With no matching flights the
    record is still returned, with zero counts and no visits.
    """
    touching = [f for f in flights if f.origin.code == code or f.destination.code == code]

    if airport is None:
        for f in touching:
            airport = f.origin if f.origin.code == code else f.destination
            break
    if airport is None:
        airport = Airport(code=code)

    arrivals = sum(1 for f in touching if f.destination.code == code)
    departures = sum(1 for f in touching if f.origin.code == code)

    # stable sort: equal dates keep processing order
    by_date = sorted(touching, key=lambda f: parse_date(f.date))
    first_visit = _visit_info(by_date[0], code) if by_date else None
    last_visit = _visit_info(by_date[-1], code) if by_date else None

    connected: Dict[str, None] = {}
    connected_countries: Dict[str, None] = {}
    destination_counts = Counter()
    origin_counts = Counter()
    airlines: Dict[str, None] = {}

    for f in touching:
        if f.airline:
            airlines[f.airline] = None
        if f.origin.code == code:
            connected[f.destination.code] = None
            connected_countries[f.destination.country] = None
            destination_counts[f.destination.code] += 1
        if f.destination.code == code:
            connected[f.origin.code] = None
            connected_countries[f.origin.country] = None
            origin_counts[f.origin.code] += 1

    return SelectedAirportInfo(
        code=airport.code,
        name=airport.name,
        municipality=airport.municipality,
        region=airport.region,
        region_name=airport.region_name,
        country=airport.country,
        country_name=airport.country_name,
        continent=airport.continent,
        continent_name=airport.continent_name,
        elevation_ft=airport.elevation_ft,
        elevation_m=airport.elevation_m,
        total_visits=len(touching),
        arrivals=arrivals,
        departures=departures,
        first_visit=first_visit,
        last_visit=last_visit,
        connected_airports=len(connected),
        connected_countries=tuple(connected_countries),
        top_destinations=tuple(CodeCount(c, n) for c, n in _ranked(destination_counts)[:TOP_CONNECTIONS_LIMIT]),
        top_origins=tuple(CodeCount(c, n) for c, n in _ranked(origin_counts)[:TOP_CONNECTIONS_LIMIT]),
        airlines=tuple(airlines),
    )


def compute_statistics(
    flights: Sequence[Flight],
    airports: Optional[Catalog] = None,
    *,
    all_flights: Optional[Sequence[Flight]] = None,
    selected_airport: Optional[str] = None,
    top_routes_limit: int = TOP_ROUTES_LIMIT,
) -> FlightStatistics:
    """
    Aggregate a filtered flight subset.

    Args:
        flights: The working subset (output of the filter pipeline).
        airports: Airport catalog, used for elevation extremes and for the
            selected airport's details.
        all_flights: The unfiltered collection; feeds ``years`` and
            ``airline_counts``. Defaults to ``flights``.
        selected_airport: Active airport filter, if any. Only then is
            ``selected_airport_info`` populated.
        top_routes_limit: Number of routes kept in ``busiest_routes``.

    Returns:
        A FlightStatistics snapshot. An empty subset yields zero counts and
        ``None`` extremes; it never raises.
    """
    if all_flights is None:
        all_flights = flights

    t = _Tally()
    for f in flights:
        t.add(f)

    total = len(flights)
    route_index = build_route_index(flights)

    top_countries = tuple(
        t.traffic(code, t.country_visits, t.country_departures, t.country_arrivals, t.country_names)
        for code, _ in _ranked(t.country_visits)
    )
    top_regions = tuple(
        RegionCount(
            code=code,
            name=t.region_names.get(code) or code,
            country=t.region_countries.get(code) or "",
            count=count,
        )
        for code, count in _ranked(t.region_visits)
    )
    continents = tuple(
        NamedCount(code=code, name=t.continent_names.get(code) or code, count=count)
        for code, count in _ranked(t.continent_visits)
    )
    busiest_airport = None
    ranked_airports = _ranked(t.airport_visits)
    if ranked_airports:
        busiest_airport = t.traffic(
            ranked_airports[0][0], t.airport_visits, t.airport_departures, t.airport_arrivals, t.airport_names
        )

    highest, lowest = _elevation_extremes(airports, t.airport_visits)

    info = None
    if selected_airport:
        info = selected_airport_info(flights, selected_airport, _catalog_lookup(airports, selected_airport))

    logger.debug(f"Aggregated {total} flights over {len(route_index)} routes")

    return FlightStatistics(
        total_flights=total,
        total_airports=len(t.airport_visits),
        total_countries=len(t.country_visits),
        total_airlines=len(t.airlines),
        unique_routes=len(route_index),
        total_distance_km=_half_up(t.total_distance),
        average_distance_km=_half_up(t.total_distance / total) if total else 0,
        total_flight_hours=_half_up(t.total_hours),
        domestic_flights=total - t.international,
        international_flights=t.international,
        intercontinental_flights=t.intercontinental,
        continents=continents,
        years=tuple(available_years(all_flights)),
        busiest_routes=tuple(top_routes(route_index, top_routes_limit)),
        top_countries=top_countries,
        top_regions=top_regions,
        top_airlines=tuple(airline_counts(flights)),
        airline_counts=tuple(airline_counts(all_flights)),
        busiest_airport=busiest_airport,
        most_visited_country=top_countries[0] if top_countries else None,
        longest_flight=t.longest,
        shortest_flight=t.shortest,
        first_flight=t.first[1] if t.first else None,
        last_flight=t.last[1] if t.last else None,
        highest_airport=highest,
        lowest_airport=lowest,
        selected_airport_info=info,
    )
