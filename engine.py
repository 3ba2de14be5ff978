"""
Flight History - engine facade and command-line summary.

`FlightHistory` holds the loaded collections and serves memoized views:

    history = FlightHistory.from_config(load_config())
    stats = history.statistics(FilterSpec(year=2019))
    view = history.view(FilterSpec(airport="JFK"), color_mode="year")

Run ``python engine.py --help`` for the CLI.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional, Sequence

from airports import AirportDB, build_visited_airports
from cache import ViewCache
from config import LoadedConfig, config_diagnostics, load_config, setup_logging
from datasource import DataSourceError, load_records
from filters import apply_filters
from flights import enrich_flights
from geo import route_key
from models import Edge, FilterSpec, Flight, FlightStatistics, Label, Point, Route, RouteLine, VisitedAirport
from projection import build_edges, build_labels, build_points, build_route_lines, visible_airport_codes
from routes import build_route_index
from stats import TOP_ROUTES_LIMIT, compute_statistics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FlightView:
    """Everything the globe needs for one filter set."""
    statistics: FlightStatistics
    edges: List[Edge]
    route_lines: List[RouteLine]
    points: List[Point]
    labels: List[Label]


class FlightHistory:
    """Loaded flight data plus the indices that do not depend on filters."""

    def __init__(self, catalog: AirportDB, flights: Sequence[Flight],
                 top_routes_limit: int = TOP_ROUTES_LIMIT, cache: Optional[ViewCache] = None):
        self.catalog = catalog
        self.top_routes_limit = top_routes_limit
        self.cache = cache or ViewCache()
        self._load(flights)

    def _load(self, flights: Sequence[Flight]) -> None:
        self.flights: List[Flight] = list(flights)
        self.visited: Dict[str, VisitedAirport] = build_visited_airports(self.flights, self.catalog)
        self.route_index: Dict[str, Route] = build_route_index(self.flights)
        self.cache.clear_all()
        logger.info(
            f"Loaded {len(self.flights)} flights, {len(self.visited)} visited airports, "
            f"{len(self.route_index)} routes"
        )

    @classmethod
    def from_records(cls, airport_records, flight_records, **kwargs) -> 'FlightHistory':
        catalog = AirportDB.from_records(airport_records)
        return cls(catalog, enrich_flights(flight_records, catalog), **kwargs)

    @classmethod
    def from_config(cls, cfg: Optional[LoadedConfig] = None) -> 'FlightHistory':
        cfg = cfg or load_config()
        return cls.from_records(
            load_records(cfg.airports_source, cfg.http_timeout),
            load_records(cfg.flights_source, cfg.http_timeout),
            top_routes_limit=cfg.top_routes_limit,
        )

    def replace_flights(self, flights: Sequence[Flight]) -> None:
        """Swap the whole flight collection; all derived data is rebuilt."""
        self._load(flights)

    def filtered(self, spec: Optional[FilterSpec] = None) -> List[Flight]:
        return apply_filters(self.flights, spec)

    def statistics(self, spec: Optional[FilterSpec] = None) -> FlightStatistics:
        spec = spec or FilterSpec()
        return self.cache.get_or_compute(
            "statistics", asdict(spec),
            lambda: compute_statistics(
                self.filtered(spec),
                self.catalog,
                all_flights=self.flights,
                selected_airport=spec.airport,
                top_routes_limit=self.top_routes_limit,
            ),
        )

    def view(self, spec: Optional[FilterSpec] = None, color_mode: str = "default") -> FlightView:
        spec = spec or FilterSpec()
        params = dict(asdict(spec), color_mode=color_mode)
        return self.cache.get_or_compute("view", params, lambda: self._build_view(spec, color_mode))

    def _build_view(self, spec: FilterSpec, color_mode: str) -> FlightView:
        # the globe keeps the selection's neighbourhood visible, so edges and
        # points come from the year/airline subset and the selection only
        # highlights
        in_view = self.filtered(spec.without_selection())
        edges = build_edges(in_view, self.route_index, color_mode, spec.airport, spec.route)
        visible = visible_airport_codes(in_view) if spec.year is not None else None
        return FlightView(
            statistics=self.statistics(spec),
            edges=edges,
            route_lines=build_route_lines(edges, spec.airport, spec.route),
            points=build_points(self.visited, visible, spec.airport, spec.route, edges),
            labels=build_labels(self.visited, visible),
        )


def _summary_lines(stats: FlightStatistics, catalog: AirportDB) -> List[str]:
    lines = [
        f"Flights:          {stats.total_flights}",
        f"Airports:         {stats.total_airports}",
        f"Countries:        {stats.total_countries}",
        f"Airlines:         {stats.total_airlines}",
        f"Unique routes:    {stats.unique_routes}",
        f"Distance:         {stats.total_distance_km:,} km "
        f"({stats.times_around_earth:.1f}x around Earth, avg {stats.average_distance_km:,} km)",
        f"Time in the air:  ~{stats.total_flight_hours:,} h",
        f"Domestic/Intl:    {stats.domestic_flights}/{stats.international_flights} "
        f"({stats.intercontinental_flights} intercontinental)",
    ]
    if stats.first_flight and stats.last_flight:
        lines.append(f"First/last:       {stats.first_flight.date} {stats.first_flight.route} / "
                     f"{stats.last_flight.date} {stats.last_flight.route}")
    if stats.longest_flight:
        lines.append(f"Longest:          {stats.longest_flight.route} ({stats.longest_flight.distance:,.0f} km)")
    if stats.shortest_flight:
        lines.append(f"Shortest:         {stats.shortest_flight.route} ({stats.shortest_flight.distance:,.0f} km)")
    if stats.busiest_airport:
        airport = catalog.get_airport(stats.busiest_airport.code)
        label = airport.display_name if airport else stats.busiest_airport.code
        lines.append(f"Busiest airport:  {label} x{stats.busiest_airport.count}")
    if stats.most_visited_country:
        lines.append(f"Top country:      {stats.most_visited_country.name} x{stats.most_visited_country.count}")
    if stats.highest_airport and stats.lowest_airport:
        lines.append(f"Highest/lowest:   {stats.highest_airport.code} ({stats.highest_airport.elevation_ft:,.0f} ft) / "
                     f"{stats.lowest_airport.code} ({stats.lowest_airport.elevation_ft:,.0f} ft)")
    if stats.continents:
        lines.append("Continents:       " + ", ".join(f"{c.name or c.code} {c.count}" for c in stats.continents))
    if stats.busiest_routes:
        lines.append("Top routes:")
        for r in stats.busiest_routes:
            lines.append(f"  {r.origin} ↔ {r.destination}  x{r.count}")

    info = stats.selected_airport_info
    if info is not None:
        lines.append(f"Selected airport: {info.code} {info.name}".rstrip())
        lines.append(f"  visits {info.total_visits} (arr {info.arrivals}, dep {info.departures}), "
                     f"{info.connected_airports} connected airports")
        if info.first_visit:
            lines.append(f"  first visit {info.first_visit.date} {info.first_visit.description}")
        if info.last_visit:
            lines.append(f"  last visit  {info.last_visit.date} {info.last_visit.description}")
    return lines


def _canonical_route(value: str) -> str:
    codes = [c.strip().upper() for c in value.split("-", 1)]
    return route_key(*codes) if len(codes) == 2 else codes[0]


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Summarize flight history statistics.")
    parser.add_argument("--airports", help="Airport collection (path or URL)")
    parser.add_argument("--flights", help="Flight collection (path or URL)")
    parser.add_argument("--year", type=int, default=None)
    parser.add_argument("--airline", default=None)
    parser.add_argument("--airport", default=None, help="Airport code to focus on")
    parser.add_argument("--route", default=None, help="Route key, e.g. JFK-LAX")
    parser.add_argument("--json", action="store_true", help="Print statistics as JSON")
    parser.add_argument("--diagnostics", action="store_true", help="Show configuration diagnostics and exit")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    cfg = load_config()
    setup_logging(cfg.log_level)

    if args.diagnostics:
        print(config_diagnostics())
        return 0

    airports_source = args.airports or cfg.airports_source
    flights_source = args.flights or cfg.flights_source
    try:
        history = FlightHistory.from_records(
            load_records(airports_source, cfg.http_timeout),
            load_records(flights_source, cfg.http_timeout),
            top_routes_limit=cfg.top_routes_limit,
        )
    except DataSourceError as e:
        logger.error(f"Could not load flight data: {e}")
        return 1

    spec = FilterSpec(
        year=args.year,
        airline=args.airline,
        airport=args.airport.upper() if args.airport else None,
        route=_canonical_route(args.route) if args.route else None,
    )
    stats = history.statistics(spec)

    if args.json:
        print(json.dumps(asdict(stats), indent=2, ensure_ascii=False))
    else:
        print("\n".join(_summary_lines(stats, history.catalog)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
