"""
Visualization projection: flights and visited airports -> renderer primitives.

Pure functions of (flights, global route index, color mode, selection).
Stroke widths and frequency colors come from the *global* route index so
they stay put while the user changes filters.
"""

from typing import Dict, Iterable, List, Mapping, Optional, Sequence

import scales
from geo import flight_distance_km, route_key, year_of
from models import Edge, Flight, Label, Point, Route, RouteLine, VisitedAirport
from routes import max_route_count

COLOR_MODES = ("default", "year", "frequency", "airline")

ROUTE_LINE_COLOR = "rgba(140, 120, 200, 0.6)"
ROUTE_LINE_CONNECTED = "rgba(0, 255, 255, 0.7)"
ROUTE_LINE_DIMMED = "rgba(140, 120, 200, 0.15)"
SELECTED_POINT_COLOR = "hsl(180, 100%, 60%)"
CONNECTED_POINT_COLOR = "hsl(180, 80%, 55%)"
MIN_ROUTE_LINE_STROKE = 0.8


def _is_connected(flight: Flight, selected_airport: Optional[str], selected_route: Optional[str]) -> bool:
    if selected_airport and selected_airport in (flight.origin.code, flight.destination.code):
        return True
    if selected_route and route_key(flight.origin.code, flight.destination.code) == selected_route:
        return True
    return False


def edge_color(mode: str, flight: Flight, route_count: int, max_count: int):
    if mode == "year":
        return scales.year_color(year_of(flight.date))
    if mode == "frequency":
        return scales.frequency_color(route_count, max_count)
    if mode == "airline":
        return scales.airline_color(flight.airline)
    return scales.default_gradient(route_count, max_count)


def build_edges(
    flights: Iterable[Flight],
    route_index: Mapping[str, Route],
    color_mode: str = "default",
    selected_airport: Optional[str] = None,
    selected_route: Optional[str] = None,
) -> List[Edge]:
    """One animated arc per flight.

    ``route_index`` must be built over the full flight set. Flights sharing a
    route get staggered dash offsets (0/N, 1/N, ...) so their animated dots
    spread along the arc.
    """
    if color_mode not in COLOR_MODES:
        raise ValueError(f"Unknown color mode {color_mode!r}; expected one of {', '.join(COLOR_MODES)}")

    max_count = max_route_count(route_index)
    has_selection = bool(selected_airport or selected_route)
    seen_per_route: Dict[str, int] = {}
    edges: List[Edge] = []

    for f in flights:
        key = route_key(f.origin.code, f.destination.code)
        route = route_index.get(key)
        count = route.count if route is not None else 1

        position = seen_per_route.get(key, 0)
        seen_per_route[key] = position + 1

        color = edge_color(color_mode, f, count, max_count)
        stroke = scales.stroke_width(count, max_count)
        if has_selection:
            if _is_connected(f, selected_airport, selected_route):
                color = scales.HIGHLIGHT_GRADIENT
                stroke *= 1.5
            else:
                color = scales.dim_color(color)
                stroke *= 0.7

        edges.append(Edge(
            start_lat=f.origin.lat,
            start_lng=f.origin.lon,
            end_lat=f.destination.lat,
            end_lng=f.destination.lon,
            color=color,
            stroke=stroke,
            animate_time=scales.animation_ms(flight_distance_km(f)),
            dash_initial_gap=position / count if count > 1 else 0.0,
            label=f.label,
            flight=f,
            year=year_of(f.date),
            route_key=key,
            route_count=count,
        ))
    return edges


def build_route_lines(
    edges: Sequence[Edge],
    selected_airport: Optional[str] = None,
    selected_route: Optional[str] = None,
) -> List[RouteLine]:
    """Static background line per unique route, carrying all its flights."""
    grouped: Dict[str, List[Edge]] = {}
    for edge in edges:
        grouped.setdefault(edge.route_key, []).append(edge)

    has_selection = bool(selected_airport or selected_route)
    lines: List[RouteLine] = []
    for key, route_edges in grouped.items():
        first = route_edges[0]
        flights = tuple(e.flight for e in route_edges)
        base = first.stroke * 0.8
        connected = has_selection and any(_is_connected(f, selected_airport, selected_route) for f in flights)

        if has_selection:
            stroke = base * 1.5 if connected else base
            color = ROUTE_LINE_CONNECTED if connected else ROUTE_LINE_DIMMED
        else:
            # keep thin routes wide enough to hover
            stroke = max(MIN_ROUTE_LINE_STROKE, base)
            color = ROUTE_LINE_COLOR

        lines.append(RouteLine(
            start_lat=first.start_lat,
            start_lng=first.start_lng,
            end_lat=first.end_lat,
            end_lng=first.end_lng,
            color=color,
            stroke=stroke,
            route_key=key,
            route_count=first.route_count,
            flights=flights,
            is_connected=connected,
        ))
    return lines


def _connected_codes(edges: Iterable[Edge], selected_airport: Optional[str]) -> set:
    codes = set()
    if selected_airport:
        codes.add(selected_airport)
        for e in edges:
            if e.flight.origin.code == selected_airport:
                codes.add(e.flight.destination.code)
            elif e.flight.destination.code == selected_airport:
                codes.add(e.flight.origin.code)
    return codes


def build_points(
    visited: Mapping[str, VisitedAirport],
    visible_codes: Optional[set] = None,
    selected_airport: Optional[str] = None,
    selected_route: Optional[str] = None,
    edges: Sequence[Edge] = (),
) -> List[Point]:
    """Airport markers, square-root sized by visit count.

    ``visible_codes`` limits the markers (e.g. to airports in the current
    year); ``None`` shows every visited airport. With a selection, the
    selected airport (or both route endpoints) is emphasized, its
    neighbours tinted, and everything else dimmed.
    """
    max_visits = max((v.visit_count for v in visited.values()), default=1) or 1
    selected_codes = set()
    if selected_airport:
        selected_codes.add(selected_airport)
    if selected_route:
        selected_codes.update(selected_route.split("-"))
    connected = _connected_codes(edges, selected_airport)

    points: List[Point] = []
    for code, entry in visited.items():
        if visible_codes is not None and code not in visible_codes:
            continue

        hue, saturation, lightness = scales.marker_hsl(entry.visit_count, max_visits)
        size = scales.marker_size(entry.visit_count, max_visits)
        color = scales.hsl(hue, saturation, lightness)

        if selected_codes:
            if code in selected_codes:
                color = SELECTED_POINT_COLOR
                size = max(size * 1.5, 0.5)
            elif code in connected:
                color = CONNECTED_POINT_COLOR
                size *= 1.2
            else:
                color = scales.hsl(hue, saturation * 0.3, lightness * 0.5)
                size *= 0.7

        points.append(Point(
            lat=entry.airport.lat,
            lng=entry.airport.lon,
            size=size,
            color=color,
            label=code,
            airport=entry,
        ))
    return points


def build_labels(visited: Mapping[str, VisitedAirport], visible_codes: Optional[set] = None) -> List[Label]:
    return [
        Label(lat=entry.airport.lat, lng=entry.airport.lon, text=code)
        for code, entry in visited.items()
        if visible_codes is None or code in visible_codes
    ]


def visible_airport_codes(flights: Iterable[Flight]) -> set:
    codes = set()
    for f in flights:
        codes.add(f.origin.code)
        codes.add(f.destination.code)
    return codes
