"""
Route & frequency index.

`build_route_index()` is run over two collections: the full flight set
(global route weight for colors and strokes, stable across filter changes)
and the filtered subset (the "top routes" ranking for what is in view).
"""

from typing import Dict, Iterable, List

from geo import route_key, year_of
from models import Flight, Route


def build_route_index(flights: Iterable[Flight]) -> Dict[str, Route]:
    """Single pass: route key -> Route, in first-seen order.

    The first flight on a key fixes the route's displayed direction.
    """
    index: Dict[str, Route] = {}
    for f in flights:
        key = route_key(f.origin.code, f.destination.code)
        route = index.get(key)
        if route is None:
            route = index[key] = Route(route_key=key, origin=f.origin.code, destination=f.destination.code)
        route.count += 1
        year = year_of(f.date)
        if year not in route.years:
            route.years.append(year)
        route.dates.append(f.date)
    return index


def max_route_count(index: Dict[str, Route]) -> int:
    """Largest route count, never below 1 (safe denominator)."""
    return max((r.count for r in index.values()), default=1) or 1


def top_routes(index: Dict[str, Route], limit: int = 10) -> List[Route]:
    """Busiest routes first; equal counts ordered by route key."""
    ranked = sorted(index.values(), key=lambda r: (-r.count, r.route_key))
    return ranked[:limit]
