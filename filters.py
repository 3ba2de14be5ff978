"""
Filter pipeline.

Stages run in a fixed order, each narrowing the previous stage's output:
year -> airport -> route -> airline. A ``None`` filter skips its stage, and so
does an empty airport or route selection.
An empty result is a normal outcome.
"""

from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from geo import route_key, year_of
from models import FilterSpec, Flight, NamedCount


def by_year(flights: Iterable[Flight], year: int) -> List[Flight]:
    return [f for f in flights if year_of(f.date) == year]


def by_airport(flights: Iterable[Flight], code: str) -> List[Flight]:
    return [f for f in flights if f.origin.code == code or f.destination.code == code]


def by_route(flights: Iterable[Flight], key: str) -> List[Flight]:
    return [f for f in flights if route_key(f.origin.code, f.destination.code) == key]


def by_airline(flights: Iterable[Flight], airline: str) -> List[Flight]:
    return [f for f in flights if f.airline == airline]


def _stages(spec: FilterSpec) -> List[Tuple[str, Optional[object], Callable]]:
    return [
        ("year", spec.year, by_year),
        # an empty airport or route means nothing is selected
        ("airport", spec.airport or None, by_airport),
        ("route", spec.route or None, by_route),
        ("airline", spec.airline, by_airline),
    ]


def apply_filters(flights: Sequence[Flight], spec: Optional[FilterSpec] = None) -> List[Flight]:
    """Return the working subset for ``spec`` (all flights when no filter is set)."""
    result = list(flights)
    if spec is None:
        return result
    for _name, value, stage in _stages(spec):
        if value is None:
            continue
        result = stage(result, value)
    return result


def stage_sizes(flights: Sequence[Flight], spec: FilterSpec) -> List[Tuple[str, int]]:
    """Subset size after each active stage, for diagnostics."""
    sizes = [("all", len(flights))]
    result = list(flights)
    for name, value, stage in _stages(spec):
        if value is None:
            continue
        result = stage(result, value)
        sizes.append((name, len(result)))
    return sizes


def airline_counts(flights: Iterable[Flight]) -> List[NamedCount]:
    """Flights per named airline, busiest first (drives the airline picker)."""
    counts = {}
    for f in flights:
        if f.airline:
            counts[f.airline] = counts.get(f.airline, 0) + 1
    ranked = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    return [NamedCount(code=airline, name=airline, count=count) for airline, count in ranked]


def available_years(flights: Iterable[Flight]) -> List[int]:
    return sorted({year_of(f.date) for f in flights})
