"""
Data models for the flight history engine.

Reference data (`Airport`), loaded records (`Flight`) and everything derived
from them (routes, visited airports, statistics, renderer primitives).
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union


@dataclass(frozen=True)
class Airport:
    """Represents an airport with location information."""
    code: str
    name: str = ""
    municipality: str = ""
    region: str = ""
    region_name: str = ""
    country: str = ""
    country_name: str = ""
    continent: str = ""
    continent_name: str = ""
    lat: float = 0.0
    lon: float = 0.0
    elevation_ft: Optional[float] = None
    elevation_m: Optional[float] = None

    @property
    def flag_emoji(self) -> str:
        """Convert country code to flag emoji."""
        if not self.country or len(self.country) != 2 or not self.country.isalpha():
            return "🌍"
        code_points = [ord(char) + 127397 for char in self.country.upper()]
        return chr(code_points[0]) + chr(code_points[1])

    @property
    def display_name(self) -> str:
        """Format airport for display: 🇵🇹 LIS (Lisbon)"""
        return f"{self.flag_emoji} {self.code} ({self.municipality or self.name})"

    def __repr__(self) -> str:
        return f"Airport({self.code})"


@dataclass
class VisitedAirport:
    """An airport that appears in at least one flight, with visit tallies."""
    airport: Airport
    visit_count: int = 0
    arrival_count: int = 0
    departure_count: int = 0
    visit_dates: List[str] = field(default_factory=list)

    @property
    def code(self) -> str:
        return self.airport.code

    def __repr__(self) -> str:
        return (
            f"VisitedAirport({self.code}, visits={self.visit_count}, "
            f"arr={self.arrival_count}, dep={self.departure_count})"
        )


@dataclass(frozen=True)
class Flight:
    """A single flown leg with both endpoints denormalized."""
    id: int
    date: str
    airline: str
    origin: Airport
    destination: Airport

    @property
    def label(self) -> str:
        return f"{self.origin.code} → {self.destination.code}"

    def __repr__(self) -> str:
        return f"Flight(#{self.id} {self.date} {self.label} {self.airline or '-'})"


@dataclass
class Route:
    """Undirected route between two airports and how often it was flown."""
    route_key: str
    origin: str
    destination: str
    count: int = 0
    years: List[int] = field(default_factory=list)
    dates: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class FilterSpec:
    """Active filters. ``None`` disables a stage."""
    year: Optional[int] = None
    airline: Optional[str] = None
    airport: Optional[str] = None
    route: Optional[str] = None

    def without_selection(self) -> 'FilterSpec':
        """Drop the airport/route selection, keeping year and airline."""
        return FilterSpec(year=self.year, airline=self.airline)


# ----------------------------------------------------------------------------
# Statistics records
# ----------------------------------------------------------------------------

@dataclass(frozen=True)
class CodeCount:
    code: str
    count: int


@dataclass(frozen=True)
class NamedCount:
    """Per-continent / per-airline tally."""
    code: str
    name: str
    count: int


@dataclass(frozen=True)
class TrafficCount:
    """Visits split into arrivals and departures (countries, airports)."""
    code: str
    name: str
    count: int
    departures: int
    arrivals: int


@dataclass(frozen=True)
class RegionCount:
    code: str
    name: str
    country: str
    count: int


@dataclass(frozen=True)
class DistanceRecord:
    route: str
    distance: float


@dataclass(frozen=True)
class DatedFlight:
    route: str
    date: str


@dataclass(frozen=True)
class ElevationRecord:
    code: str
    name: str
    elevation_ft: float
    elevation_m: Optional[float]


@dataclass(frozen=True)
class VisitInfo:
    """First/last visit of a selected airport.

    ``direction`` is ``"from"`` when the visit was an arrival (counterpart is
    the origin) and ``"to"`` when it was a departure.
    """
    date: str
    direction: str
    counterpart: str

    @property
    def description(self) -> str:
        return f"{self.direction} {self.counterpart}"


@dataclass(frozen=True)
class SelectedAirportInfo:
    code: str
    name: str
    municipality: str
    region: str
    region_name: str
    country: str
    country_name: str
    continent: str
    continent_name: str
    elevation_ft: Optional[float]
    elevation_m: Optional[float]
    total_visits: int
    arrivals: int
    departures: int
    first_visit: Optional[VisitInfo]
    last_visit: Optional[VisitInfo]
    connected_airports: int
    connected_countries: Tuple[str, ...]
    top_destinations: Tuple[CodeCount, ...]
    top_origins: Tuple[CodeCount, ...]
    airlines: Tuple[str, ...]


@dataclass(frozen=True)
class FlightStatistics:
    """Snapshot of everything the stats panel shows for one filter set."""
    total_flights: int = 0
    total_airports: int = 0
    total_countries: int = 0
    total_airlines: int = 0
    unique_routes: int = 0
    total_distance_km: int = 0
    average_distance_km: int = 0
    total_flight_hours: int = 0
    domestic_flights: int = 0
    international_flights: int = 0
    intercontinental_flights: int = 0
    continents: Tuple[NamedCount, ...] = ()
    years: Tuple[int, ...] = ()
    busiest_routes: Tuple[Route, ...] = ()
    top_countries: Tuple[TrafficCount, ...] = ()
    top_regions: Tuple[RegionCount, ...] = ()
    top_airlines: Tuple[NamedCount, ...] = ()
    airline_counts: Tuple[NamedCount, ...] = ()
    busiest_airport: Optional[TrafficCount] = None
    most_visited_country: Optional[TrafficCount] = None
    longest_flight: Optional[DistanceRecord] = None
    shortest_flight: Optional[DistanceRecord] = None
    first_flight: Optional[DatedFlight] = None
    last_flight: Optional[DatedFlight] = None
    highest_airport: Optional[ElevationRecord] = None
    lowest_airport: Optional[ElevationRecord] = None
    selected_airport_info: Optional[SelectedAirportInfo] = None

    @property
    def continent_counts(self) -> Dict[str, int]:
        return {c.code: c.count for c in self.continents}

    @property
    def times_around_earth(self) -> float:
        """Total distance expressed in equatorial circumferences."""
        return self.total_distance_km / 40075


# ----------------------------------------------------------------------------
# Renderer primitives
# ----------------------------------------------------------------------------

Color = Union[str, Tuple[str, str]]


@dataclass(frozen=True)
class Edge:
    """One animated arc per flight."""
    start_lat: float
    start_lng: float
    end_lat: float
    end_lng: float
    color: Color
    stroke: float
    animate_time: float
    dash_initial_gap: float
    label: str
    flight: Flight
    year: int
    route_key: str
    route_count: int
    dash_length: float = 0.01
    dash_gap: float = 0.99


@dataclass(frozen=True)
class RouteLine:
    """Static background line, one per unique route."""
    start_lat: float
    start_lng: float
    end_lat: float
    end_lng: float
    color: str
    stroke: float
    route_key: str
    route_count: int
    flights: Tuple[Flight, ...]
    is_connected: bool


@dataclass(frozen=True)
class Point:
    lat: float
    lng: float
    size: float
    color: str
    label: str
    airport: VisitedAirport


@dataclass(frozen=True)
class Label:
    lat: float
    lng: float
    text: str
    color: str = "rgba(255, 255, 255, 0.9)"
    size: float = 0.4
