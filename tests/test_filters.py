from filters import airline_counts, apply_filters, available_years, stage_sizes
from models import FilterSpec


def test_no_filter_returns_everything(three_flights):
    assert apply_filters(three_flights) == three_flights
    assert apply_filters(three_flights, FilterSpec()) == three_flights


def test_year_filter(three_flights):
    assert len(apply_filters(three_flights, FilterSpec(year=2020))) == 2
    assert [f.label for f in apply_filters(three_flights, FilterSpec(year=2021))] == ["JFK → ORD"]
    assert apply_filters(three_flights, FilterSpec(year=1999)) == []


def test_airport_filter_matches_either_endpoint(three_flights):
    assert len(apply_filters(three_flights, FilterSpec(airport="JFK"))) == 3
    assert len(apply_filters(three_flights, FilterSpec(airport="LAX"))) == 2
    assert apply_filters(three_flights, FilterSpec(airport="CDG")) == []


def test_route_filter_is_direction_independent(three_flights):
    assert len(apply_filters(three_flights, FilterSpec(route="JFK-LAX"))) == 2


def test_airline_filter_is_exact(three_flights):
    assert len(apply_filters(three_flights, FilterSpec(airline="United"))) == 1
    assert apply_filters(three_flights, FilterSpec(airline="united")) == []


def test_filters_only_narrow(three_flights):
    specs = [
        FilterSpec(year=2020),
        FilterSpec(year=2020, airport="JFK"),
        FilterSpec(year=2020, airport="JFK", route="JFK-LAX"),
        FilterSpec(year=2020, airport="JFK", route="JFK-LAX", airline="Delta"),
    ]
    previous = set(f.id for f in three_flights)
    for spec in specs:
        current = set(f.id for f in apply_filters(three_flights, spec))
        assert current <= previous
        previous = current


def test_stage_sizes(three_flights):
    sizes = stage_sizes(three_flights, FilterSpec(year=2020, airline="United"))
    assert sizes == [("all", 3), ("year", 2), ("airline", 0)]


def test_airline_counts_and_years(three_flights, make_flight):
    flights = three_flights + [make_flight("2/2/2019", "ORD", "JFK", airline="")]
    counts = airline_counts(flights)
    assert [(c.name, c.count) for c in counts] == [("Delta", 2), ("United", 1)]
    assert available_years(flights) == [2019, 2020, 2021]


def test_empty_airport_or_route_selects_nothing(three_flights):
    assert apply_filters(three_flights, FilterSpec(airport="")) == three_flights
    assert apply_filters(three_flights, FilterSpec(route="")) == three_flights
    assert stage_sizes(three_flights, FilterSpec(airport="", year=2020)) == [("all", 3), ("year", 2)]
    # the airline stage still matches blank names exactly
    assert apply_filters(three_flights, FilterSpec(airline="")) == []
