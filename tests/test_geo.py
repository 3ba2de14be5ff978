import pytest

from geo import distance_km, estimated_flight_hours, parse_date, route_key, route_label, year_of


def test_distance_zero_for_same_point():
    assert distance_km(40.6413, -73.7781, 40.6413, -73.7781) == 0


def test_distance_jfk_lax_is_about_3980_km():
    d = distance_km(40.6413, -73.7781, 33.9416, -118.4085)
    assert 3950 < d < 4010


def test_distance_is_symmetric():
    a = distance_km(40.6413, -73.7781, 49.0097, 2.5479)
    b = distance_km(49.0097, 2.5479, 40.6413, -73.7781)
    assert a == pytest.approx(b)


def test_route_key_ignores_direction():
    assert route_key("LAX", "JFK") == "JFK-LAX"
    assert route_key("JFK", "LAX") == "JFK-LAX"
    assert route_label("LAX", "JFK") == "LAX → JFK"


def test_year_and_date_parsing():
    assert year_of("6/15/2008") == 2008
    d = parse_date("12/3/2019")
    assert (d.year, d.month, d.day) == (2019, 12, 3)


@pytest.mark.parametrize("bad", ["2019-12-03", "12/3", "", "13/1/2020", "2/30/2020"])
def test_parse_date_rejects_malformed(bad):
    with pytest.raises(ValueError):
        parse_date(bad)


def test_estimated_hours_adds_ground_time():
    assert estimated_flight_hours(0) == 1
    assert estimated_flight_hours(1600) == 3
