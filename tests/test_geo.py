import math

import pytest

from tablescout.core.geo import (
    EARTH_RADIUS_M,
    Coordinate,
    InvalidCoordinateError,
    distance_from_reference,
    haversine_distance_m,
    map_link,
    round_meters,
)

PLACA_CATALUNYA = Coordinate(lng=2.1700, lat=41.3874)

POINTS = [
    PLACA_CATALUNYA,
    Coordinate(lng=2.1533, lat=41.3891),
    Coordinate(lng=2.1900, lat=41.3780),
    Coordinate(lng=0.0, lat=0.0),
    Coordinate(lng=-180.0, lat=-90.0),
    Coordinate(lng=180.0, lat=90.0),
    Coordinate(lng=-73.9857, lat=40.7484),
    Coordinate(lng=139.6917, lat=35.6895),
]


@pytest.mark.parametrize("a", POINTS)
@pytest.mark.parametrize("b", POINTS)
def test_haversine_is_symmetric_and_non_negative(a, b):
    d_ab = haversine_distance_m(a, b)
    d_ba = haversine_distance_m(b, a)
    assert d_ab >= 0
    assert d_ab == pytest.approx(d_ba, abs=1e-6)


@pytest.mark.parametrize("a", POINTS)
def test_haversine_identity_is_zero(a):
    assert haversine_distance_m(a, a) == 0


def test_haversine_triangle_inequality_holds_for_city_points():
    a, b, c = POINTS[0], POINTS[1], POINTS[2]
    assert haversine_distance_m(a, c) <= haversine_distance_m(a, b) + haversine_distance_m(b, c) + 1e-6


def test_placa_catalunya_to_provenca_is_about_1400m():
    d = haversine_distance_m(PLACA_CATALUNYA, Coordinate(lng=2.1533, lat=41.3891))
    assert d == pytest.approx(1406, abs=5)
    assert abs(distance_from_reference(PLACA_CATALUNYA, Coordinate(lng=2.1533, lat=41.3891)) - d) <= 0.5


def test_antipodal_points_are_half_circumference():
    d = haversine_distance_m(Coordinate(lng=0.0, lat=0.0), Coordinate(lng=180.0, lat=0.0))
    assert d == pytest.approx(math.pi * EARTH_RADIUS_M, rel=1e-9)


def test_one_degree_of_latitude():
    d = haversine_distance_m(Coordinate(lng=10.0, lat=0.0), Coordinate(lng=10.0, lat=1.0))
    assert d == pytest.approx(111_194.9, abs=0.5)


def test_round_meters_rounds_half_up():
    assert round_meters(2.5) == 3
    assert round_meters(1234.5) == 1235
    assert round_meters(1234.49) == 1234
    assert round_meters(0.0) == 0


def test_distance_from_reference_returns_int():
    d = distance_from_reference(PLACA_CATALUNYA, Coordinate(lng=2.1764, lat=41.3843))
    assert isinstance(d, int)
    assert 600 < d < 700


@pytest.mark.parametrize(
    "bad",
    [
        Coordinate(lng=180.0001, lat=0.0),
        Coordinate(lng=-181.0, lat=0.0),
        Coordinate(lng=0.0, lat=90.5),
        Coordinate(lng=0.0, lat=-91.0),
        Coordinate(lng=float("nan"), lat=0.0),
        Coordinate(lng=0.0, lat=float("inf")),
    ],
)
def test_invalid_coordinates_raise(bad):
    with pytest.raises(InvalidCoordinateError):
        haversine_distance_m(PLACA_CATALUNYA, bad)
    with pytest.raises(InvalidCoordinateError):
        distance_from_reference(bad, PLACA_CATALUNYA)


def test_invalid_coordinate_error_is_a_value_error():
    with pytest.raises(ValueError):
        haversine_distance_m(Coordinate(lng=200.0, lat=0.0), PLACA_CATALUNYA)


def test_coordinate_from_pair_is_longitude_first():
    c = Coordinate.from_pair([2.17, 41.38])
    assert c.lng == 2.17
    assert c.lat == 41.38
    assert c.as_pair() == (2.17, 41.38)
    with pytest.raises(ValueError):
        Coordinate.from_pair([1.0, 2.0, 3.0])


def test_map_link_uses_lat_then_lng():
    assert map_link(Coordinate(lng=2.17, lat=41.38)) == "https://www.google.com/maps/search/?api=1&query=41.38,2.17"
