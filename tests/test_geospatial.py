import math

import pytest

from restroreach.models.domain import Coordinate
from restroreach.services.geospatial import (
    bearing_degrees,
    eta_minutes_from_distance,
    format_distance,
    format_duration,
    haversine_km,
)
from restroreach.services.validation import InvalidCoordinate

ORIGIN = Coordinate(0.0, 0.0)


def test_haversine_one_degree_of_latitude():
    distance = haversine_km(ORIGIN, Coordinate(1.0, 0.0))

    assert distance == pytest.approx(6371.0 * math.pi / 180, rel=1e-9)


def test_haversine_is_symmetric_and_zero_for_same_point():
    berlin = Coordinate(52.5200, 13.4050)
    paris = Coordinate(48.8566, 2.3522)

    assert haversine_km(berlin, paris) == haversine_km(paris, berlin)
    assert haversine_km(berlin, paris) == pytest.approx(877.5, abs=2.0)
    assert haversine_km(berlin, berlin) == 0


def test_haversine_rejects_invalid_coordinates():
    with pytest.raises(InvalidCoordinate):
        haversine_km(ORIGIN, Coordinate(91.0, 0.0))
    with pytest.raises(InvalidCoordinate):
        haversine_km(Coordinate(0.0, float("nan")), ORIGIN)


@pytest.mark.parametrize(
    ("target", "expected"),
    [
        (Coordinate(1.0, 0.0), 0.0),
        (Coordinate(0.0, 1.0), 90.0),
        (Coordinate(-1.0, 0.0), 180.0),
        (Coordinate(0.0, -1.0), 270.0),
    ],
)
def test_bearing_cardinal_directions(target, expected):
    bearing = bearing_degrees(ORIGIN, target)

    assert bearing == pytest.approx(expected)
    assert 0 <= bearing < 360


def test_eta_minutes_from_distance_uses_city_speed_by_default():
    assert eta_minutes_from_distance(10) == 20
    assert eta_minutes_from_distance(10, 60) == 10
    assert eta_minutes_from_distance(3, 8) == 23
    assert eta_minutes_from_distance(0.24) == 0


def test_eta_minutes_from_distance_guards_non_positive_speed():
    assert eta_minutes_from_distance(12.0, 0) == 0
    assert eta_minutes_from_distance(12.0, -10) == 0


def test_eta_minutes_is_monotonic_in_distance():
    previous = 0
    for step in range(0, 400):
        minutes = eta_minutes_from_distance(step * 0.137)
        assert minutes >= 0
        assert minutes >= previous
        previous = minutes


def test_format_distance():
    assert format_distance(0.85) == "850 meters"
    assert format_distance(0.001) == "1 meter"
    assert format_distance(4.2) == "4.2 kilometers"
    assert format_distance(1.0) == "1.0 kilometer"


def test_format_duration():
    assert format_duration(1) == "1 min"
    assert format_duration(12) == "12 mins"
    assert format_duration(65) == "1 hour 5 mins"
    assert format_duration(120) == "2 hours"
