"""
Tests for great-circle distance, centroid and bounds helpers.
"""

import math

import numpy as np
import pytest

from kmzlens.core.analytics import (
    EARTH_RADIUS_KM,
    CoordinateAccumulator,
    calculate_bounds,
    calculate_centroid,
    haversine_km,
    haversine_km_array,
    route_distance_km,
)
from kmzlens.models import BoundingBox, Coordinate

ONE_DEGREE_KM = EARTH_RADIUS_KM * math.pi / 180


class TestHaversine:
    """Tests for haversine distance."""

    def test_same_point_is_zero(self):
        point = Coordinate(lat=37.42, lng=-122.08)

        assert haversine_km(point, point) == 0.0

    def test_symmetric(self):
        a = Coordinate(lat=51.5074, lng=-0.1278)
        b = Coordinate(lat=48.8566, lng=2.3522)

        assert haversine_km(a, b) == pytest.approx(haversine_km(b, a))

    def test_one_degree_along_equator(self):
        distance = haversine_km(Coordinate(lat=0, lng=0), Coordinate(lat=0, lng=1))

        assert distance == pytest.approx(ONE_DEGREE_KM)

    def test_london_to_paris(self):
        distance = haversine_km(
            Coordinate(lat=51.5074, lng=-0.1278), Coordinate(lat=48.8566, lng=2.3522)
        )

        assert distance == pytest.approx(343.5, abs=1.0)

    def test_antipodal_points(self):
        """Test the half circumference is returned without domain errors."""
        distance = haversine_km(Coordinate(lat=0, lng=0), Coordinate(lat=0, lng=180))

        assert distance == pytest.approx(math.pi * EARTH_RADIUS_KM)

    def test_array_matches_scalar(self):
        origin = Coordinate(lat=10, lng=20)
        others = [Coordinate(lat=0, lng=0), Coordinate(lat=10, lng=20), Coordinate(lat=-5, lng=150)]

        distances = haversine_km_array(
            origin,
            np.array([c.lat for c in others]),
            np.array([c.lng for c in others]),
        )

        assert distances.tolist() == pytest.approx([haversine_km(origin, c) for c in others])


class TestRouteDistance:
    """Tests for path length."""

    def test_empty_and_single_point(self):
        assert route_distance_km([]) == 0.0
        assert route_distance_km([Coordinate(lat=1, lng=1)]) == 0.0

    def test_sum_of_legs(self):
        """Test the path length is the sum of legs, not the direct distance."""
        p0 = Coordinate(lat=0, lng=0)
        p1 = Coordinate(lat=0, lng=1)
        p2 = Coordinate(lat=1, lng=1)

        total = route_distance_km([p0, p1, p2])

        assert total == pytest.approx(haversine_km(p0, p1) + haversine_km(p1, p2))
        assert total > haversine_km(p0, p2)


class TestCentroidAndBounds:
    """Tests for centroid and bounding box helpers."""

    def test_centroid(self):
        centroid = calculate_centroid(
            [Coordinate(lat=0, lng=0), Coordinate(lat=2, lng=4), Coordinate(lat=4, lng=2)]
        )

        assert centroid.lat == pytest.approx(2.0)
        assert centroid.lng == pytest.approx(2.0)

    def test_centroid_of_nothing(self):
        with pytest.raises(ValueError):
            calculate_centroid([])

    def test_bounds(self):
        bounds = calculate_bounds(
            [Coordinate(lat=-3, lng=10), Coordinate(lat=5, lng=-7), Coordinate(lat=1, lng=2)]
        )

        assert bounds == BoundingBox(north=5, south=-3, east=10, west=-7)
        assert not bounds.is_empty

    def test_bounds_of_nothing(self):
        bounds = calculate_bounds([])

        assert bounds == BoundingBox.empty()
        assert bounds.is_empty

    def test_accumulator_average(self):
        accumulator = CoordinateAccumulator()
        assert accumulator.average == Coordinate(lat=0, lng=0)

        accumulator.add_all([Coordinate(lat=1, lng=10), Coordinate(lat=3, lng=20)])

        assert accumulator.count == 2
        assert accumulator.average == Coordinate(lat=2, lng=15)
