"""Tests for destination-point projection and great-circle distance."""

from __future__ import annotations

import math

import pytest

from donner.contracts.common import GeoPoint
from donner.services.geodesy import (
    EARTH_RADIUS_M,
    destination_point,
    great_circle_distance_m,
    normalize_bearing,
)

ORIGIN = GeoPoint(latitude=0.0, longitude=0.0)


class TestDestinationPoint:
    def test_due_north_from_origin(self):
        result = destination_point(ORIGIN, 0.0, 1000.0)
        assert result.latitude > 0
        assert result.longitude == pytest.approx(0.0, abs=1e-12)
        assert result.latitude == pytest.approx(math.degrees(1000.0 / EARTH_RADIUS_M))

    def test_due_east_from_origin(self):
        result = destination_point(ORIGIN, 90.0, 1000.0)
        assert result.longitude > 0
        assert result.latitude == pytest.approx(0.0, abs=1e-12)

    def test_due_south_and_west(self):
        south = destination_point(ORIGIN, 180.0, 1000.0)
        west = destination_point(ORIGIN, 270.0, 1000.0)
        assert south.latitude < 0
        assert west.longitude < 0

    def test_zero_distance_returns_origin(self):
        origin = GeoPoint(latitude=48.8566, longitude=2.3522)
        result = destination_point(origin, 123.0, 0.0)
        assert result.latitude == pytest.approx(origin.latitude)
        assert result.longitude == pytest.approx(origin.longitude)

    @pytest.mark.parametrize(
        "origin",
        [
            GeoPoint(latitude=0.0, longitude=0.0),
            GeoPoint(latitude=48.8566, longitude=2.3522),
            GeoPoint(latitude=-33.8688, longitude=151.2093),
            GeoPoint(latitude=64.1466, longitude=-21.9426),
        ],
    )
    @pytest.mark.parametrize("bearing", [0.0, 45.0, 133.3, 270.0, 359.9])
    @pytest.mark.parametrize("distance", [100.0, 3430.0, 9999.0])
    def test_projection_distance_is_preserved(self, origin, bearing, distance):
        result = destination_point(origin, bearing, distance)
        assert great_circle_distance_m(origin, result) == pytest.approx(distance, abs=1.0)


class TestGreatCircleDistance:
    def test_same_point_is_zero(self):
        point = GeoPoint(latitude=48.0, longitude=2.0)
        assert great_circle_distance_m(point, point) == 0.0

    def test_symmetric(self):
        a = GeoPoint(latitude=48.0, longitude=2.0)
        b = GeoPoint(latitude=48.5, longitude=2.7)
        assert great_circle_distance_m(a, b) == pytest.approx(great_circle_distance_m(b, a))

    def test_one_degree_of_latitude(self):
        a = GeoPoint(latitude=0.0, longitude=0.0)
        b = GeoPoint(latitude=1.0, longitude=0.0)
        expected = math.radians(1.0) * EARTH_RADIUS_M
        assert great_circle_distance_m(a, b) == pytest.approx(expected)


class TestNormalizeBearing:
    @pytest.mark.parametrize(
        "raw, expected",
        [(0.0, 0.0), (359.5, 359.5), (360.0, 0.0), (-90.0, 270.0), (725.0, 5.0), (-1e-20, 0.0)],
    )
    def test_wraps_into_range(self, raw, expected):
        assert normalize_bearing(raw) == pytest.approx(expected)
