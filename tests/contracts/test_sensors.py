"""Tests for sensor sample contracts."""

import pytest
from pydantic import ValidationError

from donner.contracts.common import GeoPoint
from donner.contracts.enums import SensorKind
from donner.contracts.sensors import HeadingSample, LocationSample


class TestHeadingSample:
    def test_prefers_true_heading(self):
        sample = HeadingSample(true_heading_deg=10.0, magnetic_heading_deg=12.0)
        assert sample.resolved_heading_deg == 10.0

    def test_falls_back_to_magnetic(self):
        sample = HeadingSample(true_heading_deg=-1.0, magnetic_heading_deg=12.0)
        assert sample.resolved_heading_deg == 12.0

    def test_magnetic_360_wraps_to_zero(self):
        sample = HeadingSample(magnetic_heading_deg=360.0)
        assert sample.resolved_heading_deg == 0.0

    def test_calibration_from_accuracy(self):
        assert HeadingSample(magnetic_heading_deg=0.0, accuracy_deg=5.0).is_calibrated
        assert not HeadingSample(magnetic_heading_deg=0.0).is_calibrated

    def test_kind(self):
        assert HeadingSample(magnetic_heading_deg=0.0).kind == SensorKind.HEADING


class TestLocationSample:
    def test_kind(self):
        sample = LocationSample(coordinate=GeoPoint(latitude=48.0, longitude=2.0))
        assert sample.kind == SensorKind.LOCATION

    def test_out_of_range_rejected(self):
        with pytest.raises(ValidationError):
            LocationSample(coordinate=GeoPoint(latitude=91.0, longitude=2.0))
