"""Tests for storm grouping and map projections."""

from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone

import pytest

from donner.contracts.common import GeoPoint
from donner.contracts.strike import HeadingFix, Strike
from donner.services.storms import (
    group_into_storms,
    map_region,
    storm_for_strike,
    storm_path,
)

T0 = datetime(2025, 6, 15, 18, 0, tzinfo=timezone.utc)
OBSERVER = GeoPoint(latitude=48.0, longitude=2.0)


def _at(offset_s: float) -> Strike:
    return Strike(id=f"s{offset_s:g}", lightning_time=T0 + timedelta(seconds=offset_s))


def _located(offset_s: float, delay_s: float = 3.0, bearing: float = 0.0) -> Strike:
    lightning = T0 + timedelta(seconds=offset_s)
    return Strike(
        id=f"s{offset_s:g}",
        lightning_time=lightning,
        thunder_time=lightning + timedelta(seconds=delay_s),
        heading_fix=HeadingFix(bearing_deg=bearing, location=OBSERVER),
    )


def _ids(storms) -> list[list[str]]:
    return [[s.id for s in storm.strikes] for storm in storms]


class TestGroupIntoStorms:
    def test_empty(self):
        assert group_into_storms([]) == []

    def test_single_strike(self):
        storms = group_into_storms([_at(0)])
        assert _ids(storms) == [["s0"]]

    def test_gaps_within_threshold_stay_together(self):
        # Gaps 1800 s and 3200 s, both <= 3600 s
        storms = group_into_storms([_at(0), _at(1800), _at(5000)])
        assert _ids(storms) == [["s0", "s1800", "s5000"]]

    def test_gap_equal_to_threshold_stays_together(self):
        storms = group_into_storms([_at(0), _at(3600)])
        assert len(storms) == 1

    def test_gap_above_threshold_splits_newest_first(self):
        storms = group_into_storms([_at(0), _at(1800), _at(5401)])
        assert _ids(storms) == [["s5401"], ["s0", "s1800"]]

    def test_unsorted_input(self):
        storms = group_into_storms([_at(9000), _at(0), _at(100)])
        assert _ids(storms) == [["s9000"], ["s0", "s100"]]

    def test_custom_threshold(self):
        storms = group_into_storms([_at(0), _at(100), _at(300)], gap_threshold_s=150)
        assert _ids(storms) == [["s300"], ["s0", "s100"]]

    def test_chained_small_gaps_span_beyond_threshold(self):
        # Partition is on adjacent gaps, not on total span
        strikes = [_at(i * 3000) for i in range(5)]
        storms = group_into_storms(strikes)
        assert len(storms) == 1
        assert storms[0].duration_minutes == 200

    def test_adjacent_gap_rule_on_random_input(self):
        rng = random.Random(7)
        offsets = sorted({rng.randint(0, 40) * 600 for _ in range(30)})
        strikes = [_at(o) for o in offsets]
        storms = group_into_storms(strikes)
        storm_of = {s.id: i for i, storm in enumerate(storms) for s in storm.strikes}

        for previous, current in zip(strikes, strikes[1:]):
            gap = (current.lightning_time - previous.lightning_time).total_seconds()
            if gap > 3600:
                assert storm_of[previous.id] != storm_of[current.id]
            else:
                assert storm_of[previous.id] == storm_of[current.id]

        starts = [storm.start_time for storm in storms]
        assert starts == sorted(starts, reverse=True)


class TestStormForStrike:
    def test_matches_global_partition(self):
        strikes = [_at(o) for o in (0, 1000, 4000, 9000, 9500, 20000)]
        storms = group_into_storms(strikes)
        for storm in storms:
            for strike in storm.strikes:
                selected = storm_for_strike(strikes, strike.id)
                assert selected is not None
                assert _ids([selected]) == _ids([storm])

    def test_unknown_strike(self):
        assert storm_for_strike([_at(0)], "missing") is None


class TestStormPath:
    def test_only_located_strikes_in_order(self):
        strikes = [_located(600, bearing=90.0), _at(300), _located(0)]
        path = storm_path(strikes)
        assert len(path) == 2
        assert path[0] == strikes[2].estimated_location
        assert path[1] == strikes[0].estimated_location


class TestMapRegion:
    def test_default_region_without_located_strikes(self):
        region = map_region([_at(0)])
        assert region.center == GeoPoint(latitude=0.0, longitude=0.0)
        assert region.latitude_delta == 1.0
        assert region.longitude_delta == 1.0

    def test_close_strike_uses_minimum_span(self):
        strike = _located(0)
        region = map_region([strike])
        estimated = strike.estimated_location
        assert region.center.latitude == pytest.approx((OBSERVER.latitude + estimated.latitude) / 2)
        assert region.center.longitude == pytest.approx(OBSERVER.longitude)
        assert region.latitude_delta == 0.05
        assert region.longitude_delta == 0.05

    def test_far_strike_pads_span(self):
        strike = _located(0, delay_s=60.0)
        region = map_region([strike])
        spread = strike.estimated_location.latitude - OBSERVER.latitude
        assert region.latitude_delta == pytest.approx(spread * 1.5)
        assert region.longitude_delta == 0.05
