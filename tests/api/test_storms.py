"""Tests for storm projection endpoints."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from donner.contracts.common import GeoPoint
from donner.contracts.strike import HeadingFix, Strike
from donner.persistence.repositories.strike_repo import StrikeRepository
from tests.api.conftest import TEST_USER_ID

T0 = datetime(2025, 6, 15, 18, 0, tzinfo=timezone.utc)


async def _seed(*offsets_min: float) -> None:
    repo = StrikeRepository()
    for i, offset in enumerate(offsets_min):
        start = T0 + timedelta(minutes=offset)
        await repo.save(
            TEST_USER_ID,
            Strike(
                id=f"s{i}",
                lightning_time=start,
                thunder_time=start + timedelta(seconds=6),
                heading_fix=HeadingFix(
                    bearing_deg=45.0, location=GeoPoint(latitude=48.0, longitude=2.0)
                ),
            ),
        )


class TestStormAPI:
    async def test_list_empty(self, client):
        resp = await client.get("/api/storms")
        assert resp.status_code == 200
        assert resp.json() == []

    async def test_groups_by_gap_newest_first(self, client):
        # Two strikes 10 minutes apart, then one 3 hours later
        await _seed(0, 10, 190)
        storms = (await client.get("/api/storms")).json()

        assert len(storms) == 2
        assert [s["id"] for s in storms[0]["strikes"]] == ["s2"]
        assert [s["id"] for s in storms[1]["strikes"]] == ["s0", "s1"]
        assert storms[1]["duration_minutes"] == 10.0
        assert len(storms[1]["path"]) == 2
        # Observed in 2025, so far beyond the fading window
        assert storms[1]["band"] == "old"
        assert storms[1]["opacity"] == pytest.approx(0.3)

    async def test_gap_override(self, client):
        await _seed(0, 10, 190)
        storms = (await client.get("/api/storms", params={"gap_seconds": 300})).json()
        assert len(storms) == 3

    async def test_gap_from_environment(self, client, monkeypatch):
        await _seed(0, 10, 190)
        monkeypatch.setenv("DONNER_STORM_GAP_SECONDS", "20000")
        storms = (await client.get("/api/storms")).json()
        assert len(storms) == 1

    async def test_invalid_gap_rejected(self, client):
        resp = await client.get("/api/storms", params={"gap_seconds": 0})
        assert resp.status_code == 422

    async def test_storm_for_strike_with_region(self, client):
        await _seed(0, 10, 190)
        resp = await client.get("/api/storms/by-strike/s1")
        assert resp.status_code == 200
        data = resp.json()
        assert [s["id"] for s in data["strikes"]] == ["s0", "s1"]
        region = data["region"]
        assert region["latitude_delta"] >= 0.05
        assert region["longitude_delta"] >= 0.05

    async def test_storm_for_unknown_strike(self, client):
        resp = await client.get("/api/storms/by-strike/nope")
        assert resp.status_code == 404
