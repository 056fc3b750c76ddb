"""Shared fixtures for API tests."""

from __future__ import annotations

from unittest.mock import patch

import httpx
import pytest

from donner.api.app import app
from donner.api.deps import get_current_user
from tests.persistence.fake_firestore import FakeFirestoreClient

TEST_USER_ID = "api-test-user"


@pytest.fixture
def fake_client():
    """In-memory Firestore fake, shared across all repos in a single test."""
    return FakeFirestoreClient()


@pytest.fixture
async def test_app(fake_client):
    """FastAPI app with dependency overrides for testing."""
    # Override auth to return a fixed test user
    app.dependency_overrides[get_current_user] = lambda: TEST_USER_ID

    with patch(
        "donner.persistence.repositories.base.get_firestore_client",
        return_value=fake_client,
    ):
        # Fresh per-observer registries; the lifespan is not run by ASGITransport
        app.state.controllers = {}
        app.state.sensor_sources = {}
        yield app

        for controller in app.state.controllers.values():
            await controller.close()

    app.dependency_overrides.clear()


@pytest.fixture
async def client(test_app):
    """httpx AsyncClient wired to the test app."""
    transport = httpx.ASGITransport(app=test_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


async def flush_writes(test_app) -> None:
    """Wait for the test observer's pending Firestore writes."""
    await test_app.state.controllers[TEST_USER_ID].flush()


async def record_strike(client: httpx.AsyncClient, test_app) -> dict:
    """Flash then thunder, and return the stored strike."""
    await client.post("/api/lifecycle/flash")
    await client.post("/api/lifecycle/thunder")
    await flush_writes(test_app)
    resp = await client.get("/api/strikes")
    return resp.json()[-1]
