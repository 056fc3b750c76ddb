"""FastAPI application factory."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI

# Load .env file from project root (must be before other imports)
load_dotenv()
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

from donner.api.routes import (  # noqa: E402
    heading_capture,
    lifecycle,
    sensors,
    storms,
    strikes,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize Firebase Admin and the per-observer session registries."""
    try:
        import firebase_admin
        firebase_admin.initialize_app()
        logger.info("Firebase Admin SDK initialized")
    except ValueError:
        # Already initialized
        logger.info("Firebase Admin SDK already initialized")
    except Exception as exc:
        logger.warning("Firebase Admin SDK init failed: %s", exc)

    app.state.controllers = {}
    app.state.sensor_sources = {}
    yield

    for controller in app.state.controllers.values():
        await controller.close()
    logger.info("Closed %d lifecycle controllers", len(app.state.controllers))


app = FastAPI(
    title="Donner API",
    description="Lightning strike timing, geolocation and storm grouping",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.environ.get("CORS_ORIGINS", "http://localhost:5173").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(lifecycle.router, prefix="/api")
app.include_router(strikes.router, prefix="/api")
app.include_router(heading_capture.router, prefix="/api")
app.include_router(sensors.router, prefix="/api")
app.include_router(storms.router, prefix="/api")


@app.get("/api/health")
async def health():
    return {
        "status": "ok",
        "active_observers": len(getattr(app.state, "controllers", {})),
    }
