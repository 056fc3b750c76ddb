"""Firestore async client singleton."""

from __future__ import annotations

import logging
import os
from typing import Any

logger = logging.getLogger(__name__)

_client: Any = None


def get_firestore_client() -> Any:
    """Return the shared Firestore AsyncClient, created on first use.

    Credentials come from Application Default Credentials. The project is
    taken from ``DONNER_FIRESTORE_PROJECT`` when set, else from the
    environment ADC resolves.
    """
    global _client
    if _client is None:
        from google.cloud.firestore import AsyncClient

        project = os.environ.get("DONNER_FIRESTORE_PROJECT") or None
        _client = AsyncClient(project=project)
        logger.info("Firestore client ready (project=%s)", _client.project)
    return _client
