"""Shared fixtures for store and API tests."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from lunatrack.dependencies import get_today
from lunatrack.main import app
from lunatrack.services.store import JsonStore, get_store

# Fixed "today" for every API test
TODAY = date(2024, 3, 1)


@pytest.fixture
def store(tmp_path: Path) -> JsonStore:
    return JsonStore(tmp_path / "data")


@pytest.fixture
def client(store: JsonStore) -> Iterator[TestClient]:
    """TestClient bound to a temporary data directory and a fixed date."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_today] = lambda: TODAY
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
