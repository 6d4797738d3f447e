"""Shared fixtures for cycle statistics tests."""

from __future__ import annotations

from datetime import date

import pytest

from lunatrack.cycles.config_loader import EngineConfig, load_engine_config
from lunatrack.cycles.stats_engine import CycleStatsEngine


@pytest.fixture
def engine_config() -> EngineConfig:
    """Load the bundled engine config for tests."""
    return load_engine_config()


@pytest.fixture
def engine(engine_config: EngineConfig) -> CycleStatsEngine:
    return CycleStatsEngine(engine_config)


@pytest.fixture
def today() -> date:
    return date(2024, 1, 10)
