"""Shared FastAPI dependencies injected into route handlers."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Annotated

from fastapi import Depends

from lunatrack.config import Settings, get_settings
from lunatrack.cycles.stats_engine import CycleStatsEngine
from lunatrack.services.store import JsonStore, get_store


def get_today() -> date:
    """Today's date in UTC; day counters are computed against this."""
    return datetime.now(timezone.utc).date()


def get_engine() -> CycleStatsEngine:
    return CycleStatsEngine()


# Annotated shortcuts for route signatures
AppSettings = Annotated[Settings, Depends(get_settings)]
Store = Annotated[JsonStore, Depends(get_store)]
Today = Annotated[date, Depends(get_today)]
Engine = Annotated[CycleStatsEngine, Depends(get_engine)]
