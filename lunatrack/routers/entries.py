"""Cycle entry endpoints and the statistics read model.

Endpoints:
    GET    /entries        — Stored entries plus computed statistics
    POST   /entries        — Record a cycle start date
    DELETE /entries/{date} — Remove a cycle start date
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter

from lunatrack.cycles.dates import format_date
from lunatrack.dependencies import Engine, Store, Today
from lunatrack.models.entries import EntriesResponse, EntryCreate, StatsResponse

logger = logging.getLogger("lunatrack.routers.entries")

router = APIRouter(prefix="/entries", tags=["entries"])


@router.get("", response_model=StatsResponse)
def get_stats(store: Store, engine: Engine, today: Today) -> Any:
    settings = store.read_settings()
    result = engine.compute(
        store.read_entries(),
        settings.default_cycle_length,
        settings.enable_ovulation,
        today=today,
    )
    return StatsResponse.from_result(result)


@router.post("", response_model=EntriesResponse, status_code=201)
def add_entry(store: Store, body: EntryCreate) -> Any:
    return EntriesResponse(entries=store.add_entry(format_date(body.date)))


@router.delete("/{entry_date}", response_model=EntriesResponse)
def delete_entry(entry_date: str, store: Store) -> Any:
    # InvalidDateFormat propagates to the app-level 400 handler
    return EntriesResponse(entries=store.remove_entry(entry_date))
