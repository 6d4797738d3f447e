"""Backup export / import.

Endpoints:
    GET  /backup/export — Download entries, statistics and settings as JSON
    POST /backup/import — Replace stored entries with those from a backup
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter

from lunatrack.cycles.dates import format_date
from lunatrack.dependencies import Engine, Store, Today
from lunatrack.models.entries import (
    BackupDocument,
    BackupImport,
    EntriesResponse,
    StatsResponse,
)

logger = logging.getLogger("lunatrack.routers.backup")

router = APIRouter(prefix="/backup", tags=["backup"])


@router.get("/export", response_model=BackupDocument)
def export_backup(store: Store, engine: Engine, today: Today) -> Any:
    settings = store.read_settings()
    result = engine.compute(
        store.read_entries(),
        settings.default_cycle_length,
        settings.enable_ovulation,
        today=today,
    )
    stats = StatsResponse.from_result(result)
    settings = store.mark_protected()
    logger.info("Exported backup with %d entries", len(result.entries))
    return BackupDocument(
        **stats.model_dump(),
        exported_at=datetime.now(timezone.utc),
        settings=settings,
    )


@router.post("/import", response_model=EntriesResponse)
def import_backup(store: Store, body: BackupImport) -> Any:
    entries = store.replace_entries(format_date(d) for d in body.entries)
    return EntriesResponse(entries=entries)
