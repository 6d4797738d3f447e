"""Pydantic models for cycle entries, statistics, and backups."""

from __future__ import annotations

import datetime as dt
from datetime import date, datetime

from pydantic import Field, field_validator

from lunatrack.cycles.dates import parse_date
from lunatrack.cycles.stats_engine import PredictedCycle, PredictionResult
from lunatrack.models.base import LunaBase
from lunatrack.models.settings import CycleSettings


def _strict_date(value: object) -> date:
    # Reject the looser ISO variants pydantic would otherwise accept.
    return parse_date(value) if isinstance(value, str) else value  # type: ignore[return-value]


class EntryCreate(LunaBase):
    date: dt.date

    @field_validator("date", mode="before")
    @classmethod
    def check_date(cls, value: object) -> object:
        return _strict_date(value)


class EntriesResponse(LunaBase):
    """Stored entries after a mutation, ascending."""

    entries: list[date]


class FertileWindowRead(LunaBase):
    start: date
    end: date


class PredictedCycleRead(LunaBase):
    start: date
    ovulation_date: date | None = None
    fertile_window: FertileWindowRead | None = None

    @classmethod
    def from_cycle(cls, cycle: PredictedCycle) -> PredictedCycleRead:
        window = cycle.fertile_window
        return cls(
            start=cycle.start,
            ovulation_date=cycle.ovulation_date,
            fertile_window=(
                FertileWindowRead(start=window.start, end=window.end) if window else None
            ),
        )


class StatsResponse(LunaBase):
    """Current statistics for the stored entries."""

    entries: list[date]
    average_cycle_length: int
    predictions: list[date]
    last: date | None = None
    days_since_last: int | None = None
    next_date: date | None = None
    days_until_next: int | None = None
    cycles: list[PredictedCycleRead] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: PredictionResult) -> StatsResponse:
        return cls(
            entries=list(result.entries),
            average_cycle_length=result.average_cycle_length,
            predictions=result.predictions,
            last=result.last,
            days_since_last=result.days_since_last,
            next_date=result.next_date,
            days_until_next=result.days_until_next,
            cycles=[PredictedCycleRead.from_cycle(c) for c in result.cycles],
        )


class BackupDocument(StatsResponse):
    """Exported snapshot.  Importing only reads ``entries``."""

    exported_at: datetime
    settings: CycleSettings


class BackupImport(LunaBase):
    """Accepts a full exported document or just ``{"entries": [...]}``."""

    entries: list[date]

    @field_validator("entries", mode="before")
    @classmethod
    def check_dates(cls, value: object) -> object:
        if isinstance(value, list):
            return [_strict_date(v) for v in value]
        return value


class InspirationMessage(LunaBase):
    id: int
    message: str
