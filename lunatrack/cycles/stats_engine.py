"""Cycle statistics engine.

Turns an unordered collection of recorded cycle start dates into a forecast:

- Average cycle length (noise-filtered gap mean, clamped)
- The next N predicted cycle starts
- Days since the last entry / until the next prediction
- Optional ovulation day and fertile window per prediction

The engine is pure: it never reads the clock, never touches storage, and
never mutates its inputs.  ``today`` is always injected by the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Sequence

from lunatrack.cycles.config_loader import EngineConfig, get_engine_config
from lunatrack.cycles.dates import add_days, diff_days, format_date, parse_date

logger = logging.getLogger("lunatrack.cycles.stats_engine")


@dataclass(frozen=True)
class FertileWindow:
    """Inclusive date range around the modelled ovulation day."""

    start: date
    end: date

    def to_dict(self) -> dict[str, str]:
        return {"start": format_date(self.start), "end": format_date(self.end)}


@dataclass(frozen=True)
class PredictedCycle:
    """One projected cycle start.

    Attributes:
        start:          Predicted first day of the cycle.
        ovulation_date: Modelled ovulation day, or None when ovulation output
                        is disabled.
        fertile_window: Modelled fertile window, or None when disabled.  May
                        begin before ``start`` for very short average lengths.
    """

    start: date
    ovulation_date: date | None = None
    fertile_window: FertileWindow | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "start": format_date(self.start),
            "ovulationDate": (
                format_date(self.ovulation_date) if self.ovulation_date else None
            ),
            "fertileWindow": (
                self.fertile_window.to_dict() if self.fertile_window else None
            ),
        }


@dataclass(frozen=True)
class PredictionResult:
    """Output of :func:`compute_stats`.  Recomputed on every query.

    Attributes:
        entries:              Snapshot of the input dates, ascending.
        average_cycle_length: Estimated cycle length in days.
        cycles:               Projected cycles, soonest first.
        last:                 Most recent entry, or None without history.
        days_since_last:      ``today - last`` in days (signed).
        next_date:            First prediction, or None without history.
        days_until_next:      ``next_date - today`` in days (signed; negative
                              when the predicted start has already passed).
    """

    entries: tuple[date, ...]
    average_cycle_length: int
    cycles: tuple[PredictedCycle, ...] = ()
    last: date | None = None
    days_since_last: int | None = None
    next_date: date | None = None
    days_until_next: int | None = None

    @property
    def predictions(self) -> list[date]:
        return [c.start for c in self.cycles]

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the JSON shape returned by the entries endpoint."""
        return {
            "entries": [format_date(d) for d in self.entries],
            "averageCycleLength": self.average_cycle_length,
            "predictions": [format_date(d) for d in self.predictions],
            "last": format_date(self.last) if self.last else None,
            "daysSinceLast": self.days_since_last,
            "nextDate": format_date(self.next_date) if self.next_date else None,
            "daysUntilNext": self.days_until_next,
            "cycles": [c.to_dict() for c in self.cycles],
        }


class CycleStatsEngine:
    """Estimate cycle length and project future cycle starts.

    Usage::

        engine = CycleStatsEngine()
        result = engine.compute(
            entries=["2024-01-01", "2024-01-29"],
            default_cycle_length=28,
            enable_ovulation=True,
            today=date(2024, 2, 10),
        )
        print(result.next_date, result.days_until_next)
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self._config = config or get_engine_config()

    @property
    def config(self) -> EngineConfig:
        return self._config

    # ------------------------------------------------------------------
    # Estimator
    # ------------------------------------------------------------------

    def cycle_gaps(self, dates: Sequence[date]) -> list[int]:
        """Return the usable gaps between adjacent ascending dates.

        Gaps outside the configured noise bounds are dropped.
        """
        gap_filter = self._config.gap_filter
        gaps = [diff_days(a, b) for a, b in zip(dates, dates[1:])]
        return [g for g in gaps if gap_filter.accepts(g)]

    def average_cycle_length(self, dates: Sequence[date], fallback: int) -> int:
        """Mean usable gap, rounded half away from zero and clamped.

        Args:
            dates:    Ascending cycle start dates.
            fallback: Returned unchanged when no usable gap exists.
        """
        gaps = self.cycle_gaps(dates)
        if not gaps:
            return fallback
        # Exact integer rounding; every usable gap is positive.
        total, count = sum(gaps), len(gaps)
        rounded = (2 * total + count) // (2 * count)
        return self._config.clamp.apply(rounded)

    # ------------------------------------------------------------------
    # Predictor
    # ------------------------------------------------------------------

    def predict_next_dates(
        self,
        dates: Sequence[date],
        average_length: int,
        count: int | None = None,
    ) -> list[date]:
        """Project *count* cycle starts after the latest date, soonest first."""
        if not dates:
            return []
        n = self._config.prediction_count if count is None else count
        last = max(dates)
        return [add_days(last, average_length * i) for i in range(1, n + 1)]

    # ------------------------------------------------------------------
    # Fertile window / ovulation
    # ------------------------------------------------------------------

    def fertile_window(self, start: date, average_length: int) -> PredictedCycle:
        """Model ovulation and the fertile window for one predicted start.

        Offsets are taken from the start of the *following* cycle
        (``start + average_length``), so with a 28-day average ovulation falls
        on ``start + 14``.
        """
        ov = self._config.ovulation
        return PredictedCycle(
            start=start,
            ovulation_date=add_days(start, average_length - ov.luteal_phase_days),
            fertile_window=FertileWindow(
                start=add_days(start, average_length - ov.fertile_start_days_before),
                end=add_days(start, average_length - ov.fertile_end_days_before),
            ),
        )

    # ------------------------------------------------------------------
    # Full computation
    # ------------------------------------------------------------------

    def compute(
        self,
        entries: Iterable[str | date],
        default_cycle_length: int,
        enable_ovulation: bool,
        *,
        today: str | date,
        prediction_count: int | None = None,
    ) -> PredictionResult:
        """Compute statistics for one consistent snapshot of entries.

        Args:
            entries:              Cycle start dates in any order.  Duplicates
                                  are expected to have been removed already.
            default_cycle_length: Fallback length when no usable gap exists.
            enable_ovulation:     Whether to model ovulation and fertile windows.
            today:                Reference date for the day counters.
            prediction_count:     Number of cycles to project (default from
                                  config).

        Raises:
            InvalidDateFormat: If any entry or ``today`` is not a valid date.
            ValueError:        If ``prediction_count`` is below 1.
        """
        if prediction_count is not None and prediction_count < 1:
            raise ValueError(f"prediction_count must be >= 1, got {prediction_count}")

        ref = parse_date(today)
        dates = tuple(sorted(parse_date(e) for e in entries))

        avg = self.average_cycle_length(dates, default_cycle_length)
        starts = self.predict_next_dates(dates, avg, prediction_count)

        if enable_ovulation:
            cycles = tuple(self.fertile_window(s, avg) for s in starts)
        else:
            cycles = tuple(PredictedCycle(start=s) for s in starts)

        if not dates:
            return PredictionResult(entries=dates, average_cycle_length=avg)

        last = dates[-1]
        next_date = starts[0]
        logger.debug(
            "Computed stats: %d entries, avg=%d, next=%s", len(dates), avg, next_date
        )
        return PredictionResult(
            entries=dates,
            average_cycle_length=avg,
            cycles=cycles,
            last=last,
            days_since_last=diff_days(last, ref),
            next_date=next_date,
            days_until_next=diff_days(ref, next_date),
        )


def compute_stats(
    entries: Iterable[str | date],
    default_cycle_length: int,
    enable_ovulation: bool,
    *,
    today: str | date,
    prediction_count: int | None = None,
    config: EngineConfig | None = None,
) -> PredictionResult:
    """Module-level shortcut for :meth:`CycleStatsEngine.compute`."""
    return CycleStatsEngine(config).compute(
        entries,
        default_cycle_length,
        enable_ovulation,
        today=today,
        prediction_count=prediction_count,
    )
