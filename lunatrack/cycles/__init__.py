"""Cycle statistics for LunaTrack.

Pure, synchronous computations over recorded cycle start dates.  Nothing in
this subpackage performs I/O apart from loading its YAML config.

Modules:
    dates          — Strict ISO date parsing and day arithmetic
    config_loader  — Load/validate/hot-reload cycle_config.yaml
    stats_engine   — Average length, predictions, ovulation and fertile windows
"""

from lunatrack.cycles.dates import (
    InvalidDateFormat,
    add_days,
    diff_days,
    format_date,
    parse_date,
)
from lunatrack.cycles.stats_engine import (
    CycleStatsEngine,
    FertileWindow,
    PredictedCycle,
    PredictionResult,
    compute_stats,
)

__all__ = [
    "InvalidDateFormat",
    "parse_date",
    "format_date",
    "diff_days",
    "add_days",
    "CycleStatsEngine",
    "FertileWindow",
    "PredictedCycle",
    "PredictionResult",
    "compute_stats",
]
