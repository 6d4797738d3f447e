"""Load, validate, and hot-reload the cycle statistics engine configuration.

The config lives in ``cycle_config.yaml`` alongside this module.  At startup
it is loaded once and cached.  Call ``reload_engine_config()`` to re-read from
disk after editing the file — no restart required.

Usage::

    from lunatrack.cycles.config_loader import get_engine_config

    config = get_engine_config()
    config.gap_filter.accepts(28)           # True
    config.clamp.apply(200)                 # 120
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger("lunatrack.cycles.config")

# Path to the YAML file sitting next to this module
_CONFIG_PATH = Path(__file__).parent / "cycle_config.yaml"


# ---------------------------------------------------------------------------
# Typed config sections
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GapFilterConfig:
    """Exclusive bounds for gaps that count towards the average."""

    min_exclusive_days: int = 5
    max_exclusive_days: int = 120

    def accepts(self, gap: int) -> bool:
        return self.min_exclusive_days < gap < self.max_exclusive_days


@dataclass(frozen=True)
class ClampConfig:
    """Inclusive range the computed average is forced into."""

    min_days: int = 20
    max_days: int = 120

    def apply(self, value: int) -> int:
        return max(self.min_days, min(self.max_days, value))


@dataclass(frozen=True)
class OvulationConfig:
    """Offsets (days before the next cycle start) for ovulation modelling."""

    luteal_phase_days: int = 14
    fertile_start_days_before: int = 18
    fertile_end_days_before: int = 13


@dataclass(frozen=True)
class EngineConfig:
    """Complete, validated engine configuration.

    Attributes:
        version:          Config schema version string.
        gap_filter:       Noise filter for adjacent-entry gaps.
        clamp:            Bounds for the computed average cycle length.
        prediction_count: Default number of future cycle starts to project.
        ovulation:        Luteal phase and fertile window offsets.
    """

    version: str = "1.0"
    gap_filter: GapFilterConfig = field(default_factory=GapFilterConfig)
    clamp: ClampConfig = field(default_factory=ClampConfig)
    prediction_count: int = 6
    ovulation: OvulationConfig = field(default_factory=OvulationConfig)


# ---------------------------------------------------------------------------
# Loader / validation
# ---------------------------------------------------------------------------


class ConfigValidationError(ValueError):
    """Raised when cycle_config.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigValidationError: If the YAML is malformed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Engine config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            return yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error in {path}: {exc}") from exc


def _validate_and_build(raw: dict) -> EngineConfig:
    """Validate the raw YAML dict and construct an EngineConfig.

    Missing sections fall back to the built-in defaults; present values must
    be positive integers and bounds must be ordered.

    Raises:
        ConfigValidationError: If any value is invalid.
    """
    errors: list[str] = []

    def _int(section: dict, key: str, default: int, path: str) -> int:
        value: Any = section.get(key, default)
        if isinstance(value, bool) or not isinstance(value, int):
            errors.append(f"{path}.{key} must be an integer, got {value!r}")
            return default
        if value <= 0:
            errors.append(f"{path}.{key} must be positive, got {value}")
            return default
        return value

    def _section(key: str) -> dict:
        value = raw.get(key) or {}
        if not isinstance(value, dict):
            errors.append(f"'{key}' must be a mapping")
            return {}
        return value

    version = str(raw.get("version", "1.0"))

    # ── Gap filter ──
    gf_raw = _section("gap_filter")
    gap_filter = GapFilterConfig(
        min_exclusive_days=_int(gf_raw, "min_exclusive_days", 5, "gap_filter"),
        max_exclusive_days=_int(gf_raw, "max_exclusive_days", 120, "gap_filter"),
    )
    if gap_filter.min_exclusive_days >= gap_filter.max_exclusive_days:
        errors.append("gap_filter.min_exclusive_days must be below max_exclusive_days")

    # ── Average clamp ──
    ac_raw = _section("average_clamp")
    clamp = ClampConfig(
        min_days=_int(ac_raw, "min_days", 20, "average_clamp"),
        max_days=_int(ac_raw, "max_days", 120, "average_clamp"),
    )
    if clamp.min_days > clamp.max_days:
        errors.append("average_clamp.min_days must not exceed max_days")

    # ── Prediction ──
    pr_raw = _section("prediction")
    prediction_count = _int(pr_raw, "count", 6, "prediction")

    # ── Ovulation ──
    ov_raw = _section("ovulation")
    fw_raw = ov_raw.get("fertile_window") or {}
    if not isinstance(fw_raw, dict):
        errors.append("ovulation.fertile_window must be a mapping")
        fw_raw = {}
    ovulation = OvulationConfig(
        luteal_phase_days=_int(ov_raw, "luteal_phase_days", 14, "ovulation"),
        fertile_start_days_before=_int(
            fw_raw, "start_days_before", 18, "ovulation.fertile_window"
        ),
        fertile_end_days_before=_int(
            fw_raw, "end_days_before", 13, "ovulation.fertile_window"
        ),
    )
    if ovulation.fertile_start_days_before < ovulation.fertile_end_days_before:
        errors.append(
            "ovulation.fertile_window.start_days_before must be >= end_days_before"
        )

    if errors:
        raise ConfigValidationError(
            f"cycle_config.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return EngineConfig(
        version=version,
        gap_filter=gap_filter,
        clamp=clamp,
        prediction_count=prediction_count,
        ovulation=ovulation,
    )


def load_engine_config(path: Path | None = None) -> EngineConfig:
    """Load and validate the engine config from disk.

    Args:
        path: Override path to YAML. Uses the bundled cycle_config.yaml by default.
    """
    target = path or _CONFIG_PATH
    raw = _load_yaml(target)
    config = _validate_and_build(raw)
    logger.info("Loaded engine config v%s from %s", config.version, target)
    return config


# ---------------------------------------------------------------------------
# Global singleton with hot-reload support
# ---------------------------------------------------------------------------

_config: EngineConfig | None = None
_config_lock = threading.Lock()


def get_engine_config() -> EngineConfig:
    """Return the global EngineConfig singleton, loading it on first call.

    Thread-safe.  Use ``reload_engine_config()`` to refresh after YAML changes.
    """
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:  # double-checked locking
                _config = load_engine_config()
    return _config


def reload_engine_config(path: Path | None = None) -> EngineConfig:
    """Reload the engine config from disk and replace the global singleton.

    If validation fails, the old config is retained and the error is re-raised.

    Raises:
        ConfigValidationError: If the new config is invalid.
        FileNotFoundError:     If the config file is missing.
    """
    global _config
    new_config = load_engine_config(path)  # validate before acquiring lock
    with _config_lock:
        old_version = _config.version if _config else "none"
        _config = new_config
    logger.info("Reloaded engine config: %s → %s", old_version, new_config.version)
    return new_config
