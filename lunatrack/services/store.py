"""JSON file storage for cycle entries and user settings.

Layout inside the data directory::

    settings.json       — CycleSettings record (camelCase keys)
    <dataFile>          — {"entries": ["YYYY-MM-DD", ...]}, default cycles.json
    inspiration.json    — optional [{"id": 1, "text": "..."}, ...]

Files are created with defaults on first read.  A process-wide lock
serialises read-modify-write cycles; nothing here protects against a second
process writing the same files.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Iterable

from lunatrack.config import Settings, get_settings
from lunatrack.cycles.dates import format_date, is_iso_date, parse_date, sort_dates
from lunatrack.models.settings import CycleSettings

logger = logging.getLogger("lunatrack.store")

SETTINGS_FILE = "settings.json"
INSPIRATION_FILE = "inspiration.json"


class JsonStore:
    """Read and write the tracker's JSON files.

    Usage::

        store = JsonStore(Path("data"))
        entries = store.add_entry("2024-03-01")
        settings = store.read_settings()
    """

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Raw JSON helpers
    # ------------------------------------------------------------------

    def _path(self, name: str) -> Path:
        return self.data_dir / name

    @staticmethod
    def _read_json(path: Path) -> Any:
        return json.loads(path.read_text(encoding="utf-8"))

    @staticmethod
    def _write_json(path: Path, data: Any) -> None:
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def read_settings(self) -> CycleSettings:
        """Return the settings record, writing defaults if the file is missing.

        Partial or older files are completed with defaults.

        Raises:
            pydantic.ValidationError: If a stored value is invalid.
        """
        path = self._path(SETTINGS_FILE)
        with self._lock:
            if not path.exists():
                defaults = CycleSettings()
                self._write_settings_unlocked(defaults)
                logger.info("Created default settings at %s", path)
                return defaults
            return CycleSettings.model_validate(self._read_json(path))

    def write_settings(self, settings: CycleSettings) -> CycleSettings:
        with self._lock:
            self._write_settings_unlocked(settings)
        return settings

    def update_settings(self, **changes: Any) -> CycleSettings:
        """Apply *changes* (snake_case field names) and persist the result.

        The merged record is re-validated before writing.
        """
        with self._lock:
            current = self.read_settings()
            merged = CycleSettings.model_validate(
                {**current.model_dump(), **changes}
            )
            self._write_settings_unlocked(merged)
        return merged

    def _write_settings_unlocked(self, settings: CycleSettings) -> None:
        self._write_json(
            self._path(SETTINGS_FILE),
            settings.model_dump(mode="json", by_alias=True, exclude_none=True),
        )

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------

    def _entries_path(self, settings: CycleSettings | None = None) -> Path:
        s = settings or self.read_settings()
        return self._path(s.data_file)

    def read_entries(self) -> list[str]:
        """Return stored entries ascending, creating an empty file if missing.

        Strings that do not look like ``YYYY-MM-DD`` are skipped.
        """
        with self._lock:
            path = self._entries_path()
            if not path.exists():
                self._write_json(path, {"entries": []})
                return []
            raw = self._read_json(path)

        entries = raw.get("entries") if isinstance(raw, dict) else None
        if not isinstance(entries, list):
            logger.warning("%s has no 'entries' list; treating as empty", path)
            return []
        valid = [e for e in entries if is_iso_date(e)]
        if len(valid) != len(entries):
            logger.warning(
                "Skipped %d malformed entries in %s", len(entries) - len(valid), path
            )
        return sort_dates(valid)

    def write_entries(self, dates: Iterable[str]) -> list[str]:
        ordered = sort_dates(set(dates))
        with self._lock:
            self._write_json(self._entries_path(), {"entries": ordered})
        return ordered

    def add_entry(self, value: str) -> list[str]:
        """Add a cycle start date.  Adding an existing date is a no-op.

        Raises:
            InvalidDateFormat: If *value* is not a real ``YYYY-MM-DD`` date.
        """
        canonical = format_date(parse_date(value))
        with self._lock:
            entries = set(self.read_entries())
            if canonical in entries:
                return sort_dates(entries)
            entries.add(canonical)
            result = self.write_entries(entries)
            self._mark_changed()
        logger.info("Added entry %s (%d total)", canonical, len(result))
        return result

    def remove_entry(self, value: str) -> list[str]:
        """Remove a cycle start date.  Removing a missing date is a no-op.

        Raises:
            InvalidDateFormat: If *value* is not a real ``YYYY-MM-DD`` date.
        """
        canonical = format_date(parse_date(value))
        with self._lock:
            entries = set(self.read_entries())
            if canonical not in entries:
                return sort_dates(entries)
            entries.discard(canonical)
            result = self.write_entries(entries)
            self._mark_changed()
        logger.info("Removed entry %s (%d total)", canonical, len(result))
        return result

    def replace_entries(self, values: Iterable[str]) -> list[str]:
        """Replace every stored entry, e.g. when restoring a backup.

        Raises:
            InvalidDateFormat: If any value is not a real ``YYYY-MM-DD`` date.
        """
        canonical = {format_date(parse_date(v)) for v in values}
        with self._lock:
            result = self.write_entries(canonical)
            self._mark_changed()
        logger.info("Replaced entries (%d total)", len(result))
        return result

    # ------------------------------------------------------------------
    # Backup state
    # ------------------------------------------------------------------

    def _mark_changed(self) -> None:
        settings = self.read_settings()
        if settings.file_protected:
            self.update_settings(file_protected=False)

    def mark_protected(self) -> CycleSettings:
        """Record that the current data has been exported."""
        return self.update_settings(file_protected=True)

    # ------------------------------------------------------------------
    # Inspiration messages
    # ------------------------------------------------------------------

    def read_inspiration(self, message_id: int) -> dict | None:
        """Return ``{"id", "text"}`` for *message_id*, or None if not found.

        Raises:
            FileNotFoundError: If inspiration.json does not exist.
            ValueError:        If the file is not valid JSON.
        """
        messages = self._read_json(self._path(INSPIRATION_FILE))
        if not isinstance(messages, list):
            return None
        for message in messages:
            if isinstance(message, dict) and message.get("id") == message_id:
                return message
        return None


# ---------------------------------------------------------------------------
# Module-level store — initialised once at app startup
# ---------------------------------------------------------------------------

_store: JsonStore | None = None


def init_store(settings: Settings | None = None) -> JsonStore:
    """Create the global store for the configured data directory."""
    global _store
    s = settings or get_settings()
    _store = JsonStore(s.data_dir)
    logger.info("JSON store initialized at %s", _store.data_dir.resolve())
    return _store


def close_store() -> None:
    global _store
    _store = None


def get_store() -> JsonStore:
    if _store is None:
        raise RuntimeError("Store not initialized — call init_store() first")
    return _store
