"""Start the LunaTrack API over HTTP or HTTPS.

Usage::

    lunatrack            # HTTP, mode from START_MODE (default "http")
    lunatrack https      # HTTPS using SSL.certFile / SSL.keyFile from settings.json

The bind port is ``apiPort`` from settings.json when set, else ``API_PORT``
from the environment (default 3001).  Relative certificate paths are resolved
against the data directory.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import uvicorn

from lunatrack.config import Settings, get_settings
from lunatrack.models.settings import CycleSettings
from lunatrack.services.store import JsonStore

logger = logging.getLogger("lunatrack.serve")


class StartupError(RuntimeError):
    """Raised when the server cannot be started with the current settings."""


def _resolve(data_dir: Path, name: str) -> Path:
    path = Path(name)
    return path if path.is_absolute() else data_dir / path


def build_server_options(
    mode: str, app_settings: Settings, cycle_settings: CycleSettings
) -> dict:
    """Return keyword arguments for ``uvicorn.run``.

    Raises:
        StartupError: For an unknown mode, or HTTPS without usable SSL files.
    """
    if mode not in ("http", "https"):
        raise StartupError(f"Unknown start mode {mode!r} (expected 'http' or 'https')")

    options: dict = {
        "host": app_settings.host,
        "port": cycle_settings.api_port or app_settings.api_port,
        "log_level": app_settings.log_level.lower(),
    }
    if mode == "https":
        ssl = cycle_settings.ssl
        if ssl is None:
            raise StartupError("SSL config not found in settings.json; cannot start HTTPS")
        cert = _resolve(app_settings.data_dir, ssl.cert_file)
        key = _resolve(app_settings.data_dir, ssl.key_file)
        missing = [str(p) for p in (cert, key) if not p.exists()]
        if missing:
            raise StartupError(f"SSL files not found: {', '.join(missing)}")
        options["ssl_certfile"] = str(cert)
        options["ssl_keyfile"] = str(key)
    return options


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    app_settings = get_settings()
    mode = (args[0] if args else app_settings.start_mode).lower()

    logging.basicConfig(level=app_settings.log_level.upper())
    cycle_settings = JsonStore(app_settings.data_dir).read_settings()
    try:
        options = build_server_options(mode, app_settings, cycle_settings)
    except StartupError as exc:
        logger.error("Failed to start server: %s", exc)
        return 1

    scheme = "https" if mode == "https" else "http"
    logger.info("LunaTrack %s server on %s://%s:%d", mode.upper(), scheme,
                options["host"], options["port"])
    uvicorn.run("lunatrack.main:app", **options)
    return 0


if __name__ == "__main__":
    sys.exit(main())
