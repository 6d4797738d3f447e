"""Application configuration loaded from environment variables."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All configuration is loaded from environment variables (or .env file).

    These are process-level settings.  User-facing preferences (default cycle
    length, ovulation toggle, PIN, ports) live in ``settings.json`` inside
    ``data_dir`` and are managed through the API.
    """

    # --- App ---
    app_name: str = "LunaTrack"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    environment: str = "development"  # development | production

    # --- Storage ---
    data_dir: Path = Path("data")

    # --- Server ---
    host: str = "0.0.0.0"
    api_port: int = 3001
    start_mode: str = "http"  # http | https

    # --- CORS ---
    cors_origins: list[str] = ["*"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
