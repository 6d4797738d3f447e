"""Health check endpoint — public, no auth required."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from lunatrack.config import get_settings

router = APIRouter(tags=["system"])


@router.get("/health")
async def health_check() -> dict:
    """Liveness probe. Returns 200 if the API process is up."""
    settings = get_settings()
    return {
        "ok": True,
        "version": settings.app_version,
        "environment": settings.environment,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
