"""LunaTrack API — FastAPI application entry point.

Run locally:
    uvicorn lunatrack.main:app --reload --port 3001
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lunatrack.config import get_settings
from lunatrack.cycles.config_loader import get_engine_config
from lunatrack.cycles.dates import InvalidDateFormat
from lunatrack.middleware.request_log import RequestLogMiddleware
from lunatrack.routers import backup, entries, health, inspiration, settings
from lunatrack.services.store import close_store, init_store

# ---------- Logging ----------

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger("lunatrack")


# ---------- Lifespan ----------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup / shutdown hooks."""
    app_settings = get_settings()
    logger.info(
        "Starting LunaTrack API v%s [%s]",
        app_settings.app_version,
        app_settings.environment,
    )
    get_engine_config()  # fail fast on a broken cycle_config.yaml
    init_store(app_settings)
    yield
    close_store()
    logger.info("LunaTrack API shut down")


# ---------- Error handlers ----------

async def invalid_date_handler(request: Request, exc: InvalidDateFormat) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


# ---------- App factory ----------

def create_app() -> FastAPI:
    app_settings = get_settings()

    app = FastAPI(
        title="LunaTrack API",
        description="Personal cycle tracking — entries, predictions, fertile windows.",
        version=app_settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_exception_handler(InvalidDateFormat, invalid_date_handler)

    # ---------- Middleware ----------

    app.add_middleware(RequestLogMiddleware)

    # CORS is added last so it wraps everything and answers preflight requests
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---------- Health check (at /health and /api/health) ----------
    app.include_router(health.router)

    # ---------- API routes ----------
    api_prefix = "/api"

    app.include_router(health.router, prefix=api_prefix)
    app.include_router(entries.router, prefix=api_prefix)
    app.include_router(settings.router, prefix=api_prefix)
    app.include_router(backup.router, prefix=api_prefix)
    app.include_router(inspiration.router, prefix=api_prefix)

    return app


app = create_app()
