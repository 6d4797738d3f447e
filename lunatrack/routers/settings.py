"""User settings endpoints.

Endpoints:
    GET/PUT /settings          — Full settings record (PUT merges given fields)
    GET/PUT /enable-ovulation  — Ovulation / fertile window output toggle
    GET/PUT /file-protected    — Whether the data has been backed up since the
                                 last change
    GET/PUT /ports             — Front-end HTTP / HTTPS ports
    GET/PUT /ssl               — Certificate and key file names
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException

from lunatrack.dependencies import Store
from lunatrack.models.settings import (
    CycleSettings,
    CycleSettingsUpdate,
    EnableOvulation,
    FileProtected,
    Ports,
    SSLConfig,
    SSLSettings,
)

logger = logging.getLogger("lunatrack.routers.settings")

router = APIRouter(tags=["settings"])


@router.get("/settings", response_model=CycleSettings)
def get_settings_record(store: Store) -> Any:
    return store.read_settings()


@router.put("/settings", response_model=CycleSettings)
def update_settings_record(store: Store, body: CycleSettingsUpdate) -> Any:
    updates = body.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")
    updated = store.update_settings(**updates)
    logger.info("Settings updated: %s", ", ".join(sorted(updates)))
    return updated


@router.get("/enable-ovulation", response_model=EnableOvulation)
def get_enable_ovulation(store: Store) -> Any:
    return EnableOvulation(enable_ovulation=store.read_settings().enable_ovulation)


@router.put("/enable-ovulation", response_model=EnableOvulation)
def put_enable_ovulation(store: Store, body: EnableOvulation) -> Any:
    store.update_settings(enable_ovulation=body.enable_ovulation)
    return body


@router.get("/file-protected", response_model=FileProtected)
def get_file_protected(store: Store) -> Any:
    return FileProtected(file_protected=store.read_settings().file_protected)


@router.put("/file-protected", response_model=FileProtected)
def put_file_protected(store: Store, body: FileProtected) -> Any:
    store.update_settings(file_protected=body.file_protected)
    return body


@router.get("/ports", response_model=Ports)
def get_ports(store: Store) -> Any:
    s = store.read_settings()
    return Ports(http_port=s.http_port, https_port=s.https_port)


@router.put("/ports", response_model=Ports)
def put_ports(store: Store, body: Ports) -> Any:
    store.update_settings(http_port=body.http_port, https_port=body.https_port)
    return body


@router.get("/ssl", response_model=SSLSettings)
def get_ssl(store: Store) -> Any:
    return SSLSettings(ssl=store.read_settings().ssl)


@router.put("/ssl", response_model=SSLSettings)
def put_ssl(store: Store, body: SSLConfig) -> Any:
    updated = store.update_settings(ssl=body.model_dump())
    return SSLSettings(ssl=updated.ssl)
