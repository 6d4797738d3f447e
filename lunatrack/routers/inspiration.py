"""Inspiration message lookup."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException

from lunatrack.dependencies import Store
from lunatrack.models.entries import InspirationMessage

logger = logging.getLogger("lunatrack.routers.inspiration")

router = APIRouter(prefix="/inspiration", tags=["inspiration"])


@router.get("/{message_id}", response_model=InspirationMessage)
def get_message(message_id: str, store: Store) -> Any:
    if not (message_id.isascii() and message_id.isdigit()) or int(message_id) < 1:
        raise HTTPException(status_code=400, detail="Invalid id")
    try:
        found = store.read_inspiration(int(message_id))
    except (OSError, ValueError) as exc:
        logger.warning("Could not load inspiration messages: %s", exc)
        raise HTTPException(
            status_code=500, detail="Could not load inspiration messages"
        ) from exc
    if found is None:
        raise HTTPException(status_code=404, detail="Message not found")
    text = found.get("text", "")
    if not isinstance(text, str):
        logger.warning("Inspiration message %s has non-string text; skipping", message_id)
        raise HTTPException(status_code=404, detail="Message not found")
    return InspirationMessage(id=int(message_id), message=text)
