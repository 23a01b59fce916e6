#!/usr/bin/env python3
"""HTTP handlers for the /clipboard endpoint.

- POST /clipboard: the peer delivers a new value (inbound handler)
- GET /clipboard: the peer asks for the current value (query handler)

Both reach SyncState and the clipboard accessor through app.state; they
are injected by create_app, never imported as globals.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Request

from peerclip.access_control import normalize_address
from peerclip.errors import PayloadValidationError
from peerclip.preview import truncate

if TYPE_CHECKING:
    from peerclip.clipboard import ClipboardAccessor
    from peerclip.sync_state import SyncState

logger = logging.getLogger(__name__)

router = APIRouter()


def extract_text(payload: Any) -> str:
    """Return the non-empty "text" member of a decoded JSON payload.

    The key is matched case-insensitively ("text", "Text", "TEXT").

    Args:
        payload: Decoded JSON body.

    Returns:
        The text value.

    Raises:
        PayloadValidationError: If payload is not an object or has no
            non-empty string under a "text" key.
    """
    if not isinstance(payload, dict):
        raise PayloadValidationError("body must be a JSON object")
    for key, value in payload.items():
        if key.lower() == "text" and isinstance(value, str) and value:
            return value
    raise PayloadValidationError("'text' field is required")


def _caller(request: Request) -> str:
    return normalize_address(request.client.host if request.client else None)


@router.post("/clipboard")
async def receive_clipboard(request: Request) -> dict[str, str]:
    """Accept a value from the peer and put it on the local clipboard.

    The peer flag is set before the clipboard write so the poller
    recognizes the resulting change as an echo. If the write fails the
    stored value stays updated and the caller gets 500.
    """
    try:
        payload = await request.json()
    except ValueError as e:
        raise PayloadValidationError(f"body is not valid JSON: {e}") from e
    text = extract_text(payload)

    state: SyncState = request.app.state.sync_state
    accessor: ClipboardAccessor = request.app.state.clipboard

    state.set(text, from_peer=True)
    logger.info("[CLIPBOARD RECEIVED] From %s — \"%s\"", _caller(request), truncate(text))
    await accessor.write(text)
    return {"message": "Clipboard updated."}


@router.get("/clipboard")
async def query_clipboard(request: Request) -> dict[str, str]:
    """Return the current synchronized value."""
    state: SyncState = request.app.state.sync_state
    text = state.get()
    logger.info("[CLIPBOARD REQUESTED] By %s — \"%s\"", _caller(request), truncate(text))
    return {"text": text}
