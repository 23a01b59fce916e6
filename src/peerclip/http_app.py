#!/usr/bin/env python3
"""FastAPI application factory.

Middleware order, outermost first:
1. AccessControlMiddleware: subnet and origin allow-list, 403 otherwise
2. CORSMiddleware: CORS headers for browser callers on the segment
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import PlainTextResponse

from peerclip.access_control import AccessControlMiddleware, origin_regex
from peerclip.errors import ClipboardAccessError, PayloadValidationError
from peerclip.http_handlers import router

if TYPE_CHECKING:
    from starlette.requests import Request

    from peerclip.clipboard import ClipboardAccessor
    from peerclip.sync_state import SyncState

logger = logging.getLogger(__name__)


async def _payload_error(request: Request, exc: Exception) -> PlainTextResponse:
    logger.debug("Rejected payload: %s", exc)
    return PlainTextResponse(
        "400 Bad Request — 'text' field is required.", status_code=400
    )


async def _clipboard_error(request: Request, exc: Exception) -> PlainTextResponse:
    logger.error("[WRITE ERROR] %s", exc)
    return PlainTextResponse(
        f"500 Internal Server Error — clipboard write failed: {exc}", status_code=500
    )


def create_app(
    state: SyncState, accessor: ClipboardAccessor, allowed_prefix: str
) -> FastAPI:
    """Build the HTTP application around the shared state.

    Args:
        state: Shared synchronization state.
        accessor: Local clipboard accessor used by the inbound handler.
        allowed_prefix: Address prefix callers must match.

    Returns:
        The configured FastAPI application.
    """
    app = FastAPI(
        title="peerclip",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.sync_state = state
    app.state.clipboard = accessor

    app.include_router(router)
    app.add_exception_handler(PayloadValidationError, _payload_error)
    app.add_exception_handler(ClipboardAccessError, _clipboard_error)

    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=origin_regex(allowed_prefix),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(AccessControlMiddleware, allowed_prefix=allowed_prefix)
    return app
