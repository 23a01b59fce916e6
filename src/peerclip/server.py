#!/usr/bin/env python3
"""Server mode implementation for peerclip.

The server binds to this machine's address on the Wi-Fi Direct segment
and runs two things side by side on one event loop:
- the HTTP endpoint the peer pushes to and queries
- the change poller that pushes local clipboard changes to the peer

SIGINT/SIGTERM stop the HTTP server; the poller is then stopped and the
HTTP client closed before returning.
"""

from __future__ import annotations

import asyncio
import sys
from contextlib import suppress
from typing import TYPE_CHECKING

import uvicorn

from peerclip.change_poller import ChangePoller
from peerclip.http_app import create_app
from peerclip.peer_pusher import PeerPusher
from peerclip.sync_state import SyncState

if TYPE_CHECKING:
    from peerclip.clipboard import ClipboardAccessor
    from peerclip.sync_config import SyncConfig


def print_startup_message(config: SyncConfig, backend_name: str) -> None:
    """Print the startup banner to stderr.

    Args:
        config: The resolved configuration.
        backend_name: Name of the clipboard backend in use.
    """
    rule = "=" * 43
    print(rule, file=sys.stderr)
    print("  peerclip — Clipboard Server", file=sys.stderr)
    print(f"  Listening : {config.listen_url}", file=sys.stderr)
    print(f"  Subnet    : {config.allowed_prefix}*", file=sys.stderr)
    print(f"  Peer      : {config.peer_clipboard_url}", file=sys.stderr)
    print(f"  Clipboard : {backend_name}, polled every {config.poll_interval}s",
          file=sys.stderr)
    print(rule, file=sys.stderr)


def build_uvicorn_server(app: object, config: SyncConfig) -> uvicorn.Server:
    """Create the uvicorn server without its own logging setup or lifespan."""
    server_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        lifespan="off",
        access_log=False,
        log_config=None,
        log_level="warning",
    )
    return uvicorn.Server(server_config)


async def run_server(config: SyncConfig, accessor: ClipboardAccessor) -> None:
    """Serve the clipboard endpoint and poll the local clipboard.

    Args:
        config: The resolved configuration.
        accessor: An opened clipboard accessor; the caller closes it.
    """
    state = SyncState()
    pusher = PeerPusher(config.peer_clipboard_url, config.push_timeout)
    poller = ChangePoller(state, accessor, pusher, config.poll_interval)
    server = build_uvicorn_server(
        create_app(state, accessor, config.allowed_prefix), config
    )

    shutdown = asyncio.Event()
    poller_task = asyncio.create_task(poller.run(shutdown))
    try:
        await server.serve()
    finally:
        shutdown.set()
        # Cancelling also aborts a push still waiting on the peer
        poller_task.cancel()
        with suppress(asyncio.CancelledError):
            await poller_task
        await pusher.aclose()
