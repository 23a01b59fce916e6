"""CLI handling for peerclip.

This module provides the command-line interface for peerclip, handling
argument parsing via click, logging configuration, and starting the
server. Every option can also be given as a PEERCLIP_* environment
variable.

Usage:
    peerclip [--host ADDR] [--port PORT] [--peer URL] [--allowed-prefix PREFIX]
             [--poll-interval SEC] [--push-timeout SEC]
             [--backend auto|x11|pyperclip] [--verbose]
"""

import sys

import click

from peerclip.main_logging import configure_logging
from peerclip.sync_config import BACKEND_CHOICES, SyncConfig
from peerclip.sync_constants import (
    DEFAULT_ALLOWED_PREFIX,
    DEFAULT_BACKEND,
    DEFAULT_HOST,
    DEFAULT_PEER_URL,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_PORT,
    DEFAULT_PUSH_TIMEOUT,
)

_POSITIVE = click.FloatRange(min=0, min_open=True)


@click.command(context_settings={"auto_envvar_prefix": "PEERCLIP"})
@click.option("--host", default=DEFAULT_HOST, show_default=True,
              help="Address to bind the HTTP server to")
@click.option("--port", default=DEFAULT_PORT, show_default=True,
              type=click.IntRange(1, 65535), help="Port to listen on")
@click.option("--peer", default=DEFAULT_PEER_URL, show_default=True,
              help="Base URL of the peer to push changes to")
@click.option("--allowed-prefix", default=DEFAULT_ALLOWED_PREFIX, show_default=True,
              help="Address prefix callers must match")
@click.option("--poll-interval", default=DEFAULT_POLL_INTERVAL, show_default=True,
              type=_POSITIVE, help="Seconds between clipboard samples")
@click.option("--push-timeout", default=DEFAULT_PUSH_TIMEOUT, show_default=True,
              type=_POSITIVE, help="Seconds a push may take (at most the poll interval)")
@click.option("--backend", default=DEFAULT_BACKEND, show_default=True,
              type=click.Choice(BACKEND_CHOICES), help="Clipboard backend")
@click.option("--verbose", is_flag=True, help="Enable DEBUG-level logging")
def main(
    host: str,
    port: int,
    peer: str,
    allowed_prefix: str,
    poll_interval: float,
    push_timeout: float,
    backend: str,
    verbose: bool,
) -> None:
    """Synchronize clipboard text with a peer on the Wi-Fi Direct segment."""
    try:
        config = SyncConfig(
            host=host,
            port=port,
            peer_url=peer,
            allowed_prefix=allowed_prefix,
            poll_interval=poll_interval,
            push_timeout=push_timeout,
            backend=backend,
        )
    except ValueError as e:
        raise click.UsageError(str(e)) from e

    configure_logging(verbose)

    _run(config)


def _run(config: SyncConfig) -> None:
    """Open the clipboard and run the server until interrupted.

    A clipboard that cannot be opened at startup is fatal (exit 1).

    Args:
        config: The resolved configuration.
    """
    import asyncio

    from peerclip.clipboard import open_accessor
    from peerclip.errors import ClipboardAccessError
    from peerclip.server import print_startup_message, run_server

    try:
        accessor = open_accessor(config.backend)
    except ClipboardAccessError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    print_startup_message(config, accessor.backend_name)
    try:
        asyncio.run(run_server(config, accessor))
    except KeyboardInterrupt:
        pass
    finally:
        accessor.close()
