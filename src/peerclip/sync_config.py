#!/usr/bin/env python3
"""Resolved runtime configuration for peerclip."""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from peerclip.sync_constants import (
    DEFAULT_ALLOWED_PREFIX,
    DEFAULT_BACKEND,
    DEFAULT_HOST,
    DEFAULT_PEER_URL,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_PORT,
    DEFAULT_PUSH_TIMEOUT,
)

BACKEND_CHOICES: tuple[str, ...] = ("auto", "x11", "pyperclip")


@dataclass(frozen=True)
class SyncConfig:
    """Configuration fixed at process start.

    Attributes:
        host: Address the HTTP server binds to.
        port: Port the HTTP server listens on.
        peer_url: Base URL of the peer endpoint.
        allowed_prefix: IPv4 prefix a caller address must start with.
        poll_interval: Seconds between clipboard samples.
        push_timeout: Upper bound in seconds for a single push.
        backend: Clipboard backend name, one of BACKEND_CHOICES.
    """

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    peer_url: str = DEFAULT_PEER_URL
    allowed_prefix: str = DEFAULT_ALLOWED_PREFIX
    poll_interval: float = DEFAULT_POLL_INTERVAL
    push_timeout: float = DEFAULT_PUSH_TIMEOUT
    backend: str = DEFAULT_BACKEND

    def __post_init__(self) -> None:
        if self.poll_interval <= 0:
            raise ValueError("poll interval must be positive")
        if self.push_timeout <= 0:
            raise ValueError("push timeout must be positive")
        if self.push_timeout > self.poll_interval:
            raise ValueError(
                f"push timeout ({self.push_timeout}s) may not exceed "
                f"the poll interval ({self.poll_interval}s)"
            )
        if self.backend not in BACKEND_CHOICES:
            raise ValueError(f"unknown clipboard backend: {self.backend}")
        _check_peer_url(self.peer_url)

    @property
    def peer_clipboard_url(self) -> str:
        """URL of the peer's clipboard endpoint."""
        return self.peer_url.rstrip("/") + "/clipboard"

    @property
    def listen_url(self) -> str:
        """URL this process serves on."""
        return f"http://{self.host}:{self.port}"


def _check_peer_url(peer_url: str) -> None:
    """Reject a peer URL that can never be pushed to.

    Args:
        peer_url: Base URL of the peer endpoint.

    Raises:
        ValueError: If the URL is malformed, is not http(s), has no host,
            or carries a port outside 0-65535.
    """
    try:
        url = httpx.URL(peer_url)
    except httpx.InvalidURL as e:
        raise ValueError(f"invalid peer URL {peer_url!r}: {e}") from e
    if url.scheme not in ("http", "https") or not url.host:
        raise ValueError(f"peer URL must be http(s)://host[:port]: {peer_url!r}")
    if url.port is not None and not 0 <= url.port <= 65535:
        raise ValueError(f"peer URL port out of range: {url.port}")
