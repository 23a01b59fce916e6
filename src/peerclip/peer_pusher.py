#!/usr/bin/env python3
"""Forwarding of local clipboard changes to the peer.

Pushes are fire-and-forget: a failed push is logged and dropped, never
retried. The next genuine local change makes a fresh attempt. Each push
is bounded by a timeout no longer than one poll interval so a dead peer
cannot stall the poller.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from peerclip.errors import PeerUnreachableError
from peerclip.preview import truncate

logger = logging.getLogger(__name__)


class PeerPusher:
    """POSTs clipboard text to the peer's /clipboard endpoint."""

    def __init__(
        self,
        url: str,
        timeout: float,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Create a pusher.

        Args:
            url: Full URL of the peer's clipboard endpoint.
            timeout: Upper bound in seconds for one push.
            client: HTTP client to use; one is created if omitted.
        """
        self._url = url
        self._timeout = timeout
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient()

    @property
    def url(self) -> str:
        return self._url

    async def push(self, text: str) -> bool:
        """Send text to the peer.

        Never raises; every failure is logged and reported as False.

        Args:
            text: Clipboard text captured by the poller.

        Returns:
            True if the peer answered 2xx, False otherwise.
        """
        try:
            status = await self._send(text)
        except PeerUnreachableError as e:
            logger.warning("[PUSH FAILED] %s", e)
            return False
        except Exception:
            logger.exception("[PUSH FAILED] %s: unexpected error", self._url)
            return False
        logger.info("[PUSHED] %s — \"%s\" (%d)", self._url, truncate(text), status)
        return True

    async def _send(self, text: str) -> int:
        """POST text and return the status code.

        The whole exchange, including a slowly trickling response, is
        bounded by the push timeout.

        Raises:
            PeerUnreachableError: On timeout, connection failure or a
                non-2xx answer.
        """
        try:
            response = await asyncio.wait_for(
                self._client.post(self._url, json={"text": text}, timeout=self._timeout),
                timeout=self._timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise PeerUnreachableError(
                f"{self._url} did not answer within {self._timeout} seconds"
            ) from e
        except httpx.HTTPError as e:
            raise PeerUnreachableError(f"{self._url}: {type(e).__name__}: {e}") from e
        if not response.is_success:
            raise PeerUnreachableError(
                f"{self._url} answered {response.status_code}: {truncate(response.text)}"
            )
        return response.status_code

    async def aclose(self) -> None:
        """Close the HTTP client if this pusher created it."""
        if self._owns_client:
            await self._client.aclose()
