#!/usr/bin/env python3
"""Local clipboard change detection.

The poller samples the local clipboard once per interval and decides,
for every new value, whether it is a genuine local copy (store it and
push it to the peer) or the echo of a value the inbound handler just
wrote (drop it).

Echo detection relies on SyncState's peer flag: the inbound handler
sets it before writing the clipboard, and the first tick that sees a
new clipboard value consumes it.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from contextlib import suppress
from typing import TYPE_CHECKING

from peerclip.errors import ClipboardAccessError
from peerclip.preview import truncate

if TYPE_CHECKING:
    from peerclip.clipboard import ClipboardAccessor
    from peerclip.peer_pusher import PeerPusher
    from peerclip.sync_state import SyncState

logger = logging.getLogger(__name__)


class TickOutcome(enum.Enum):
    """What a single poller tick did."""

    UNCHANGED = "unchanged"
    ECHO_SUPPRESSED = "echo_suppressed"
    PUSHED = "pushed"
    PUSH_FAILED = "push_failed"
    READ_FAILED = "read_failed"


class ChangePoller:
    """Periodic sampler of the local clipboard."""

    def __init__(
        self,
        state: SyncState,
        accessor: ClipboardAccessor,
        pusher: PeerPusher,
        interval: float,
    ) -> None:
        self._state = state
        self._accessor = accessor
        self._pusher = pusher
        self._interval = interval
        self._last_observed = ""

    @property
    def last_observed(self) -> str:
        """Last non-empty value read from the local clipboard."""
        return self._last_observed

    async def tick(self) -> TickOutcome:
        """Sample the clipboard once and act on a change.

        Read failures are logged and reported as READ_FAILED; they never
        propagate.

        Returns:
            The outcome of this tick.
        """
        try:
            current = await self._accessor.read()
        except ClipboardAccessError as e:
            logger.warning("[READ ERROR] %s", e)
            return TickOutcome.READ_FAILED

        if not current:
            return TickOutcome.UNCHANGED
        if current == self._last_observed:
            # Peer sent what the clipboard already held; no change will follow
            if self._state.consume_peer_flag_for(current):
                logger.debug("Peer value already on clipboard: \"%s\"", truncate(current))
            return TickOutcome.UNCHANGED

        # Advance before branching so the next tick does not see it again
        self._last_observed = current

        if self._state.consume_peer_flag():
            logger.info("[ECHO SUPPRESSED] \"%s\"", truncate(current))
            return TickOutcome.ECHO_SUPPRESSED

        logger.info("[LAPTOP COPY DETECTED] \"%s\"", truncate(current))
        self._state.set(current, from_peer=False)
        if await self._pusher.push(current):
            return TickOutcome.PUSHED
        return TickOutcome.PUSH_FAILED

    async def run(self, shutdown: asyncio.Event) -> None:
        """Tick every interval until shutdown is set.

        The wait between ticks returns as soon as shutdown is set. A tick
        that fails unexpectedly is logged and the loop carries on.

        Args:
            shutdown: Event signaling that the process is stopping.
        """
        logger.info("[SYNC] Clipboard poller started (every %ss)", self._interval)
        while not shutdown.is_set():
            try:
                await self.tick()
            except Exception:
                logger.exception("[SYNC] Poller tick failed, continuing")
            with suppress(asyncio.TimeoutError):
                await asyncio.wait_for(shutdown.wait(), timeout=self._interval)
        logger.info("[SYNC] Clipboard poller stopped")
