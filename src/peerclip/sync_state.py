#!/usr/bin/env python3
"""Shared synchronization state.

This module provides SyncState, the single piece of mutable state shared
between the change poller and the HTTP handlers. It holds the current
clipboard text and a flag recording whether the last write came from the
peer.

Loop prevention depends on the flag: the inbound handler sets it BEFORE
writing to the local clipboard, and the poller consumes it when it sees
the resulting clipboard change, so that change is recognized as an echo
rather than pushed back to the peer.
"""

from __future__ import annotations

import threading


class SyncState:
    """Current text and its origin, guarded by a lock.

    The text and the origin flag always change together. The poller, the
    request handlers and the clipboard thread may call into it from
    different threads; every method holds the lock for its whole body.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._text = ""
        self._from_peer = False

    def set(self, text: str, from_peer: bool) -> None:
        """Replace the text and origin flag in one step.

        Args:
            text: The newly accepted clipboard text.
            from_peer: True if the text arrived from the peer.
        """
        with self._lock:
            self._text = text
            self._from_peer = from_peer

    def get(self) -> str:
        """Return the current text without side effects."""
        with self._lock:
            return self._text

    def snapshot(self) -> tuple[str, bool]:
        """Return (text, from_peer) as one consistent pair."""
        with self._lock:
            return self._text, self._from_peer

    def consume_peer_flag(self) -> bool:
        """Return the origin flag and reset it to False.

        Read and reset happen under one lock acquisition, so two callers
        can never both observe True for the same peer write.

        Returns:
            True if the last write came from the peer and had not yet
            been consumed.
        """
        with self._lock:
            was_from_peer = self._from_peer
            self._from_peer = False
            return was_from_peer

    def consume_peer_flag_for(self, text: str) -> bool:
        """Reset the origin flag only if the peer wrote exactly text.

        Used when the peer sends a value the local clipboard already
        holds: no clipboard change will ever be observed for it, so the
        flag has to be settled explicitly or it would swallow the next
        genuine local change.

        Args:
            text: The value currently on the local clipboard.

        Returns:
            True if the flag was set for text and has now been reset.
        """
        with self._lock:
            if not self._from_peer or self._text != text:
                return False
            self._from_peer = False
            return True
