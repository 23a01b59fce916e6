#!/usr/bin/env python3
"""Portable clipboard backend built on pyperclip.

Used on platforms without an X11 display. On Windows the clipboard can
be held open by another process for a few milliseconds; such transient
failures are retried briefly with tenacity before they are reported.
"""

from __future__ import annotations

import logging

import pyperclip
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from peerclip.errors import ClipboardAccessError

logger = logging.getLogger(__name__)

# Attempts made for a single read or write while the clipboard is locked.
LOCK_RETRY_ATTEMPTS: int = 3

# Seconds between two attempts.
LOCK_RETRY_WAIT: float = 0.05

_retry_while_locked = retry(
    stop=stop_after_attempt(LOCK_RETRY_ATTEMPTS),
    wait=wait_fixed(LOCK_RETRY_WAIT),
    retry=retry_if_exception_type(pyperclip.PyperclipException),
    reraise=True,
)


@_retry_while_locked
def _paste() -> str:
    return pyperclip.paste()


@_retry_while_locked
def _copy(text: str) -> None:
    pyperclip.copy(text)


class PyperclipBackend:
    """Clipboard backend delegating to pyperclip."""

    name = "pyperclip"

    def open(self) -> None:
        """Check that pyperclip found a usable copy/paste mechanism.

        Raises:
            ClipboardAccessError: If no mechanism is available.
        """
        try:
            _paste()
        except pyperclip.PyperclipException as e:
            raise ClipboardAccessError(f"No usable clipboard mechanism: {e}") from e

    def read(self) -> str:
        """Return the clipboard text; non-text content reads as ""."""
        try:
            text = _paste()
        except pyperclip.PyperclipException as e:
            raise ClipboardAccessError(f"Failed to read clipboard: {e}") from e
        if not isinstance(text, str):
            logger.debug("Clipboard holds non-text content, treating as empty")
            return ""
        return text

    def write(self, text: str) -> None:
        try:
            _copy(text)
        except pyperclip.PyperclipException as e:
            raise ClipboardAccessError(f"Failed to write clipboard: {e}") from e

    def close(self) -> None:
        pass
