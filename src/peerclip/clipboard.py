#!/usr/bin/env python3
"""Clipboard accessor and backend selection.

ClipboardAccessor is the only way the rest of peerclip touches the local
clipboard. It hides which backend is in use and which thread the backend
must run on: every call is marshaled onto a dedicated ClipboardThread and
the awaiting coroutine resumes once the call completed or failed.

Backends:
- x11: python-xlib, talks to the X server named by DISPLAY
- pyperclip: portable fallback (Windows, macOS, Wayland via wl-clipboard)
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Mapping
from typing import Any, Callable, Protocol

from peerclip.clipboard_thread import ClipboardThread
from peerclip.errors import ClipboardAccessError

logger = logging.getLogger(__name__)


class ClipboardBackend(Protocol):
    """Synchronous clipboard primitives, always called on one thread."""

    name: str

    def open(self) -> None:
        """Acquire platform resources. Raises ClipboardAccessError."""

    def read(self) -> str:
        """Return the clipboard text, "" if empty. Raises ClipboardAccessError."""

    def write(self, text: str) -> None:
        """Replace the clipboard text. Raises ClipboardAccessError."""

    def close(self) -> None:
        """Release platform resources."""


class ClipboardAccessor:
    """Async facade over a backend pinned to a dedicated thread."""

    def __init__(
        self, backend: ClipboardBackend, thread: ClipboardThread | None = None
    ) -> None:
        self._backend = backend
        if thread is None:
            thread = ClipboardThread(
                name=f"clipboard-{backend.name}",
                idle=getattr(backend, "service_events", None),
            )
        self._thread = thread

    @property
    def backend_name(self) -> str:
        return self._backend.name

    def open(self) -> None:
        """Start the clipboard thread and open the backend on it.

        Raises:
            ClipboardAccessError: If the backend cannot be initialized.
        """
        self._thread.start()
        try:
            self._thread.call(self._backend.open)
        except ClipboardAccessError:
            self._thread.stop()
            raise
        logger.debug("Clipboard backend %s ready", self._backend.name)

    async def read(self) -> str:
        """Read the local clipboard text.

        Raises:
            ClipboardAccessError: If the clipboard cannot be read.
        """
        return await self._run(self._backend.read)

    async def write(self, text: str) -> None:
        """Write text to the local clipboard.

        Raises:
            ClipboardAccessError: If the clipboard cannot be written.
        """
        await self._run(self._backend.write, text)

    def close(self) -> None:
        """Close the backend and stop the clipboard thread."""
        try:
            if self._thread.running:
                self._thread.call(self._backend.close)
        finally:
            self._thread.stop()

    async def _run(self, fn: Callable[..., Any], *args: Any) -> Any:
        future = self._thread.submit(fn, *args)
        try:
            return await asyncio.wrap_future(future)
        except ClipboardAccessError:
            raise
        except Exception as e:
            raise ClipboardAccessError(f"{type(e).__name__}: {e}") from e


def resolve_backend_name(requested: str, environ: Mapping[str, str] | None = None) -> str:
    """Map "auto" to a concrete backend name.

    Args:
        requested: "auto", "x11" or "pyperclip".
        environ: Environment to inspect, os.environ by default.

    Returns:
        "x11" when requested, or when auto and DISPLAY is set;
        otherwise "pyperclip".
    """
    if requested != "auto":
        return requested
    env = os.environ if environ is None else environ
    return "x11" if env.get("DISPLAY") else "pyperclip"


def create_backend(name: str) -> ClipboardBackend:
    """Instantiate the backend with the given concrete name.

    Raises:
        ValueError: If name is not a known backend.
    """
    if name == "x11":
        from peerclip.clipboard_x11 import X11Backend

        return X11Backend()
    if name == "pyperclip":
        from peerclip.clipboard_pyperclip import PyperclipBackend

        return PyperclipBackend()
    raise ValueError(f"unknown clipboard backend: {name}")


def open_accessor(requested: str) -> ClipboardAccessor:
    """Create and open an accessor for the requested backend.

    Raises:
        ClipboardAccessError: If the clipboard subsystem cannot start.
    """
    backend = create_backend(resolve_backend_name(requested))
    accessor = ClipboardAccessor(backend)
    accessor.open()
    return accessor
