#!/usr/bin/env python3
"""X11 clipboard backend built on python-xlib.

Reads CLIPBOARD by asking its owner to convert the selection to
UTF8_STRING into a private property on our hidden window. Writes by
taking ownership of CLIPBOARD and then serving the text to whoever asks
for it. Serving only works while somebody pumps the display's events,
which is what service_events() does from the clipboard thread's idle
hook.

All methods must run on the clipboard thread; python-xlib display
connections are not safe to share between threads.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from Xlib import X

from peerclip.errors import ClipboardAccessError
from peerclip.x11_display import create_hidden_window, open_display
from peerclip.x11_selection import (
    answer_selection_request,
    get_server_timestamp,
    wait_for_event_type,
)

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.protocol.rq import Event
    from Xlib.xobject.drawable import Window

logger = logging.getLogger(__name__)

# Seconds to wait for the selection owner to answer a conversion request.
CLIPBOARD_TIMEOUT: float = 2.0


def _resource_id(value: Any) -> int:
    """Return the X resource id of a Window or a raw id."""
    return getattr(value, "id", value)


class X11Backend:
    """Clipboard backend speaking the X11 selection protocol."""

    name = "x11"

    def __init__(
        self, display_name: str | None = None, timeout: float = CLIPBOARD_TIMEOUT
    ) -> None:
        self._display_name = display_name
        self._timeout = timeout
        self._display: Display | None = None
        self._window: Window | None = None
        self._content = b""
        self._owns_selection = False
        self._acquisition_time: int | None = None
        self._clipboard_atom = 0
        self._utf8_atom = 0
        self._incr_atom = 0
        self._prop_atom = 0

    def open(self) -> None:
        """Connect to the X server and prepare the hidden window.

        Raises:
            ClipboardAccessError: If the display cannot be opened.
        """
        display = open_display(self._display_name)
        self._display = display
        self._window = create_hidden_window(display)
        self._clipboard_atom = display.intern_atom("CLIPBOARD")
        self._utf8_atom = display.intern_atom("UTF8_STRING")
        self._incr_atom = display.intern_atom("INCR")
        self._prop_atom = display.intern_atom("PEERCLIP_SEL")
        display.flush()

    def read(self) -> str:
        """Return the CLIPBOARD text.

        Returns our own content when we are the owner, "" when nobody
        owns CLIPBOARD.

        Raises:
            ClipboardAccessError: If the owner does not offer text, the
                transfer is incremental, or the owner does not answer
                within the timeout.
        """
        display, window = self._require_open()
        owner = display.get_selection_owner(self._clipboard_atom)
        owner_id = _resource_id(owner)
        if owner_id == X.NONE:
            return ""
        if self._owns_selection and owner_id == window.id:
            return self._content.decode("utf-8")

        window.convert_selection(
            self._clipboard_atom, self._utf8_atom, self._prop_atom, X.CurrentTime
        )
        display.flush()

        deadline = time.monotonic() + self._timeout
        notify = wait_for_event_type(
            display, X.SelectionNotify, deadline, self._handle_event
        )
        if notify is None:
            raise ClipboardAccessError(
                f"Clipboard owner did not answer within {self._timeout} seconds"
            )
        if notify.property == X.NONE:
            raise ClipboardAccessError("Clipboard owner does not offer text content")
        return self._take_property()

    def write(self, text: str) -> None:
        """Take CLIPBOARD ownership and serve text from now on.

        Raises:
            ClipboardAccessError: If ownership could not be acquired.
        """
        display, window = self._require_open()
        deadline = time.monotonic() + self._timeout
        timestamp = get_server_timestamp(display, window, deadline, self._handle_event)

        self._content = text.encode("utf-8")
        window.set_selection_owner(self._clipboard_atom, timestamp)
        display.flush()

        owner = display.get_selection_owner(self._clipboard_atom)
        if _resource_id(owner) != window.id:
            self._owns_selection = False
            self._acquisition_time = None
            raise ClipboardAccessError("Failed to acquire CLIPBOARD ownership")
        self._owns_selection = True
        self._acquisition_time = None if timestamp == X.CurrentTime else timestamp
        logger.debug("Own CLIPBOARD with %d bytes", len(self._content))

    def service_events(self) -> None:
        """Handle every event already queued on the display."""
        if self._display is None:
            return
        while self._display.pending_events() > 0:
            self._handle_event(self._display.next_event())

    def close(self) -> None:
        if self._display is None:
            return
        display = self._display
        self._display = None
        self._window = None
        display.close()

    def _require_open(self) -> tuple[Display, Window]:
        if self._display is None or self._window is None:
            raise ClipboardAccessError("X11 clipboard backend is not open")
        return self._display, self._window

    def _handle_event(self, event: Event) -> None:
        if event.type == X.SelectionRequest:
            answer_selection_request(
                self._display, event, self._content, self._acquisition_time
            )
        elif event.type == X.SelectionClear:
            # Another client took CLIPBOARD; stop serving our copy
            logger.debug("Lost CLIPBOARD ownership")
            self._owns_selection = False
            self._acquisition_time = None
            self._content = b""

    def _take_property(self) -> str:
        display, window = self._require_open()
        prop = window.get_full_property(self._prop_atom, X.AnyPropertyType)
        window.delete_property(self._prop_atom)
        display.flush()

        if prop is None:
            return ""
        if prop.property_type == self._incr_atom:
            raise ClipboardAccessError("Incremental clipboard transfers are not supported")
        data = prop.value
        if isinstance(data, str):
            return data
        return bytes(data).decode("utf-8", errors="replace")
