#!/usr/bin/env python3
"""X11 selection protocol helpers.

This module provides the pieces of the ICCCM selection protocol the x11
backend needs:
- Waiting, with a deadline, for a specific event type while handing all
  other events to a callback
- Obtaining a server timestamp for set_selection_owner
- Answering SelectionRequest events while we own CLIPBOARD
"""

from __future__ import annotations

import logging
import select
import time
from typing import TYPE_CHECKING, Callable

from Xlib import X, Xatom
from Xlib.protocol.event import SelectionNotify

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.protocol.event import SelectionRequest
    from Xlib.protocol.rq import Event
    from Xlib.xobject.drawable import Window

logger = logging.getLogger(__name__)


def wait_for_event_type(
    display: Display,
    target_event_type: int,
    deadline: float,
    on_other_event: Callable[[Event], None],
) -> Event | None:
    """Read events until one of target_event_type arrives or time runs out.

    Every other event is passed to on_other_event immediately, so
    SelectionRequest events keep being answered while we wait.

    Args:
        display: The X11 display connection.
        target_event_type: The X11 event type to wait for.
        deadline: time.monotonic() value after which to give up.
        on_other_event: Callback for events of any other type.

    Returns:
        The matching event, or None if the deadline passed first.
    """
    while True:
        while display.pending_events() > 0:
            event = display.next_event()
            if event.type == target_event_type:
                return event
            on_other_event(event)
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            return None
        select.select([display], [], [], remaining)


def get_server_timestamp(
    display: Display,
    window: Window,
    deadline: float,
    on_other_event: Callable[[Event], None],
) -> int:
    """Query the X server's current timestamp.

    Changes a dummy property on the window and waits for the resulting
    PropertyNotify, whose time field is the server's current time.

    Returns:
        The server timestamp, or X.CurrentTime if none arrived in time.
    """
    prop_atom = display.intern_atom("PEERCLIP_TIMESTAMP")
    window.change_property(prop_atom, Xatom.INTEGER, 32, [0])
    display.flush()

    event = wait_for_event_type(display, X.PropertyNotify, deadline, on_other_event)
    if event is None:
        return X.CurrentTime
    return event.time


def answer_selection_request(
    display: Display,
    event: SelectionRequest,
    content: bytes,
    acquisition_time: int | None,
) -> None:
    """Respond to a SelectionRequest while owning CLIPBOARD.

    Supports TARGETS, UTF8_STRING (preferred), STRING and TIMESTAMP;
    every other target is refused with property=None.

    Args:
        display: The X11 display connection.
        event: The SelectionRequest event.
        content: UTF-8 encoded text to serve.
        acquisition_time: Server time at which ownership was taken, or None.
    """
    targets_atom = display.intern_atom("TARGETS")
    utf8_atom = display.intern_atom("UTF8_STRING")
    timestamp_atom = display.intern_atom("TIMESTAMP")

    # Obsolete clients send property=None; ICCCM says use the target atom
    prop = event.property if event.property != X.NONE else event.target

    if event.target == targets_atom:
        targets = [targets_atom, utf8_atom, Xatom.STRING, timestamp_atom]
        event.requestor.change_property(prop, Xatom.ATOM, 32, targets)
    elif event.target in (utf8_atom, Xatom.STRING):
        event.requestor.change_property(prop, event.target, 8, content)
    elif event.target == timestamp_atom and acquisition_time is not None:
        event.requestor.change_property(prop, Xatom.INTEGER, 32, [acquisition_time])
    else:
        logger.debug("Refusing selection target %s", event.target)
        prop = X.NONE

    event.requestor.send_event(
        SelectionNotify(
            time=event.time,
            requestor=event.requestor.id,
            selection=event.selection,
            target=event.target,
            property=prop,
        ),
        event_mask=0,
    )
    display.flush()
