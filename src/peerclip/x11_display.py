#!/usr/bin/env python3
"""X11 display setup for the x11 clipboard backend.

The module handles:
- Opening the display named by DISPLAY
- Creating the hidden window used to own the CLIPBOARD selection
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from Xlib import X
from Xlib.error import DisplayError

from peerclip.errors import ClipboardAccessError

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.xobject.drawable import Window


def open_display(display_name: str | None = None) -> Display:
    """Open an X11 display connection.

    Args:
        display_name: Display to open; defaults to $DISPLAY.

    Returns:
        Display object for X11 operations.

    Raises:
        ClipboardAccessError: If DISPLAY is unset or the connection fails.
    """
    name = display_name or os.environ.get("DISPLAY")
    if not name:
        raise ClipboardAccessError(
            "DISPLAY environment variable is not set; "
            "the x11 clipboard backend needs an X11 display"
        )

    from Xlib.display import Display as XDisplay

    try:
        return XDisplay(name)
    except (DisplayError, OSError) as e:
        raise ClipboardAccessError(f"Failed to connect to X11 display {name}: {e}") from e


def create_hidden_window(display: Display) -> Window:
    """Create a 1x1 unmapped window for clipboard ownership.

    X11 selection ownership requires a window. PropertyChangeMask is
    selected so the window can be used to obtain server timestamps.

    Args:
        display: The X11 display connection.

    Returns:
        A Window object for owning the CLIPBOARD selection.
    """
    screen = display.screen()
    return screen.root.create_window(
        0, 0, 1, 1, 0, screen.root_depth, event_mask=X.PropertyChangeMask,
    )
