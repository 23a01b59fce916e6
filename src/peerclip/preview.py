#!/usr/bin/env python3
"""Shortened clipboard text for log lines."""

from peerclip.sync_constants import PREVIEW_LENGTH


def truncate(value: str, max_length: int = PREVIEW_LENGTH) -> str:
    """Return value cut to max_length characters, marked with an ellipsis.

    Args:
        value: Clipboard text to shorten.
        max_length: Maximum characters kept before the ellipsis.

    Returns:
        value unchanged if short enough, otherwise its prefix plus "…".
    """
    if len(value) <= max_length:
        return value
    return value[:max_length] + "…"
