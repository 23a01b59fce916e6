#!/usr/bin/env python3
"""Exception taxonomy for peerclip.

Poller-side errors are always contained by the poller. Request-side
errors are turned into an HTTP status for the caller:

- PayloadValidationError: malformed or missing inbound payload (400)
- AccessDeniedError: caller outside the allowed network range (403)
- ClipboardAccessError: local clipboard unreadable or unwritable (500)
- PeerUnreachableError: push to the peer failed (logged, never raised
  past the pusher)
"""


class PeerclipError(Exception):
    """Base class for all peerclip errors."""

    pass


class PayloadValidationError(PeerclipError):
    """Raised when an inbound payload lacks a non-empty text field."""

    pass


class AccessDeniedError(PeerclipError):
    """Raised when a caller address or origin is outside the allow-list."""

    pass


class ClipboardAccessError(PeerclipError):
    """Raised when the platform clipboard cannot be read or written.

    Covers non-text content, a clipboard locked by another process,
    unresponsive selection owners and backend initialization failures.
    """

    pass


class PeerUnreachableError(PeerclipError):
    """Raised when the peer cannot be reached or rejects a push."""

    pass
