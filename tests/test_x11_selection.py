#!/usr/bin/env python3
"""Tests for X11 selection protocol helpers."""
import time
from unittest.mock import MagicMock, patch

from Xlib import X, Xatom

from peerclip.x11_selection import (
    answer_selection_request,
    get_server_timestamp,
    wait_for_event_type,
)

ATOMS = {"TARGETS": 20, "UTF8_STRING": 11, "TIMESTAMP": 21, "PEERCLIP_TIMESTAMP": 22}


def make_display() -> MagicMock:
    """Create a mock display with fixed atoms."""
    display = MagicMock()
    display.intern_atom.side_effect = lambda name: ATOMS[name]
    return display


def make_request(target: int, prop: int = 50) -> MagicMock:
    """Create a mock SelectionRequest event."""
    event = MagicMock()
    event.type = X.SelectionRequest
    event.target = target
    event.property = prop
    event.time = 1
    event.selection = 10
    event.requestor.id = 77
    return event


class TestWaitForEventType:
    """Tests for wait_for_event_type."""

    def test_returns_target_and_dispatches_others(self) -> None:
        """Test other events go to the callback while waiting."""
        display = MagicMock()
        other = MagicMock(type=X.SelectionRequest)
        target = MagicMock(type=X.SelectionNotify)
        display.pending_events.side_effect = [1, 1]
        display.next_event.side_effect = [other, target]
        seen: list[MagicMock] = []

        result = wait_for_event_type(
            display, X.SelectionNotify, time.monotonic() + 1.0, seen.append
        )

        assert result is target
        assert seen == [other]

    def test_returns_none_after_deadline(self) -> None:
        """Test an expired deadline with no events returns None."""
        display = MagicMock()
        display.pending_events.return_value = 0

        result = wait_for_event_type(
            display, X.SelectionNotify, time.monotonic() - 1.0, lambda event: None
        )

        assert result is None


def test_get_server_timestamp_uses_property_notify() -> None:
    """Test the PropertyNotify time is returned."""
    display = make_display()
    window = MagicMock()
    event = MagicMock(time=5555)

    with patch("peerclip.x11_selection.wait_for_event_type", return_value=event):
        assert get_server_timestamp(display, window, time.monotonic() + 1, lambda e: None) == 5555

    window.change_property.assert_called_once_with(
        ATOMS["PEERCLIP_TIMESTAMP"], Xatom.INTEGER, 32, [0]
    )


def test_get_server_timestamp_falls_back_to_current_time() -> None:
    """Test a missing PropertyNotify yields CurrentTime."""
    display = make_display()
    with patch("peerclip.x11_selection.wait_for_event_type", return_value=None):
        assert get_server_timestamp(display, MagicMock(), 0.0, lambda e: None) == X.CurrentTime


class TestAnswerSelectionRequest:
    """Tests for answer_selection_request."""

    def test_utf8_request_gets_content(self) -> None:
        """Test UTF8_STRING requests receive the content bytes."""
        display = make_display()
        event = make_request(ATOMS["UTF8_STRING"])

        with patch("peerclip.x11_selection.SelectionNotify") as mock_notify:
            answer_selection_request(display, event, b"data", 1234)

        event.requestor.change_property.assert_called_once_with(
            50, ATOMS["UTF8_STRING"], 8, b"data"
        )
        assert mock_notify.call_args.kwargs["property"] == 50
        event.requestor.send_event.assert_called_once()

    def test_targets_request_lists_supported_targets(self) -> None:
        """Test TARGETS lists UTF8_STRING, STRING and TIMESTAMP."""
        display = make_display()
        event = make_request(ATOMS["TARGETS"])

        with patch("peerclip.x11_selection.SelectionNotify"):
            answer_selection_request(display, event, b"data", 1234)

        args = event.requestor.change_property.call_args.args
        assert args[1] == Xatom.ATOM
        assert set(args[3]) == {
            ATOMS["TARGETS"], ATOMS["UTF8_STRING"], Xatom.STRING, ATOMS["TIMESTAMP"]
        }

    def test_timestamp_without_acquisition_time_is_refused(self) -> None:
        """Test TIMESTAMP is refused when no acquisition time is known."""
        display = make_display()
        event = make_request(ATOMS["TIMESTAMP"])

        with patch("peerclip.x11_selection.SelectionNotify") as mock_notify:
            answer_selection_request(display, event, b"data", None)

        event.requestor.change_property.assert_not_called()
        assert mock_notify.call_args.kwargs["property"] == X.NONE

    def test_unsupported_target_is_refused(self) -> None:
        """Test unknown targets get property None."""
        display = make_display()
        event = make_request(999)

        with patch("peerclip.x11_selection.SelectionNotify") as mock_notify:
            answer_selection_request(display, event, b"data", 1234)

        assert mock_notify.call_args.kwargs["property"] == X.NONE
