#!/usr/bin/env python3
"""Pytest fixtures for peerclip tests.

Provides an in-memory clipboard backend, an accessor running it on a
real clipboard thread, shared state and a mocked peer pusher.
"""

from collections.abc import Generator
from unittest.mock import AsyncMock

import pytest

from peerclip.clipboard import ClipboardAccessor
from peerclip.peer_pusher import PeerPusher
from peerclip.sync_state import SyncState


class FakeBackend:
    """In-memory clipboard backend recording every call."""

    name = "fake"

    def __init__(self) -> None:
        self.text = ""
        self.read_error: Exception | None = None
        self.write_error: Exception | None = None
        self.writes: list[str] = []
        self.reads = 0
        self.opened = False
        self.closed = False

    def open(self) -> None:
        self.opened = True

    def read(self) -> str:
        self.reads += 1
        if self.read_error is not None:
            raise self.read_error
        return self.text

    def write(self, text: str) -> None:
        if self.write_error is not None:
            raise self.write_error
        self.writes.append(text)
        self.text = text

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def sync_state() -> SyncState:
    """Create a fresh SyncState instance for testing."""
    return SyncState()


@pytest.fixture
def fake_backend() -> FakeBackend:
    """Create an empty in-memory clipboard backend."""
    return FakeBackend()


@pytest.fixture
def accessor(fake_backend: FakeBackend) -> Generator[ClipboardAccessor, None, None]:
    """Open an accessor over fake_backend on a real clipboard thread."""
    clipboard = ClipboardAccessor(fake_backend)
    clipboard.open()
    yield clipboard
    clipboard.close()


@pytest.fixture
def mock_pusher() -> AsyncMock:
    """Create a PeerPusher mock whose pushes succeed."""
    pusher = AsyncMock(spec=PeerPusher)
    pusher.push.return_value = True
    return pusher
