#!/usr/bin/env python3
"""Tests for peerclip logging configuration."""
import logging

import pytest

from peerclip.main_logging import configure_logging

LIBRARY_LOGGERS = ("httpx", "httpcore", "uvicorn", "uvicorn.error")


@pytest.fixture
def restore_library_levels():
    """Put library logger levels back after the test."""
    saved = {name: logging.getLogger(name).level for name in LIBRARY_LOGGERS}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


@pytest.mark.parametrize("verbose", [False, True])
def test_library_loggers_capped_at_warning(verbose: bool, restore_library_levels) -> None:
    """Test httpx and uvicorn stay at WARNING whatever the verbosity."""
    configure_logging(verbose)
    for name in LIBRARY_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING
