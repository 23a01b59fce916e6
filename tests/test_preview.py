#!/usr/bin/env python3
"""Tests for log preview truncation."""
from peerclip.preview import truncate


def test_short_text_unchanged() -> None:
    assert truncate("short") == "short"


def test_exact_length_unchanged() -> None:
    assert truncate("x" * 60) == "x" * 60


def test_long_text_cut_with_ellipsis() -> None:
    assert truncate("y" * 61) == "y" * 60 + "…"


def test_custom_length() -> None:
    assert truncate("abcdef", max_length=3) == "abc…"
