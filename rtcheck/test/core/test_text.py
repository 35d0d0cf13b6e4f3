"""Tests for rtcheck.core.text module."""

from __future__ import annotations

from rtcheck.core.text import tail


def test_short_text_is_stripped() -> None:
    assert tail("  v16.14.0\n") == "v16.14.0"


def test_long_text_keeps_the_end() -> None:
    assert tail("abcdefgh", limit=3) == "...fgh"
