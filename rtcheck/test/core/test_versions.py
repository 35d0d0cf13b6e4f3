"""Tests for rtcheck.core.versions module."""

from __future__ import annotations

import pytest

from rtcheck.core.result import Err, Ok
from rtcheck.core.text import TAIL_CHARS
from rtcheck.core.versions import ParseFailure, Version, parse_version


class TestParseVersion:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("v16.14.0\n", Version(16, 14, 0)),
            ("Python 3.11.4", Version(3, 11, 4)),
            ("ruby 3.2.2p53 (2023-03-30 revision e51014f9c0) [x86_64-linux]", Version(3, 2, 2)),
            ("v5.34.0", Version(5, 34, 0)),
            ("JACQUESG/Neovim-Ext-0.06.tar.gz", Version(0, 6, 0)),
            ("pynvim (0.5.0)\nAvailable versions: 0.5.0, 0.4.3", Version(0, 5, 0)),
            ("4.10", Version(4, 10, 0)),
        ],
    )
    def test_formats(self, text: str, expected: Version) -> None:
        assert parse_version(text) == Ok(expected)

    def test_no_version(self) -> None:
        result = parse_version("command not found")
        assert isinstance(result, Err)
        assert result.error.raw == "command not found"

    def test_empty(self) -> None:
        result = parse_version("")
        assert isinstance(result, Err)
        assert str(result.error) == "no version number found (empty output)"

    def test_bare_integer_is_not_a_version(self) -> None:
        assert isinstance(parse_version("42"), Err)


class TestVersion:
    def test_numeric_ordering(self) -> None:
        assert Version(2, 0, 0) < Version(2, 1, 0)
        assert Version(0, 9, 1) < Version(0, 10, 0)
        assert Version(6, 0, 0) > Version(4, 2, 0)
        assert Version(1, 2) == Version(1, 2, 0)

    def test_str(self) -> None:
        assert str(Version(16, 14)) == "16.14.0"


class TestParseFailure:
    def test_str_includes_raw(self) -> None:
        failure = ParseFailure(raw="garbage", reason="bad")
        assert str(failure) == "bad: 'garbage'"

    def test_long_raw_is_tailed(self) -> None:
        raw = '{"name": "neovim", "versions": [' + '"1.0.0", ' * 2000 + '"9.9.9"]}'

        message = str(ParseFailure(raw=raw, reason="no dist-tags"))

        assert message.startswith("no dist-tags: '...")
        assert message.endswith("\"9.9.9\"]}'")
        assert len(message) < TAIL_CHARS + 50
