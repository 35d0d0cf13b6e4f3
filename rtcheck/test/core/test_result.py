"""Tests for rtcheck.core.result module."""

from __future__ import annotations

import pytest

from rtcheck.core.result import Err, Ok


def test_pattern_matching() -> None:
    match Ok("v"):
        case Ok(value):
            assert value == "v"
        case Err():
            pytest.fail("expected Ok")


def test_equality_and_repr() -> None:
    assert Ok(1) == Ok(1)
    assert Ok(1) != Err(1)
    assert repr(Err("bad")) == "Err('bad')"
