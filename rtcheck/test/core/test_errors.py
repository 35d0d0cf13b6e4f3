"""Tests for rtcheck.core.errors module."""

from __future__ import annotations

from rtcheck.core.errors import ErrorCode


def test_exit_codes_are_stable() -> None:
    assert ErrorCode.OK == 0
    assert ErrorCode.USER_ERROR == 1
    assert ErrorCode.ENV_ERROR == 2
    assert ErrorCode.CONFIG_ERROR == 3
