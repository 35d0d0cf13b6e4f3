"""Shortening tool output for error messages."""

from __future__ import annotations

__all__ = ["TAIL_CHARS", "tail"]

TAIL_CHARS = 2000


def tail(text: str, limit: int = TAIL_CHARS) -> str:
    """Strip ``text`` and keep its last ``limit`` characters, marked with "..."."""
    text = text.strip()
    if len(text) <= limit:
        return text
    return "..." + text[-limit:]
