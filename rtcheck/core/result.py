"""Result type for explicit error handling.

Parsers and loaders in rtcheck return ``Ok(value)`` or ``Err(error)``
instead of raising, so the check protocol can decide per step whether a
failure ends the check. Callers narrow with ``isinstance`` or ``match``:

    match parse_version("v16.14.0"):
        case Ok(version):
            print(version)
        case Err(failure):
            print(f"unparseable: {failure.raw}")
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Successful result carrying ``value``."""

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """Failed result carrying ``error``."""

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]
