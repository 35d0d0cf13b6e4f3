# SPDX-License-Identifier: MIT
"""Append-only sink of diagnostic events.

Checks report through a ``Reporter``: ``start_section`` opens a new group,
then ``info``/``ok``/``warn``/``error`` append findings to it. Events are
frozen and never retracted. Sinks (e.g. the console renderer) see each
event as it is emitted.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum, auto

__all__ = ["DiagnosticEvent", "EventKind", "EventSink", "Reporter"]

logger = logging.getLogger(__name__)


class EventKind(Enum):
    """Kind of a diagnostic event."""

    SECTION_START = auto()
    """A new section (one check) begins."""

    INFO = auto()
    """Neutral information (versions found, disabled checks)."""

    OK = auto()
    """The check passed."""

    WARN = auto()
    """Something optional is missing or outdated."""

    ERROR = auto()
    """A probe failed outright."""

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True, slots=True)
class DiagnosticEvent:
    """One finding.

    Attributes:
        kind: What sort of finding this is
        message: Human-readable text
        hints: Remediation suggestions, in display order
        section: Label of the section the event belongs to
    """

    kind: EventKind
    message: str
    hints: tuple[str, ...] = ()
    section: str = ""

    @property
    def is_error(self) -> bool:
        return self.kind == EventKind.ERROR

    @property
    def is_warning(self) -> bool:
        return self.kind == EventKind.WARN


type EventSink = Callable[[DiagnosticEvent], None]


def _empty_events() -> list[DiagnosticEvent]:
    return []


def _empty_sinks() -> list[EventSink]:
    return []


@dataclass
class Reporter:
    """Collects events for all sections, in emission order."""

    sinks: list[EventSink] = field(default_factory=_empty_sinks)
    _events: list[DiagnosticEvent] = field(default_factory=_empty_events, repr=False)
    _section: str = ""

    def start_section(self, name: str) -> None:
        self._section = name
        self._emit(EventKind.SECTION_START, name)

    def info(self, message: str) -> None:
        self._emit(EventKind.INFO, message)

    def ok(self, message: str) -> None:
        self._emit(EventKind.OK, message)

    def warn(self, message: str, hints: Iterable[str] = ()) -> None:
        self._emit(EventKind.WARN, message, hints)

    def error(self, message: str, hints: Iterable[str] = ()) -> None:
        self._emit(EventKind.ERROR, message, hints)

    def _emit(self, kind: EventKind, message: str, hints: Iterable[str] = ()) -> None:
        event = DiagnosticEvent(kind=kind, message=message, hints=tuple(hints), section=self._section)
        self._events.append(event)
        # Debug only: sinks already show events to the operator
        logger.debug("[%s] %s: %s", event.section, kind, message)

        for sink in self.sinks:
            sink(event)

    # Read-only views

    @property
    def current_section(self) -> str:
        return self._section

    @property
    def events(self) -> tuple[DiagnosticEvent, ...]:
        return tuple(self._events)

    def sections(self) -> dict[str, list[DiagnosticEvent]]:
        """Group events by section label, keeping first-seen order."""
        grouped: dict[str, list[DiagnosticEvent]] = {}
        for event in self._events:
            grouped.setdefault(event.section, []).append(event)
        return grouped

    def count(self, kind: EventKind) -> int:
        return sum(1 for e in self._events if e.kind == kind)

    def has_errors(self) -> bool:
        return any(e.is_error for e in self._events)

    def has_warnings(self) -> bool:
        return any(e.is_warning for e in self._events)
