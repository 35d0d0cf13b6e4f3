"""Console output abstraction.

Services never print directly. The CLI hands them a console (Rich in
production, ``MockConsole`` in tests) and ``EventRenderer`` turns
diagnostic events into styled lines as they are emitted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

from rtcheck.services.reporter import DiagnosticEvent, EventKind

__all__ = [
    "ConsoleProtocol",
    "EventRenderer",
    "MockConsole",
    "OutputRecord",
    "RichConsole",
    "Style",
]


class Style(Enum):
    """Text styles for console output."""

    DEFAULT = auto()
    SUCCESS = auto()  # Green, positive message
    ERROR = auto()  # Red, error message
    WARNING = auto()  # Yellow, warning message
    INFO = auto()  # Cyan, informational
    DIM = auto()  # Dimmed/muted text
    HEADER = auto()  # Section header

    def __str__(self) -> str:
        return self.name.lower()


class ConsoleProtocol(Protocol):
    """Protocol for console output."""

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        """Print a message with optional styling."""
        ...

    def header(self, message: str) -> None:
        """Print a section header."""
        ...

    def newline(self) -> None:
        """Print an empty line."""
        ...


class RichConsole:
    """Console implementation using Rich library."""

    def __init__(self) -> None:
        # Import Rich lazily to avoid import-time dependency
        from rich.console import Console

        self._console = Console(highlight=False)
        self._style_map = {
            Style.DEFAULT: "",
            Style.SUCCESS: "green",
            Style.ERROR: "red bold",
            Style.WARNING: "yellow",
            Style.INFO: "cyan",
            Style.DIM: "dim",
            Style.HEADER: "blue bold",
        }

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        rich_style = self._style_map.get(style, "")
        # markup=False: messages embed tool output that may contain [brackets]
        if rich_style:
            self._console.print(message, style=rich_style, markup=False)
        else:
            self._console.print(message, markup=False)

    def header(self, message: str) -> None:
        self._console.print()
        self._console.print(message, style="blue bold", markup=False)
        self._console.print("=" * len(message), style="blue", markup=False)

    def newline(self) -> None:
        self._console.print()


_PREFIX = {
    EventKind.INFO: ("- ", Style.DEFAULT),
    EventKind.OK: ("- OK ", Style.SUCCESS),
    EventKind.WARN: ("- WARNING ", Style.WARNING),
    EventKind.ERROR: ("- ERROR ", Style.ERROR),
}


@dataclass(frozen=True, slots=True)
class EventRenderer:
    """Reporter sink that prints each event to a console."""

    console: ConsoleProtocol

    def __call__(self, event: DiagnosticEvent) -> None:
        if event.kind == EventKind.SECTION_START:
            self.console.header(event.message)
            return

        prefix, style = _PREFIX[event.kind]
        lines = event.message.splitlines() or [""]
        self.console.print(prefix + lines[0], style)
        for line in lines[1:]:
            self.console.print("  " + line, style)

        if event.hints:
            self.console.print("  - ADVICE:", Style.DIM)
            for hint in event.hints:
                self.console.print(f"    - {hint}", Style.DIM)


@dataclass
class OutputRecord:
    """A single output record for MockConsole."""

    message: str
    style: Style


def _empty_outputs() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Console implementation that captures output for testing."""

    outputs: list[OutputRecord] = field(default_factory=_empty_outputs)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def header(self, message: str) -> None:
        self.outputs.append(OutputRecord(message, Style.HEADER))

    def newline(self) -> None:
        self.outputs.append(OutputRecord("", Style.DEFAULT))

    # Test helper methods

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return any(o.style == Style.ERROR for o in self.outputs)

    def has_warning(self) -> bool:
        return any(o.style == Style.WARNING for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        return [o for o in self.outputs if substring in o.message]

    def count(self, style: Style) -> int:
        return sum(1 for o in self.outputs if o.style == style)
