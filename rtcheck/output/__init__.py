"""Output abstraction layer."""

from .console import (
    ConsoleProtocol,
    EventRenderer,
    MockConsole,
    RichConsole,
    Style,
)
from .log import configure_logging

__all__ = [
    "ConsoleProtocol",
    "EventRenderer",
    "MockConsole",
    "RichConsole",
    "Style",
    "configure_logging",
]
