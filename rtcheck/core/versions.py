"""Version parsing and comparison.

Tools print versions in many shapes (``v16.14.0``, ``Python 3.11.4``,
``ruby 3.2.2p53 (...)``, ``Neovim-Ext-0.06.tar.gz``). ``parse_version``
extracts the first ``X.Y`` or ``X.Y.Z`` token and returns a ``Version``
that compares numerically per component.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .result import Err, Ok, Result
from .text import tail

__all__ = ["ParseFailure", "Version", "parse_version"]

_VERSION_RE = re.compile(r"(?<![\w.])v?(\d+)\.(\d+)(?:\.(\d+))?")


@dataclass(frozen=True, slots=True, order=True)
class Version:
    major: int
    minor: int
    patch: int = 0

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True, slots=True)
class ParseFailure:
    """Output that did not contain a recognizable version.

    Attributes:
        raw: The text that was parsed, kept for the error report.
        reason: Short description of what was expected.
    """

    raw: str
    reason: str = "no version number found"

    def __str__(self) -> str:
        raw = tail(self.raw)
        if not raw:
            return f"{self.reason} (empty output)"
        return f"{self.reason}: {raw!r}"


def parse_version(text: str) -> Result[Version, ParseFailure]:
    """Parse the first version number found in ``text``.

    A missing patch component is read as 0, so ``0.06`` parses to 0.6.0.
    """
    match = _VERSION_RE.search(text)
    if match is None:
        return Err(ParseFailure(raw=text))
    major, minor, patch = match.groups()
    return Ok(Version(int(major), int(minor), int(patch) if patch else 0))
