# SPDX-License-Identifier: MIT
"""Common utilities for checkers.

This module provides shared functionality used by all checks:
- CommandRunner protocol, so tests can swap in canned results
- Install hints loading and lookup
- CheckContext, the read-only state threaded through one check
"""

from __future__ import annotations

import logging
import os
import shutil
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from rtcheck.core.config import DEFAULT_TIMEOUT_MS, CheckSettings, Config
from rtcheck.core.structured import as_str_dict
from rtcheck.platform.detection import PlatformInfo, detect
from rtcheck.platform.process import Command, CommandOptions, CommandResult, run_command

__all__ = [
    "CONNECTIVITY_HINTS",
    "CheckContext",
    "CommandRunner",
    "DefaultCommandRunner",
    "Hints",
    "first_line",
    "load_hints",
    "package_manager_command",
]

logger = logging.getLogger(__name__)

CONNECTIVITY_HINTS: tuple[str, ...] = (
    "Make sure you're connected to the internet.",
    "Are you behind a firewall or proxy?",
)


class CommandRunner(Protocol):
    """Protocol for running external commands.

    This abstraction allows replacing process launches in tests.
    """

    async def run(
        self,
        cmd: Command,
        *,
        input: str = "",
        options: CommandOptions = CommandOptions(),
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        """Run a command and return its fully resolved result."""
        ...


class DefaultCommandRunner:
    """Default command runner backed by ``run_command``."""

    async def run(
        self,
        cmd: Command,
        *,
        input: str = "",
        options: CommandOptions = CommandOptions(),
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        return await run_command(cmd, input, options, timeout_ms=timeout_ms, cwd=cwd, env=env)


def _empty_hint_dict() -> dict[str, dict[str, str]]:
    return {}


@dataclass(frozen=True, slots=True)
class Hints:
    """Install hints for runtimes, keyed by platform.

    Structure mirrors hints.toml:
        [runtimes.node]
        debian = "sudo apt install nodejs npm"
        macos = "brew install node"
        default = "https://nodejs.org/en/download"
    """

    runtimes: dict[str, dict[str, str]] = field(default_factory=_empty_hint_dict)

    def get_runtime_hint(self, runtime: str, platform_key: str) -> str | None:
        """Get the install hint for a runtime, falling back to "default"."""
        hints = self.runtimes.get(runtime)
        if not hints:
            return None
        return hints.get(platform_key) or hints.get("default")

    @classmethod
    def empty(cls) -> Hints:
        return cls()


def load_hints(path: Path | None = None) -> Hints:
    """Load hints from TOML file.

    Args:
        path: Path to hints.toml. If None, uses the packaged rtcheck/data/hints.toml.

    Returns:
        Hints with loaded data, or empty Hints on error.
    """
    if path is None:
        # rtcheck/services/checkers/common.py -> rtcheck/data
        path = Path(__file__).parent.parent.parent / "data" / "hints.toml"

    if not path.exists():
        return Hints.empty()

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        logger.warning("ignoring unreadable hints file %s: %s", path, e)
        return Hints.empty()

    return Hints(runtimes=_extract_section(data, "runtimes"))


def _extract_section(data: dict[str, object], section: str) -> dict[str, dict[str, str]]:
    """Extract a two-level string table from parsed TOML data.

    Example:
        data = {"runtimes": {"node": {"debian": "apt install nodejs"}}}
        _extract_section(data, "runtimes") -> {"node": {"debian": "apt install nodejs"}}
    """
    result: dict[str, dict[str, str]] = {}
    section_dict = as_str_dict(data.get(section))
    if section_dict is None:
        return result

    for item_key, item_value in section_dict.items():
        item_dict = as_str_dict(item_value)
        if item_dict is None:
            continue
        hint_dict = {k: str(v) for k, v in item_dict.items() if v is not None}
        if hint_dict:
            result[item_key] = hint_dict

    return result


def _default_env() -> dict[str, str]:
    return dict(os.environ)


@dataclass(frozen=True, slots=True)
class CheckContext:
    """Ambient state for one check run. Read-only for checks.

    Attributes:
        cwd: Working directory for launched commands
        env: Environment for launched commands and PATH lookups
        platform: Detected platform (command spellings, hint keys)
        config: Loaded configuration (disabling flags, host programs)
        hints: Install hints table
    """

    cwd: Path = field(default_factory=Path.cwd)
    env: Mapping[str, str] = field(default_factory=_default_env)
    platform: PlatformInfo = field(default_factory=detect)
    config: Config = field(default_factory=Config)
    hints: Hints = field(default_factory=Hints.empty)

    @property
    def timeout_ms(self) -> int:
        return self.config.timeout_ms

    def which(self, name: str) -> str | None:
        """Resolve an executable on the context's PATH."""
        return shutil.which(name, path=self.env.get("PATH"))

    def settings_for(self, check_name: str) -> CheckSettings:
        return self.config.settings_for(check_name)

    def disabled(self, check_name: str) -> bool:
        """The disabling signal: ``enabled = false`` for this check."""
        return self.settings_for(check_name).disabled

    def install_hint(self, runtime: str) -> str | None:
        return self.hints.get_runtime_hint(runtime, self.platform.hint_key)


def first_line(text: str) -> str:
    """Extract first non-empty line from text.

    Useful for parsing version output from commands.
    """
    for line in text.strip().splitlines():
        stripped = line.strip()
        if stripped:
            return stripped
    return ""


def package_manager_command(ctx: CheckContext, *argv: str) -> Command:
    """Build a package-manager command.

    npm, yarn, pnpm and gem are batch scripts on Windows and only start
    through ``cmd /c``.
    """
    if ctx.platform.is_windows:
        return Command.of("cmd", "/c", *argv)
    return Command.of(*argv)
