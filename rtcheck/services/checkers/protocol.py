# SPDX-License-Identifier: MIT
"""The check protocol every runtime check follows.

``RuntimeCheck.run`` walks the steps below, and any step may end the check:

    start -> disabled? -> executables on PATH -> runtime version
          -> minimum version gate -> capability probes
          -> companion package found -> latest version (registry)
          -> installed version -> compare

Subclasses only say which commands to run and how to read their output.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import Enum, auto
from typing import ClassVar

from rtcheck.core.result import Err, Result
from rtcheck.core.versions import ParseFailure, Version, parse_version
from rtcheck.platform.process import (
    Command,
    CommandOptions,
    CommandResult,
    describe_failure,
    shellify,
)
from rtcheck.services.checkers.common import (
    CONNECTIVITY_HINTS,
    CheckContext,
    CommandRunner,
    first_line,
)
from rtcheck.services.reporter import Reporter

__all__ = ["CheckOutcome", "RuntimeCheck"]

logger = logging.getLogger(__name__)


class CheckOutcome(Enum):
    """Terminal state of one check."""

    DISABLED = auto()
    OK = auto()
    WARNED = auto()
    ERRORED = auto()

    def __str__(self) -> str:
        return self.name.lower()


class RuntimeCheck(ABC):
    """Base class for a runtime + companion package check.

    Class attributes:
        name: Config key (``[checks.<name>]``)
        title: Section label
        runtime: Display name of the runtime ("Node.js")
        ecosystem: Package ecosystem name, used in messages ("npm")
        default_package: Companion package name unless configured
        minimum_version: Oldest supported runtime version
    """

    name: ClassVar[str]
    title: ClassVar[str]
    runtime: ClassVar[str]
    ecosystem: ClassVar[str]
    default_package: ClassVar[str]
    minimum_version: ClassVar[Version]

    # Some runtimes print their version on stderr
    version_options: ClassVar[CommandOptions] = CommandOptions(capture_stderr_into_output=True)

    # -- hooks -----------------------------------------------------------------

    def package(self, ctx: CheckContext) -> str:
        return ctx.settings_for(self.name).package or self.default_package

    def override_available(self, ctx: CheckContext) -> bool:
        """Whether a disabled check should run anyway (``host_prog`` is set)."""
        return ctx.settings_for(self.name).host_prog is not None

    @abstractmethod
    def required_executables(self, ctx: CheckContext) -> Sequence[tuple[str, ...]]:
        """Groups of executables; each group needs at least one on PATH."""

    def runtime_install_hints(self, ctx: CheckContext) -> list[str]:
        hint = ctx.install_hint(self.name)
        hints = [f"Install {self.runtime} and make sure it is on $PATH."]
        if hint and hint.startswith(("http://", "https://")):
            hints.append(f"See {hint}")
        elif hint:
            hints.append(f"Run in shell: {hint}")
        return hints

    @abstractmethod
    def version_command(self, ctx: CheckContext) -> Command: ...

    def parse_runtime_version(self, output: str) -> Result[Version, ParseFailure]:
        return parse_version(output)

    async def probe_capabilities(
        self,
        ctx: CheckContext,
        runner: CommandRunner,
        reporter: Reporter,
        version: Version,
    ) -> None:
        """Optional extra probes. May emit info/warn, never ends the check."""

    @abstractmethod
    async def detect_companion(self, ctx: CheckContext, runner: CommandRunner) -> str | None:
        """Locate the companion host. Returns a path or label, None if absent."""

    @abstractmethod
    def companion_install_hints(self, ctx: CheckContext) -> list[str]: ...

    def upgrade_hints(self, ctx: CheckContext) -> list[str]:
        return self.companion_install_hints(ctx)

    @abstractmethod
    def latest_companion_command(self, ctx: CheckContext) -> Command: ...

    def parse_latest(self, output: str, package: str) -> Result[Version, ParseFailure]:
        return parse_version(output)

    @abstractmethod
    def installed_companion_command(self, ctx: CheckContext, host: str) -> Command: ...

    def parse_installed(self, output: str) -> Result[Version, ParseFailure]:
        return parse_version(output)

    # -- protocol --------------------------------------------------------------

    async def run(
        self, ctx: CheckContext, reporter: Reporter, runner: CommandRunner
    ) -> CheckOutcome:
        """Run the whole protocol and return the terminal state."""
        reporter.start_section(self.title)

        if ctx.disabled(self.name):
            flag = f"{self.name}.enabled=false"
            if not self.override_available(ctx):
                reporter.info(f"Disabled ({flag}).")
                return CheckOutcome.DISABLED
            reporter.info(
                f"Disabled ({flag}), but host_prog is set so checking anyway. "
                "The flag might be left over from a previous error."
            )

        missing = [
            group
            for group in self.required_executables(ctx)
            if not any(ctx.which(exe) for exe in group)
        ]
        if missing:
            names = ", ".join(" or ".join(f"`{exe}`" for exe in group) for group in missing)
            reporter.warn(f"{names} must be in $PATH.", self.runtime_install_hints(ctx))
            return CheckOutcome.WARNED

        version_cmd = self.version_command(ctx)
        result = await self.probe(ctx, runner, version_cmd, options=self.version_options)
        if self._report_failure(ctx, reporter, result, CONNECTIVITY_HINTS):
            return CheckOutcome.ERRORED
        parsed = self.parse_runtime_version(result.output)
        if isinstance(parsed, Err):
            reporter.error(f"Unexpected output from `{shellify(version_cmd)}`: {parsed.error}")
            return CheckOutcome.ERRORED
        version = parsed.value
        reporter.info(f"{self.runtime}: {first_line(result.output)}")

        if version < self.minimum_version:
            reporter.warn(
                f"{self.runtime} {version} is not supported (need >= {self.minimum_version}).",
                self.runtime_install_hints(ctx),
            )
            # Companion checks are meaningless on an unsupported runtime
            return CheckOutcome.WARNED

        await self.probe_capabilities(ctx, runner, reporter, version)

        package = self.package(ctx)
        host = await self.detect_companion(ctx, runner)
        if host is None:
            reporter.warn(
                f'Missing "{package}" {self.ecosystem} package.',
                [
                    *self.companion_install_hints(ctx),
                    f"You may disable this check (and warning) with `enabled = false` "
                    f"under [checks.{self.name}] in rtcheck.toml.",
                ],
            )
            return CheckOutcome.WARNED
        reporter.info(f"{self.runtime} host: {host}")

        latest_cmd = self.latest_companion_command(ctx)
        result = await self.probe(ctx, runner, latest_cmd)
        if self._report_failure(ctx, reporter, result, CONNECTIVITY_HINTS):
            return CheckOutcome.ERRORED
        latest = self.parse_latest(result.output, package)
        if isinstance(latest, Err):
            # Empty and malformed registry output are the same failure
            reporter.error(
                f'Failed to read the latest "{package}" version from '
                f"`{shellify(latest_cmd)}`: {latest.error}",
                CONNECTIVITY_HINTS,
            )
            return CheckOutcome.ERRORED

        installed_cmd = self.installed_companion_command(ctx, host)
        report_hints = (f"Report this issue with the output of: {shellify(installed_cmd)}",)
        result = await self.probe(ctx, runner, installed_cmd)
        if self._report_failure(ctx, reporter, result, report_hints):
            return CheckOutcome.ERRORED
        installed = self.parse_installed(result.output)
        if isinstance(installed, Err):
            reporter.error(
                f'Failed to read the installed "{package}" version from '
                f"`{shellify(installed_cmd)}`: {installed.error}",
                report_hints,
            )
            return CheckOutcome.ERRORED

        if installed.value < latest.value:
            reporter.warn(
                f'Package "{package}" is out-of-date. '
                f"Installed: {installed.value}, latest: {latest.value}",
                self.upgrade_hints(ctx),
            )
            return CheckOutcome.WARNED

        reporter.ok(
            f'Latest "{package}" {self.ecosystem} package is installed: {installed.value}'
        )
        return CheckOutcome.OK

    async def probe(
        self,
        ctx: CheckContext,
        runner: CommandRunner,
        cmd: Command,
        *,
        input: str = "",
        options: CommandOptions = CommandOptions(),
    ) -> CommandResult:
        """Run a command with the context's cwd, env and timeout."""
        logger.debug("%s: running %s", self.name, shellify(cmd))
        return await runner.run(
            cmd,
            input=input,
            options=options,
            timeout_ms=ctx.timeout_ms,
            cwd=ctx.cwd,
            env=ctx.env,
        )

    @staticmethod
    def _report_failure(
        ctx: CheckContext,
        reporter: Reporter,
        result: CommandResult,
        hints: Sequence[str],
    ) -> bool:
        message = describe_failure(result, ctx.cwd)
        if message is None:
            return False
        reporter.error(message, hints)
        return True
