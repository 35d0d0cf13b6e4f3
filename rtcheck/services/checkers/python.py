# SPDX-License-Identifier: MIT
"""Python runtime and the pynvim host package."""

from __future__ import annotations

from pathlib import Path
from typing import ClassVar

from rtcheck.core.versions import Version
from rtcheck.platform.process import Command
from rtcheck.services.checkers.common import CheckContext, CommandRunner, first_line
from rtcheck.services.checkers.protocol import RuntimeCheck
from rtcheck.services.reporter import Reporter

INTERPRETERS = ("python3", "python")


class PythonCheck(RuntimeCheck):
    name: ClassVar[str] = "python"
    title: ClassVar[str] = "Python 3 provider (optional)"
    runtime: ClassVar[str] = "Python"
    ecosystem: ClassVar[str] = "pip"
    default_package: ClassVar[str] = "pynvim"
    minimum_version: ClassVar[Version] = Version(3, 7, 0)

    def interpreter(self, ctx: CheckContext) -> str:
        """Configured host_prog, else the first interpreter on PATH."""
        host_prog = ctx.settings_for(self.name).host_prog
        if host_prog is not None:
            return host_prog
        for name in INTERPRETERS:
            if ctx.which(name):
                return name
        return INTERPRETERS[0]

    def required_executables(self, ctx: CheckContext) -> list[tuple[str, ...]]:
        host_prog = ctx.settings_for(self.name).host_prog
        if host_prog is not None:
            return [(host_prog,)]
        return [INTERPRETERS]

    def version_command(self, ctx: CheckContext) -> Command:
        return Command.of(self.interpreter(ctx), "--version")

    async def probe_capabilities(
        self,
        ctx: CheckContext,
        runner: CommandRunner,
        reporter: Reporter,
        version: Version,
    ) -> None:
        venv = ctx.env.get("VIRTUAL_ENV")
        if not venv:
            return
        resolved = ctx.which(self.interpreter(ctx))
        if resolved is None:
            return
        venv_path = Path(venv).resolve()
        interpreter_path = Path(resolved).resolve()
        if venv_path in interpreter_path.parents:
            reporter.info(f"Using virtualenv: {venv}")
            return
        reporter.warn(
            f"$VIRTUAL_ENV is set to {venv} but `{self.interpreter(ctx)}` "
            f"resolves to {resolved}, outside of it.",
            [
                "Activate the virtualenv in the shell that runs rtcheck, "
                f"or set host_prog under [checks.{self.name}].",
            ],
        )

    def _module(self, ctx: CheckContext) -> str:
        return self.package(ctx).replace("-", "_")

    async def detect_companion(self, ctx: CheckContext, runner: CommandRunner) -> str | None:
        module = self._module(ctx)
        cmd = Command.of(
            self.interpreter(ctx), "-c", f"import {module}; print({module}.__file__)"
        )
        result = await self.probe(ctx, runner, cmd)
        if not result.ok:
            return None
        return first_line(result.output) or None

    def companion_install_hints(self, ctx: CheckContext) -> list[str]:
        return [f"Run in shell: {self.interpreter(ctx)} -m pip install {self.package(ctx)}"]

    def upgrade_hints(self, ctx: CheckContext) -> list[str]:
        return [
            f"Run in shell: {self.interpreter(ctx)} -m pip install --upgrade {self.package(ctx)}"
        ]

    def latest_companion_command(self, ctx: CheckContext) -> Command:
        # Prints "pynvim (0.5.0)" followed by the list of available versions
        return Command.of(
            self.interpreter(ctx),
            "-m",
            "pip",
            "index",
            "versions",
            "--disable-pip-version-check",
            self.package(ctx),
        )

    def installed_companion_command(self, ctx: CheckContext, host: str) -> Command:
        source = (
            "from importlib.metadata import version; "
            f"print(version({self.package(ctx)!r}))"
        )
        return Command.of(self.interpreter(ctx), "-c", source)
