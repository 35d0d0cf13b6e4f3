# SPDX-License-Identifier: MIT
"""Ruby runtime and the neovim gem host."""

from __future__ import annotations

import re
from typing import ClassVar

from rtcheck.core.result import Err, Result
from rtcheck.core.versions import ParseFailure, Version, parse_version
from rtcheck.platform.process import Command
from rtcheck.services.checkers.common import CheckContext, CommandRunner, package_manager_command
from rtcheck.services.checkers.protocol import RuntimeCheck

HOST_EXECUTABLE = "neovim-ruby-host"


class RubyCheck(RuntimeCheck):
    name: ClassVar[str] = "ruby"
    title: ClassVar[str] = "Ruby provider (optional)"
    runtime: ClassVar[str] = "Ruby"
    ecosystem: ClassVar[str] = "gem"
    default_package: ClassVar[str] = "neovim"
    minimum_version: ClassVar[Version] = Version(2, 6, 0)

    def required_executables(self, ctx: CheckContext) -> list[tuple[str, ...]]:
        return [("ruby",), ("gem",)]

    def version_command(self, ctx: CheckContext) -> Command:
        return Command.of("ruby", "-v")

    async def detect_companion(self, ctx: CheckContext, runner: CommandRunner) -> str | None:
        host_prog = ctx.settings_for(self.name).host_prog
        if host_prog is not None:
            return ctx.which(host_prog)
        return ctx.which(HOST_EXECUTABLE)

    def companion_install_hints(self, ctx: CheckContext) -> list[str]:
        return [f"Run in shell: gem install {self.package(ctx)}"]

    def upgrade_hints(self, ctx: CheckContext) -> list[str]:
        return [f"Run in shell: gem update {self.package(ctx)}"]

    def latest_companion_command(self, ctx: CheckContext) -> Command:
        pattern = f"^{self.package(ctx)}$"
        if ctx.platform.is_windows:
            # cmd.exe strips a bare ^ (its escape character)
            pattern = "^" + pattern
        return package_manager_command(ctx, "gem", "list", "-ra", pattern)

    def parse_latest(self, output: str, package: str) -> Result[Version, ParseFailure]:
        # Remote listing line: "neovim (0.10.0, 0.9.1)"
        pattern = re.compile(rf"^{re.escape(package)}\s+\(([^)]*)\)", re.MULTILINE)
        match = pattern.search(output)
        if match is None:
            return Err(ParseFailure(raw=output, reason="gem not found in remote listing"))
        return parse_version(match.group(1))

    def installed_companion_command(self, ctx: CheckContext, host: str) -> Command:
        return Command.of(host, "--version")
