# SPDX-License-Identifier: MIT
"""Perl runtime and the Neovim::Ext CPAN module."""

from __future__ import annotations

from typing import ClassVar

from rtcheck.core.versions import Version
from rtcheck.platform.process import Command
from rtcheck.services.checkers.common import CheckContext, CommandRunner, first_line
from rtcheck.services.checkers.protocol import RuntimeCheck


class PerlCheck(RuntimeCheck):
    name: ClassVar[str] = "perl"
    title: ClassVar[str] = "Perl provider (optional)"
    runtime: ClassVar[str] = "Perl"
    ecosystem: ClassVar[str] = "cpan"
    default_package: ClassVar[str] = "Neovim::Ext"
    minimum_version: ClassVar[Version] = Version(5, 22, 0)

    def perl(self, ctx: CheckContext) -> str:
        return ctx.settings_for(self.name).host_prog or "perl"

    def required_executables(self, ctx: CheckContext) -> list[tuple[str, ...]]:
        return [(self.perl(ctx),), ("cpanm",)]

    def version_command(self, ctx: CheckContext) -> Command:
        return Command.of(self.perl(ctx), "-e", "print $^V")

    async def detect_companion(self, ctx: CheckContext, runner: CommandRunner) -> str | None:
        module = self.package(ctx)
        inc_key = module.replace("::", "/") + ".pm"
        cmd = Command.of(self.perl(ctx), f"-M{module}", "-e", f'print $INC{{"{inc_key}"}}')
        result = await self.probe(ctx, runner, cmd)
        if not result.ok:
            return None
        return first_line(result.output) or None

    def companion_install_hints(self, ctx: CheckContext) -> list[str]:
        return [f"Run in shell: cpanm -n {self.package(ctx)}"]

    def latest_companion_command(self, ctx: CheckContext) -> Command:
        # Prints the distribution path, e.g. "JACQUESG/Neovim-Ext-0.06.tar.gz"
        return Command.of("cpanm", "--info", "-q", self.package(ctx))

    def installed_companion_command(self, ctx: CheckContext, host: str) -> Command:
        module = self.package(ctx)
        return Command.of(self.perl(ctx), "-W", "-e", f"use {module}; print ${module}::VERSION")
