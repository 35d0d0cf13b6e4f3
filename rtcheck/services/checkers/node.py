# SPDX-License-Identifier: MIT
"""Node.js runtime and its host package (installed globally via npm/yarn/pnpm)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import ClassVar

from rtcheck.core.result import Err, Ok, Result
from rtcheck.core.structured import as_str_dict, get_str, get_table
from rtcheck.core.versions import ParseFailure, Version, parse_version
from rtcheck.platform.process import Command
from rtcheck.services.checkers.common import (
    CheckContext,
    CommandRunner,
    first_line,
    package_manager_command,
)
from rtcheck.services.checkers.protocol import RuntimeCheck
from rtcheck.services.reporter import Reporter

# --inspect-brk landed in Node 7.6
INSPECT_BRK_VERSION = Version(7, 6, 0)

MANAGERS = ("npm", "yarn", "pnpm")


class NodeCheck(RuntimeCheck):
    name: ClassVar[str] = "node"
    title: ClassVar[str] = "Node.js provider (optional)"
    runtime: ClassVar[str] = "Node.js"
    ecosystem: ClassVar[str] = "npm"
    default_package: ClassVar[str] = "neovim"
    minimum_version: ClassVar[Version] = Version(6, 0, 0)

    def required_executables(self, ctx: CheckContext) -> list[tuple[str, ...]]:
        return [("node",), MANAGERS]

    def runtime_install_hints(self, ctx: CheckContext) -> list[str]:
        return [
            *super().runtime_install_hints(ctx),
            "Verify that `node` and `npm` (or `yarn`, `pnpm`) commands work.",
        ]

    def version_command(self, ctx: CheckContext) -> Command:
        return Command.of("node", "-v")

    async def probe_capabilities(
        self,
        ctx: CheckContext,
        runner: CommandRunner,
        reporter: Reporter,
        version: Version,
    ) -> None:
        if version < INSPECT_BRK_VERSION:
            reporter.warn(
                f"Node.js {version} does not support --inspect-brk, "
                "so the host cannot be started under the debugger."
            )

    def manager(self, ctx: CheckContext) -> str:
        """The package manager used for registry lookups (first found)."""
        for name in MANAGERS:
            if ctx.which(name):
                return name
        return "npm"

    async def detect_companion(self, ctx: CheckContext, runner: CommandRunner) -> str | None:
        host_prog = ctx.settings_for(self.name).host_prog
        if host_prog is not None:
            return host_prog if Path(host_prog).is_file() else None

        package = self.package(ctx)
        for manager in MANAGERS:
            if not ctx.which(manager):
                continue
            root = await self._global_root(ctx, runner, manager)
            if root is None:
                continue
            cli = root / package / "bin" / "cli.js"
            if cli.is_file():
                return str(cli)
        return None

    async def _global_root(
        self, ctx: CheckContext, runner: CommandRunner, manager: str
    ) -> Path | None:
        if manager == "yarn":
            cmd = package_manager_command(ctx, "yarn", "global", "dir")
        else:
            cmd = package_manager_command(ctx, manager, "root", "-g")
        result = await self.probe(ctx, runner, cmd)
        line = first_line(result.output) if result.ok else ""
        if not line:
            return None
        root = Path(line)
        # `yarn global dir` is the parent of the node_modules folder
        return root / "node_modules" if manager == "yarn" else root

    def companion_install_hints(self, ctx: CheckContext) -> list[str]:
        package = self.package(ctx)
        return [
            f"Run in shell: npm install -g {package}",
            f"Run in shell (if you use yarn): yarn global add {package}",
            f"Run in shell (if you use pnpm): pnpm install -g {package}",
        ]

    def latest_companion_command(self, ctx: CheckContext) -> Command:
        return package_manager_command(ctx, self.manager(ctx), "info", self.package(ctx), "--json")

    def parse_latest(self, output: str, package: str) -> Result[Version, ParseFailure]:
        try:
            payload: object = json.loads(output)
        except ValueError:
            return Err(ParseFailure(raw=output, reason="registry did not return JSON"))

        data = as_str_dict(payload)
        if data is None:
            return Err(ParseFailure(raw=output, reason="registry returned unexpected JSON"))
        # yarn wraps the package document as {"type": "inspect", "data": {...}}
        data = get_table(data, "data") or data

        latest = get_str(get_table(data, "dist-tags") or {}, "latest")
        if latest is None:
            return Err(ParseFailure(raw=output, reason="no dist-tags.latest in registry data"))
        parsed = parse_version(latest)
        if isinstance(parsed, Ok):
            return parsed
        return Err(ParseFailure(raw=latest, reason="invalid dist-tags.latest"))

    def installed_companion_command(self, ctx: CheckContext, host: str) -> Command:
        return Command.of("node", host, "--version")
