from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from rtcheck.core.config import Config, find_config, load_config_or_default
from rtcheck.core.errors import ErrorCode
from rtcheck.core.result import Err
from rtcheck.output.console import ConsoleProtocol, RichConsole
from rtcheck.platform.detection import PlatformInfo, detect
from rtcheck.services.checkers import CheckContext, load_hints


@dataclass(frozen=True, slots=True)
class CLIContext:
    platform: PlatformInfo
    config: Config
    config_path: Path | None
    console: ConsoleProtocol

    def check_context(self) -> CheckContext:
        return CheckContext(platform=self.platform, config=self.config, hints=load_hints())


def build_context(config_path: Path | None = None) -> CLIContext:
    path = find_config(config_path)
    config_result = load_config_or_default(path)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))

    return CLIContext(
        platform=detect(),
        config=config_result.value,
        config_path=path,
        console=RichConsole(),
    )
