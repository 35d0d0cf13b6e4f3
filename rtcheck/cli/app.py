from __future__ import annotations

import os
from pathlib import Path

import typer

from rtcheck import __version__
from rtcheck.cli.commands.check import check
from rtcheck.cli.commands.checks_cmd import checks
from rtcheck.core.config import CONFIG_ENV_VAR
from rtcheck.core.errors import ErrorCode
from rtcheck.output.log import configure_logging


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Commands
app.command()(check)
app.command()(checks)


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    config: Path | None = typer.Option(
        None,
        "--config",
        help=f"Config file (default: ${CONFIG_ENV_VAR}, ./rtcheck.toml, user config dir)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every command run."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    configure_logging(verbose=verbose)

    if config is not None:
        path = config.expanduser()
        if not path.is_file():
            typer.echo(f"error: --config '{path}' is not a file", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))
        os.environ[CONFIG_ENV_VAR] = str(path.resolve())


def main() -> None:
    app()
