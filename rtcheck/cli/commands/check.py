from __future__ import annotations

import asyncio

import typer

from rtcheck.cli.context import CLIContext, build_context
from rtcheck.core.errors import ErrorCode
from rtcheck.output.console import EventRenderer, Style
from rtcheck.services.check import CheckReport, CheckService
from rtcheck.services.checkers import CheckOutcome
from rtcheck.services.reporter import EventKind, Reporter


def check(
    strict: bool = typer.Option(
        False, "--strict", help="Exit with a non-zero code when any check reports an error."
    ),
) -> None:
    """Check optional language runtimes and their host packages."""
    ctx = build_context()

    if ctx.config_path is not None:
        ctx.console.print(f"config: {ctx.config_path}", Style.DIM)
    ctx.console.print(f"platform: {ctx.platform}", Style.DIM)

    reporter = Reporter(sinks=[EventRenderer(ctx.console)])
    service = CheckService(context=ctx.check_context(), reporter=reporter)
    report = asyncio.run(service.run())

    _print_summary(ctx, report)

    if strict and report.has_errors():
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))


def _print_summary(ctx: CLIContext, report: CheckReport) -> None:
    console = ctx.console
    console.newline()
    errors = sum(1 for e in report.events if e.kind == EventKind.ERROR)
    warnings = sum(1 for e in report.events if e.kind == EventKind.WARN)
    disabled = sum(1 for o in report.outcomes.values() if o == CheckOutcome.DISABLED)

    parts = [f"{len(report.outcomes)} checks", f"{errors} errors", f"{warnings} warnings"]
    if disabled:
        parts.append(f"{disabled} disabled")
    console.print(", ".join(parts), _summary_style(errors, warnings))


def _summary_style(errors: int, warnings: int) -> Style:
    if errors:
        return Style.ERROR
    if warnings:
        return Style.WARNING
    return Style.SUCCESS
