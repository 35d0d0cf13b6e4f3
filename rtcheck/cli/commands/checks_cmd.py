from __future__ import annotations

from rtcheck.cli.context import build_context
from rtcheck.output.console import Style
from rtcheck.services.checkers import default_checks


def checks() -> None:
    """List the available checks and whether config disables them."""
    ctx = build_context()
    check_ctx = ctx.check_context()
    for check in default_checks():
        if not check_ctx.disabled(check.name):
            state, style = "enabled", Style.DEFAULT
        elif check.override_available(check_ctx):
            # `check` still runs it because host_prog is set
            state, style = "disabled (overridden)", Style.WARNING
        else:
            state, style = "disabled", Style.DIM
        ctx.console.print(f"{check.name:<8} {state:<9} {check.title}", style)
