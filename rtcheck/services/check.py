from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from rtcheck.services.checkers import (
    CheckContext,
    CheckOutcome,
    CommandRunner,
    DefaultCommandRunner,
    RuntimeCheck,
    default_checks,
)
from rtcheck.services.reporter import DiagnosticEvent, Reporter

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CheckReport:
    outcomes: dict[str, CheckOutcome]
    events: tuple[DiagnosticEvent, ...] = field(default=())

    def has_errors(self) -> bool:
        return any(e.is_error for e in self.events)

    def has_warnings(self) -> bool:
        return any(e.is_warning for e in self.events)


class CheckService:
    """Runs checks one after another and collects their findings.

    A check that crashes is reported as an error in its own section; the
    remaining checks still run.
    """

    def __init__(
        self,
        *,
        context: CheckContext,
        reporter: Reporter | None = None,
        checks: Sequence[RuntimeCheck] | None = None,
        runner: CommandRunner | None = None,
    ) -> None:
        self._context = context
        self._reporter = reporter if reporter is not None else Reporter()
        self._checks = list(checks) if checks is not None else default_checks()
        self._runner = runner if runner is not None else DefaultCommandRunner()

    async def run(self) -> CheckReport:
        outcomes: dict[str, CheckOutcome] = {}
        for check in self._checks:
            outcomes[check.name] = await self._run_one(check)
        return CheckReport(outcomes=outcomes, events=self._reporter.events)

    async def _run_one(self, check: RuntimeCheck) -> CheckOutcome:
        try:
            outcome = await check.run(self._context, self._reporter, self._runner)
        except Exception as e:
            logger.exception("check %r crashed", check.name)
            if self._reporter.current_section != check.title:
                self._reporter.start_section(check.title)
            self._reporter.error(
                f"Check failed unexpectedly: {e}",
                ["Run with --verbose and report the traceback."],
            )
            return CheckOutcome.ERRORED
        logger.debug("check %r finished: %s", check.name, outcome)
        return outcome
