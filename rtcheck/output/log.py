"""Logging setup for the CLI.

Library modules only call ``logging.getLogger(__name__)``; the CLI decides
where records go. Records are rendered by Rich on stderr so they never mix
with the report on stdout.
"""

from __future__ import annotations

import logging

__all__ = ["configure_logging"]

LOGGER_NAME = "rtcheck"


def configure_logging(*, verbose: bool = False) -> None:
    """Attach a Rich handler to the ``rtcheck`` logger.

    Args:
        verbose: Log DEBUG records (every command, exit code and event).
    """
    from rich.console import Console
    from rich.logging import RichHandler

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=verbose,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False
