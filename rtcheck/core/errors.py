"""Exit codes for the rtcheck CLI.

The numeric values are process exit codes and should remain stable:
- 0: Success
- 1: User error (bad arguments)
- 2: Environment error (a check reported an error, with --strict)
- 3: Configuration error (config file unreadable or invalid)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands."""

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    CONFIG_ERROR = 3
