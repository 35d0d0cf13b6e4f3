# SPDX-License-Identifier: MIT
"""Runtime checks.

Each check follows the protocol in ``protocol.RuntimeCheck``:
- NodeCheck: node + the neovim npm package
- PythonCheck: python3 + pynvim
- RubyCheck: ruby + the neovim gem
- PerlCheck: perl + Neovim::Ext
"""

from rtcheck.services.checkers.common import (
    CheckContext,
    CommandRunner,
    DefaultCommandRunner,
    Hints,
    load_hints,
)
from rtcheck.services.checkers.node import NodeCheck
from rtcheck.services.checkers.perl import PerlCheck
from rtcheck.services.checkers.protocol import CheckOutcome, RuntimeCheck
from rtcheck.services.checkers.python import PythonCheck
from rtcheck.services.checkers.ruby import RubyCheck

__all__ = [
    # Protocol
    "CheckOutcome",
    "RuntimeCheck",
    # Context
    "CheckContext",
    "CommandRunner",
    "DefaultCommandRunner",
    "Hints",
    "load_hints",
    # Checks
    "NodeCheck",
    "PerlCheck",
    "PythonCheck",
    "RubyCheck",
    "default_checks",
]


def default_checks() -> list[RuntimeCheck]:
    """All checks, in reporting order."""
    return [NodeCheck(), PythonCheck(), RubyCheck(), PerlCheck()]
