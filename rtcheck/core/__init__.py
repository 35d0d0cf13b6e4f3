"""Core domain types and logic."""

from .config import CheckSettings, Config, ConfigError, load_config
from .errors import ErrorCode
from .result import Err, Ok, Result
from .versions import ParseFailure, Version, parse_version

__all__ = [
    # config
    "CheckSettings",
    "Config",
    "ConfigError",
    "load_config",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
    # versions
    "ParseFailure",
    "Version",
    "parse_version",
]
