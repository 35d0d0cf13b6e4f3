"""Typed configuration loading and access.

rtcheck reads an optional TOML file:

    [runner]
    timeout_ms = 30000

    [checks.node]
    enabled = false          # disabling signal for the node check
    host_prog = "/opt/host"  # explicit companion host (also overrides `enabled`)
    package = "neovim"       # companion package name

Lookup order: explicit path, ``$RTCHECK_CONFIG``, ``./rtcheck.toml``,
then ``<user config dir>/config.toml``. A missing file means defaults.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_int, get_str, get_table

__all__ = [
    "CheckSettings",
    "Config",
    "ConfigError",
    "DEFAULT_TIMEOUT_MS",
    "find_config",
    "load_config",
    "load_config_or_default",
    "user_config_dir",
]

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 30_000

CONFIG_ENV_VAR = "RTCHECK_CONFIG"
LOCAL_CONFIG_NAME = "rtcheck.toml"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class CheckSettings:
    """Per-check settings.

    Attributes:
        enabled: None when unset; False is the disabling signal.
        host_prog: Explicit path of the companion host program.
        package: Companion package name override.
    """

    enabled: bool | None = None
    host_prog: str | None = None
    package: str | None = None

    @property
    def disabled(self) -> bool:
        return self.enabled is False


def _empty_checks() -> dict[str, CheckSettings]:
    return {}


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    timeout_ms: int = DEFAULT_TIMEOUT_MS
    checks: dict[str, CheckSettings] = field(default_factory=_empty_checks)

    def settings_for(self, name: str) -> CheckSettings:
        return self.checks.get(name) or CheckSettings()

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML).

        Raises:
            ValueError: If a key is present with the wrong type or range.
        """
        runner = _section(data, "runner")
        timeout_ms = _checked(get_int, runner, "runner.timeout_ms", "an integer")
        if timeout_ms is not None and timeout_ms <= 0:
            raise ValueError(f"runner.timeout_ms must be positive, got {timeout_ms}")

        checks: dict[str, CheckSettings] = {}
        for name, raw in _section(data, "checks").items():
            table = as_str_dict(raw)
            if table is None:
                raise ValueError(f"checks.{name} must be a table")
            checks[name] = CheckSettings(
                enabled=_checked(get_bool, table, f"checks.{name}.enabled", "true or false"),
                host_prog=_checked(get_str, table, f"checks.{name}.host_prog", _NON_EMPTY),
                package=_checked(get_str, table, f"checks.{name}.package", _NON_EMPTY),
            )

        return cls(timeout_ms=timeout_ms or DEFAULT_TIMEOUT_MS, checks=checks)


_NON_EMPTY = "a non-empty string"


def _section(data: Mapping[str, object], key: str) -> StrDict:
    if key not in data:
        return {}
    table = get_table(data, key)
    if table is None:
        raise ValueError(f"{key} must be a table")
    return table


def _checked[V](
    getter: Callable[[Mapping[str, object], str], V | None],
    table: Mapping[str, object],
    dotted: str,
    expected: str,
) -> V | None:
    """Read ``dotted``'s last key with ``getter``; present but rejected values raise."""
    key = dotted.rpartition(".")[2]
    value = getter(table, key)
    if value is None and key in table:
        raise ValueError(f"{dotted} must be {expected}, got {table[key]!r}")
    return value


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to the TOML file

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        config = Config.from_dict(result.value)
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))
    logger.debug("loaded config from %s", path)
    return Ok(config)


def user_config_dir() -> Path:
    """``$XDG_CONFIG_HOME/rtcheck`` (``~/.config/rtcheck``), ``%APPDATA%\\rtcheck`` on Windows."""
    if sys.platform == "win32":
        base = os.environ.get("APPDATA")
        return Path(base) / "rtcheck" if base else Path.home() / "AppData" / "Roaming" / "rtcheck"
    base = os.environ.get("XDG_CONFIG_HOME")
    return Path(base) / "rtcheck" if base else Path.home() / ".config" / "rtcheck"


def find_config(explicit: Path | None = None, *, cwd: Path | None = None) -> Path | None:
    """Return the config file to use, or None when there is none.

    An explicit path (argument or environment variable) is returned even
    if it does not exist, so that loading it reports the problem.
    """
    if explicit is not None:
        return explicit

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()

    local = (cwd or Path.cwd()) / LOCAL_CONFIG_NAME
    if local.is_file():
        return local

    user = user_config_dir() / "config.toml"
    if user.is_file():
        return user
    return None


def load_config_or_default(path: Path | None) -> Result[Config, ConfigError]:
    """Load config from ``path``, or defaults when there is no file."""
    if path is None:
        return Ok(Config())
    return load_config(path)
