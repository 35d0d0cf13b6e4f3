from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from rtcheck import __version__
from rtcheck.cli.app import app
from rtcheck.core.config import CONFIG_ENV_VAR
from rtcheck.core.errors import ErrorCode

runner = CliRunner()


@pytest.fixture(autouse=True)
def no_config_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    # --config exports its path through the environment; restore it afterwards
    monkeypatch.setenv(CONFIG_ENV_VAR, "")
    monkeypatch.chdir(tmp_path)


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_missing_config_file_is_user_error(tmp_path: Path) -> None:
    result = runner.invoke(app, ["--config", str(tmp_path / "missing.toml"), "checks"])
    assert result.exit_code == int(ErrorCode.USER_ERROR)


def test_invalid_config_is_config_error(tmp_path: Path) -> None:
    path = tmp_path / "bad.toml"
    path.write_text("[runner\n")

    result = runner.invoke(app, ["--config", str(path), "checks"])

    assert result.exit_code == int(ErrorCode.CONFIG_ERROR)


def test_mistyped_disabling_flag_is_config_error(tmp_path: Path) -> None:
    path = tmp_path / "rtcheck.toml"
    path.write_text('[checks.node]\nenabled = "false"\n')

    result = runner.invoke(app, ["--config", str(path), "checks"])

    assert result.exit_code == int(ErrorCode.CONFIG_ERROR)


def test_checks_command(tmp_path: Path) -> None:
    path = tmp_path / "rtcheck.toml"
    path.write_text("[checks.perl]\nenabled = false\n")

    result = runner.invoke(app, ["--config", str(path), "checks"])

    assert result.exit_code == 0
    assert "perl" in result.stdout
    assert "disabled" in result.stdout
