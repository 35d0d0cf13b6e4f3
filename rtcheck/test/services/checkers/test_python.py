# SPDX-License-Identifier: MIT
"""Tests for the Python check."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from rtcheck.core.config import CheckSettings
from rtcheck.core.versions import Version
from rtcheck.services.checkers.protocol import CheckOutcome
from rtcheck.services.checkers.python import PythonCheck
from rtcheck.services.reporter import EventKind, Reporter
from rtcheck.test.services.checkers.fakes import MockCommandRunner, make_context, ok, on_path

DETECT = ("python3", "-c", "import pynvim; print(pynvim.__file__)")
LATEST = (
    "python3",
    "-m",
    "pip",
    "index",
    "versions",
    "--disable-pip-version-check",
    "pynvim",
)
INSTALLED = (
    "python3",
    "-c",
    "from importlib.metadata import version; print(version('pynvim'))",
)


def healthy(installed: str = "0.5.0") -> MockCommandRunner:
    return MockCommandRunner(
        {
            ("python3", "--version"): ok("Python 3.11.4\n"),
            DETECT: ok("/usr/lib/python3/dist-packages/pynvim/__init__.py\n"),
            LATEST: ok("pynvim (0.5.0)\nAvailable versions: 0.5.0, 0.4.3\n"),
            INSTALLED: ok(f"{installed}\n"),
        }
    )


def run_python(ctx: object, runner: MockCommandRunner) -> tuple[CheckOutcome, Reporter]:
    reporter = Reporter()
    return asyncio.run(PythonCheck().run(ctx, reporter, runner)), reporter  # type: ignore[arg-type]


class TestPythonCheck:
    def test_up_to_date(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        on_path(monkeypatch, ["python3"])

        outcome, reporter = run_python(make_context(tmp_path), healthy())

        assert outcome == CheckOutcome.OK
        assert reporter.events[1].message == "Python: Python 3.11.4"

    def test_outdated(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        on_path(monkeypatch, ["python3"])

        outcome, reporter = run_python(make_context(tmp_path), healthy("0.4.3"))

        assert outcome == CheckOutcome.WARNED
        assert reporter.events[-1].hints == (
            "Run in shell: python3 -m pip install --upgrade pynvim",
        )

    def test_falls_back_to_python(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        on_path(monkeypatch, ["python"])
        runner = MockCommandRunner({("python", "--version"): ok("Python 3.9.1")})

        run_python(make_context(tmp_path), runner)

        assert runner.called("python", "--version")

    def test_python2_is_unsupported(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        on_path(monkeypatch, ["python3"])
        # Python 2 prints its version on stderr, merged into output
        runner = MockCommandRunner({("python3", "--version"): ok("Python 2.7.18")})

        outcome, reporter = run_python(make_context(tmp_path), runner)

        assert outcome == CheckOutcome.WARNED
        assert PythonCheck.minimum_version == Version(3, 7, 0)
        assert "not supported" in reporter.events[-1].message

    def test_host_prog_is_interpreter(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        on_path(monkeypatch, ["/opt/venv/bin/python"])
        ctx = make_context(tmp_path, checks={"python": CheckSettings(host_prog="/opt/venv/bin/python")})
        runner = MockCommandRunner({("/opt/venv/bin/python", "--version"): ok("Python 3.12.0")})

        run_python(ctx, runner)

        assert runner.called("/opt/venv/bin/python", "--version")

    def test_missing_pynvim(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        on_path(monkeypatch, ["python3"])
        runner = MockCommandRunner({("python3", "--version"): ok("Python 3.11.4")})

        outcome, reporter = run_python(make_context(tmp_path), runner)

        assert outcome == CheckOutcome.WARNED
        assert reporter.events[-1].hints[0] == "Run in shell: python3 -m pip install pynvim"


class TestVirtualenv:
    def test_interpreter_inside_venv(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        venv = tmp_path / "venv"
        interpreter = venv / "bin" / "python3"
        interpreter.parent.mkdir(parents=True)
        interpreter.write_text("")
        monkeypatch.setattr(
            "shutil.which", lambda name, mode=0, path=None: str(interpreter) if name == "python3" else None
        )
        ctx = make_context(tmp_path, env={"PATH": str(interpreter.parent), "VIRTUAL_ENV": str(venv)})

        _, reporter = run_python(ctx, healthy())

        assert any(e.message == f"Using virtualenv: {venv}" for e in reporter.events)
        assert reporter.count(EventKind.WARN) == 0

    def test_interpreter_outside_venv(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        on_path(monkeypatch, ["python3"])
        ctx = make_context(tmp_path, env={"PATH": "/usr/bin", "VIRTUAL_ENV": str(tmp_path / "venv")})

        outcome, reporter = run_python(ctx, healthy())

        warnings = [e for e in reporter.events if e.is_warning]
        assert len(warnings) == 1
        assert "$VIRTUAL_ENV" in warnings[0].message
        # Advisory only, the check still completes
        assert outcome == CheckOutcome.OK
