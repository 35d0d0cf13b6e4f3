# SPDX-License-Identifier: MIT
"""Tests for rtcheck.services.checkers.common."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from rtcheck.core.config import CheckSettings, Config
from rtcheck.platform.detection import LinuxDistro, Platform, PlatformInfo
from rtcheck.services.checkers.common import (
    CheckContext,
    Hints,
    first_line,
    load_hints,
    package_manager_command,
)
from rtcheck.test.services.checkers.fakes import make_context


class TestHints:
    def test_platform_key(self) -> None:
        hints = Hints(runtimes={"node": {"debian": "apt install nodejs", "default": "nodejs.org"}})
        assert hints.get_runtime_hint("node", "debian") == "apt install nodejs"

    def test_default_fallback(self) -> None:
        hints = Hints(runtimes={"node": {"default": "nodejs.org"}})
        assert hints.get_runtime_hint("node", "arch") == "nodejs.org"

    def test_unknown_runtime(self) -> None:
        assert Hints.empty().get_runtime_hint("node", "debian") is None


class TestLoadHints:
    def test_packaged_hints(self) -> None:
        hints = load_hints()
        for runtime in ("node", "python", "ruby", "perl"):
            assert hints.get_runtime_hint(runtime, "debian")
            assert hints.get_runtime_hint(runtime, "unknown-platform")

    def test_missing_file(self, tmp_path: Path) -> None:
        assert load_hints(tmp_path / "nope.toml") == Hints.empty()

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "hints.toml"
        path.write_text("[runtimes.node\n")
        assert load_hints(path) == Hints.empty()

    def test_non_table_entries_skipped(self, tmp_path: Path) -> None:
        path = tmp_path / "hints.toml"
        path.write_text('[runtimes]\nnode = "oops"\n[runtimes.ruby]\ndefault = "rbenv"\n')
        hints = load_hints(path)
        assert hints.runtimes == {"ruby": {"default": "rbenv"}}


class TestCheckContext:
    def test_install_hint_uses_platform(self, tmp_path: Path) -> None:
        ctx = CheckContext(
            cwd=tmp_path,
            env={},
            platform=PlatformInfo(Platform.MACOS),
            hints=Hints(runtimes={"node": {"macos": "brew install node", "default": "x"}}),
        )
        assert ctx.install_hint("node") == "brew install node"

    def test_settings_and_disabled(self, tmp_path: Path) -> None:
        ctx = make_context(tmp_path, checks={"ruby": CheckSettings(enabled=False)})
        assert ctx.disabled("ruby")
        assert not ctx.disabled("node")
        assert ctx.settings_for("node") == CheckSettings()

    def test_timeout_from_config(self, tmp_path: Path) -> None:
        ctx = CheckContext(cwd=tmp_path, config=Config(timeout_ms=1234))
        assert ctx.timeout_ms == 1234

    def test_which_uses_context_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        seen: list[str | None] = []

        def fake_which(name: str, mode: int = 0, path: str | None = None) -> str | None:
            seen.append(path)
            return None

        monkeypatch.setattr("shutil.which", fake_which)
        ctx = make_context(tmp_path, env={"PATH": "/custom/bin"})

        assert ctx.which("node") is None
        assert seen == ["/custom/bin"]

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX executable bits")
    def test_which_finds_real_executable(self, tmp_path: Path) -> None:
        exe = tmp_path / "tool"
        exe.write_text("#!/bin/sh\n")
        exe.chmod(0o755)
        ctx = make_context(tmp_path, env={"PATH": str(tmp_path)})

        assert ctx.which("tool") == str(exe)


class TestHelpers:
    def test_first_line(self) -> None:
        assert first_line("\n\n  v16.14.0  \nmore\n") == "v16.14.0"
        assert first_line("") == ""

    def test_package_manager_command_posix(self, tmp_path: Path) -> None:
        ctx = make_context(tmp_path)
        assert package_manager_command(ctx, "gem", "list").argv == ("gem", "list")

    def test_package_manager_command_windows(self, tmp_path: Path) -> None:
        ctx = CheckContext(
            cwd=tmp_path,
            env={},
            platform=PlatformInfo(Platform.WINDOWS, LinuxDistro.UNKNOWN),
        )
        assert package_manager_command(ctx, "npm", "root", "-g").argv == (
            "cmd",
            "/c",
            "npm",
            "root",
            "-g",
        )
