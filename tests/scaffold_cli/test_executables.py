"""Tests for executable detection."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

from scaffold_cli.core import executables
from scaffold_cli.core.executables import executable_exists, find_first_available_executable

MISSING = "scaffold-definitely-missing-binary-7f3a"
EXISTING = "cmd" if sys.platform == "win32" else "sh"


class TestExecutableExists:
    def test_core_shell_utility_is_found(self):
        assert executable_exists(EXISTING) is True

    def test_missing_executable_is_not_found(self):
        assert executable_exists(MISSING) is False

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX shell lookup")
    def test_name_is_not_interpreted_by_the_shell(self, tmp_path: Path):
        marker = tmp_path / "marker"
        assert executable_exists(f"{MISSING}; touch {marker}") is False
        assert not marker.exists()

    def test_os_error_means_not_found(self, monkeypatch: pytest.MonkeyPatch):
        def broken_run(*args, **kwargs):
            raise OSError("no shell available")

        monkeypatch.setattr(executables.subprocess, "run", broken_run)
        assert executable_exists("git") is False

    def test_timeout_means_not_found(self, monkeypatch: pytest.MonkeyPatch):
        def slow_run(cmd, **kwargs):
            raise subprocess.TimeoutExpired(cmd=cmd, timeout=kwargs.get("timeout", 5))

        monkeypatch.setattr(executables.subprocess, "run", slow_run)
        assert executable_exists("git") is False

    def test_windows_uses_where(self, monkeypatch: pytest.MonkeyPatch):
        calls = []

        def fake_run(cmd, shell, capture_output, timeout):
            calls.append((cmd, shell))
            return subprocess.CompletedProcess(cmd, 0)

        monkeypatch.setattr(executables, "_is_windows", lambda: True)
        monkeypatch.setattr(executables.subprocess, "run", fake_run)

        assert executable_exists("git") is True
        assert calls == [(["where", "git"], False)]

    def test_posix_uses_command_v(self, monkeypatch: pytest.MonkeyPatch):
        calls = []

        def fake_run(cmd, shell, capture_output, timeout):
            calls.append((cmd, shell))
            return subprocess.CompletedProcess(cmd, 1)

        monkeypatch.setattr(executables, "_is_windows", lambda: False)
        monkeypatch.setattr(executables.subprocess, "run", fake_run)

        assert executable_exists("git") is False
        assert calls == [("command -v git", True)]


class TestFindFirstAvailableExecutable:
    def test_returns_first_existing_name(self):
        assert find_first_available_executable([MISSING, EXISTING]) == EXISTING

    def test_returns_none_when_nothing_matches(self):
        assert find_first_available_executable([MISSING]) is None
        assert find_first_available_executable([]) is None

    def test_stops_at_first_match(self, monkeypatch: pytest.MonkeyPatch):
        probed: list[str] = []

        def fake_exists(name: str) -> bool:
            probed.append(name)
            return name == "pnpm"

        monkeypatch.setattr(executables, "executable_exists", fake_exists)

        assert find_first_available_executable(["yarn", "pnpm", "npm"]) == "pnpm"
        assert probed == ["yarn", "pnpm"]
