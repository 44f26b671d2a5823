from __future__ import annotations

import subprocess

import pytest

from shtools.platform.system_adapter import CommandResult, ISystemAdapter


class MockSystemAdapter(ISystemAdapter):
    """Records every call; never touches real processes or the X server."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.tools: dict[str, str] = {}
        self.has_display = True
        self.ps_output = ""
        self.command_results: dict[str, CommandResult] = {}
        self.clipboard: dict[str, bytes] = {}
        self.clipboard_returncode = 0
        self.kill_errors: dict[int, OSError] = {}
        self.killed: list[tuple[int, int]] = []

    def run_command(self, args: list[str], timeout: float = 1.0) -> CommandResult:
        self.calls.append(("run", tuple(args)))
        if args[0] == "ps":
            return CommandResult(stdout=self.ps_output, stderr="", returncode=0)
        return self.command_results.get(args[0], CommandResult(stdout="", stderr="", returncode=0))

    def which(self, name: str) -> str | None:
        return self.tools.get(name)

    def display_available(self) -> bool:
        return self.has_display

    def set_clipboard(self, data: bytes, selection: str = "clipboard") -> CommandResult:
        self.calls.append(("set_clipboard", selection))
        if self.clipboard_returncode == 0:
            self.clipboard[selection] = data
        return CommandResult(stdout="", stderr="", returncode=self.clipboard_returncode)

    def kill(self, pid: int, signum: int) -> None:
        self.calls.append(("kill", pid, signum))
        if pid in self.kill_errors:
            raise self.kill_errors[pid]
        self.killed.append((pid, signum))

    def popen(self, *popenargs, **kwargs) -> subprocess.Popen:
        self.calls.append(("popen", popenargs, kwargs))
        return subprocess.Popen(*popenargs, **kwargs)


@pytest.fixture
def mock_system() -> MockSystemAdapter:
    return MockSystemAdapter()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point HOME at a temporary directory so config and logs stay out of the real one."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home
