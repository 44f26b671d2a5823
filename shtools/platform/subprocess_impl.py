"""SubprocessSystemAdapter — real implementation of ISystemAdapter."""

from __future__ import annotations

import os
import shutil
import subprocess

from shtools.platform.clipboard import x11_display_available, xclip_input_args
from shtools.platform.system_adapter import CommandResult, ISystemAdapter


class SubprocessSystemAdapter(ISystemAdapter):
    """Executes real subprocess calls."""

    def run_command(self, args: list[str], timeout: float = 1.0) -> CommandResult:
        try:
            r = subprocess.run(args, capture_output=True, text=True, timeout=timeout)
            return CommandResult(stdout=r.stdout, stderr=r.stderr, returncode=r.returncode)
        except subprocess.TimeoutExpired:
            return CommandResult(stdout="", stderr="timeout", returncode=-1)
        except OSError as e:
            return CommandResult(stdout="", stderr=str(e), returncode=-1)

    def which(self, name: str) -> str | None:
        return shutil.which(name)

    def display_available(self) -> bool:
        return x11_display_available()

    def set_clipboard(self, data: bytes, selection: str = "clipboard") -> CommandResult:
        # xclip keeps serving the selection from a forked child, which
        # inherits any pipe we hand it; never capture its output.
        try:
            r = subprocess.run(
                xclip_input_args(selection),
                input=data,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=2.0,
            )
            return CommandResult(stdout="", stderr="", returncode=r.returncode)
        except subprocess.TimeoutExpired:
            return CommandResult(stdout="", stderr="timeout", returncode=-1)
        except OSError as e:
            return CommandResult(stdout="", stderr=str(e), returncode=-1)

    def kill(self, pid: int, signum: int) -> None:
        os.kill(pid, signum)

    def popen(self, *popenargs, **kwargs) -> subprocess.Popen:
        return subprocess.Popen(*popenargs, **kwargs)
