"""ISystemAdapter interface — abstraction for subprocess/system calls."""

from __future__ import annotations

import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class CommandResult:
    stdout: str
    stderr: str
    returncode: int


class ISystemAdapter(ABC):
    @abstractmethod
    def run_command(self, args: list[str], timeout: float = 1.0) -> CommandResult: ...

    @abstractmethod
    def which(self, name: str) -> str | None: ...

    @abstractmethod
    def display_available(self) -> bool: ...

    @abstractmethod
    def set_clipboard(self, data: bytes, selection: str = "clipboard") -> CommandResult: ...

    @abstractmethod
    def kill(self, pid: int, signum: int) -> None:
        """Deliver *signum* to *pid*; raises ``OSError`` like ``os.kill``."""

    @abstractmethod
    def popen(self, *popenargs, **kwargs) -> subprocess.Popen: ...
