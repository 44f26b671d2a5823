"""Process signaler: send a signal to every process whose command line matches."""

from __future__ import annotations

import logging
import os
import re
import signal
from dataclasses import dataclass, field

from shtools.errors import DelegateError, InvalidValueError, NoProcessesFound, ShtoolsError
from shtools.platform.system_adapter import ISystemAdapter

logger = logging.getLogger(__name__)

PS_ARGS = ["ps", "-eo", "pid=,args="]

MAX_SIGNAL = 64

_RT_RE = re.compile(r"^RT(MIN|MAX)([+-]\d+)?$")


@dataclass(frozen=True)
class SignalRequest:
    pattern: str
    signum: int = int(signal.SIGTERM)


@dataclass(frozen=True)
class ProcessEntry:
    pid: int
    args: str


@dataclass
class SignalReport:
    signalled: list[int] = field(default_factory=list)
    vanished: list[int] = field(default_factory=list)
    failed: list[tuple[int, str]] = field(default_factory=list)


def signal_table() -> dict[str, int]:
    """Signal names of this host without the ``SIG`` prefix, aliases included."""
    return {
        name[3:]: int(sig)
        for name, sig in signal.Signals.__members__.items()
        if name.startswith("SIG") and not name.startswith("SIG_")
    }


def resolve_signal(token: str) -> int:
    """Turn a signal number or name into a signal number.

    Accepts ``9``, ``-9``, ``kill``, ``SIGKILL``, ``-KILL`` and the real-time
    forms ``RTMIN+n`` / ``RTMAX-n``.
    """
    raw = token[1:] if token.startswith("-") else token
    if raw.isascii() and raw.isdigit():
        number = int(raw)
        if 1 <= number <= MAX_SIGNAL:
            return number
        raise InvalidValueError(f"'{token}' is not a signal")

    name = raw.upper()
    if name.startswith("SIG"):
        name = name[3:]

    table = signal_table()
    if name in table:
        return table[name]

    m = _RT_RE.match(name)
    if m and hasattr(signal, "SIGRTMIN"):
        base = int(signal.SIGRTMIN) if m.group(1) == "MIN" else int(signal.SIGRTMAX)
        number = base + int(m.group(2) or 0)
        if int(signal.SIGRTMIN) <= number <= int(signal.SIGRTMAX):
            return number

    raise InvalidValueError(f"'{token}' is not a signal")


class ProcessSignaler:
    """Finds processes by command-line substring and signals them.

    Processes whose command line contains one of *self_names* (other
    invocations of the signaler) are never matched, nor is the current
    process or the ``ps`` listing itself.
    """

    def __init__(self, system: ISystemAdapter, self_names: tuple[str, ...] = ("nkill",)) -> None:
        self._system = system
        self._self_names = tuple(name for name in self_names if name)

    def list_processes(self) -> list[ProcessEntry]:
        result = self._system.run_command(PS_ARGS, timeout=5.0)
        if result.returncode != 0:
            raise DelegateError(f"ps failed (status {result.returncode}): {result.stderr.strip()}")

        entries = []
        for line in result.stdout.splitlines():
            parts = line.strip().split(None, 1)
            if not parts or not parts[0].isdigit():
                continue
            entries.append(ProcessEntry(pid=int(parts[0]), args=parts[1] if len(parts) > 1 else ""))
        logger.trace("Listed %d processes", len(entries))
        return entries

    def find(self, pattern: str) -> list[int]:
        own_pid = os.getpid()
        listing = " ".join(PS_ARGS)
        pids = []
        for entry in self.list_processes():
            if pattern not in entry.args:
                continue
            if entry.pid == own_pid or entry.args == listing:
                continue
            if any(name in entry.args for name in self._self_names):
                continue
            logger.debug("Matched %d: %s", entry.pid, entry.args)
            pids.append(entry.pid)
        return pids

    def send(self, request: SignalRequest) -> SignalReport:
        pids = self.find(request.pattern)
        if not pids:
            raise NoProcessesFound()

        report = SignalReport()
        for pid in pids:
            try:
                self._system.kill(pid, request.signum)
            except ProcessLookupError:
                report.vanished.append(pid)
            except OSError as exc:
                report.failed.append((pid, exc.strerror or str(exc)))
            else:
                report.signalled.append(pid)

        if report.failed:
            details = ", ".join(f"{pid}: {reason}" for pid, reason in report.failed)
            raise ShtoolsError(f"Unknown error ({details})")
        if not report.signalled:
            raise NoProcessesFound()

        logger.info("Sent signal %d to %s", request.signum, ", ".join(map(str, report.signalled)))
        return report
