"""Background runner: start a shell command detached from the terminal.

The command runs in its own session with SIGHUP ignored and a lowered
priority. Its stdout and stderr are appended to the requested files (the
null device by default). With notification enabled a detached supervisor
waits for the command and reports its exit status on the desktop.
"""

from __future__ import annotations

import logging
import os
import signal
import subprocess
from dataclasses import dataclass
from typing import IO

from shtools.errors import PreconditionError
from shtools.notify.base import BaseNotifier, NullNotifier
from shtools.platform.system_adapter import ISystemAdapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunJob:
    command: str
    stdout: str = os.devnull
    stderr: str = os.devnull
    notify: bool = False
    shell: str = "/bin/sh"
    nice: int = 10


def check_target(path: str) -> None:
    """Make sure *path* can receive output, creating its parent if needed."""
    if path == os.devnull:
        return
    if os.path.isdir(path):
        raise PreconditionError(f"'{path}' is a directory")
    if os.path.exists(path):
        if not os.access(path, os.W_OK):
            raise PreconditionError(f"File '{path}' is not writable")
        return

    parent = os.path.dirname(os.path.abspath(path))
    try:
        os.makedirs(parent, exist_ok=True)
    except OSError as exc:
        raise PreconditionError(f"Cannot create directory '{parent}': {exc.strerror}")
    if not os.access(parent, os.W_OK):
        raise PreconditionError(f"Directory '{parent}' is not writable")


def same_target(first: str, second: str) -> bool:
    return os.path.realpath(first) == os.path.realpath(second)


def _detach(nice: int):
    def preexec() -> None:
        signal.signal(signal.SIGHUP, signal.SIG_IGN)
        if nice:
            os.nice(nice)
    return preexec


class BackgroundRunner:
    """Launches a ``RunJob`` and, if asked, reports how it finished."""

    def __init__(self, system: ISystemAdapter, notifier: BaseNotifier | None = None) -> None:
        self._system = system
        self._notifier = notifier or NullNotifier()

    def validate(self, job: RunJob) -> None:
        if not job.command.strip():
            raise PreconditionError("Command is empty")
        check_target(job.stdout)
        if not same_target(job.stdout, job.stderr):
            check_target(job.stderr)

    def start(self, job: RunJob) -> subprocess.Popen:
        """Start the command with its redirections and return the child."""
        handles: list[IO[bytes]] = []
        try:
            if job.stdout == os.devnull:
                out = subprocess.DEVNULL
            else:
                out = open(job.stdout, "ab")
                handles.append(out)

            if same_target(job.stdout, job.stderr):
                # One handle for both streams, so neither overwrites the other.
                err = subprocess.STDOUT
            elif job.stderr == os.devnull:
                err = subprocess.DEVNULL
            else:
                err = open(job.stderr, "ab")
                handles.append(err)

            process = self._system.popen(
                [job.shell, "-c", job.command],
                stdin=subprocess.DEVNULL,
                stdout=out,
                stderr=err,
                start_new_session=True,
                preexec_fn=_detach(job.nice),
            )
        except OSError as exc:
            raise PreconditionError(f"Cannot start '{job.command}': {exc.strerror or exc}")
        finally:
            for handle in handles:
                handle.close()

        logger.info("Started pid %d: %s", process.pid, job.command)
        return process

    def supervise(self, job: RunJob) -> int:
        """Run the command to completion and announce its exit status."""
        process = self.start(job)
        returncode = process.wait()
        logger.info("pid %d finished with status %d", process.pid, returncode)
        self._notifier.announce_exit(job.command, returncode)
        return returncode

    def launch(self, job: RunJob) -> int:
        """Validate and launch *job*; returns without waiting for it.

        Returns the pid of the command, or of its supervisor when a
        notification was requested.
        """
        self.validate(job)
        if not job.notify:
            return self.start(job).pid

        pid = os.fork()
        if pid:
            logger.info("Supervisor pid %d watches: %s", pid, job.command)
            return pid

        # Supervisor: own session, no terminal, survives hangup.
        status = 1
        try:
            os.setsid()
            signal.signal(signal.SIGHUP, signal.SIG_IGN)
            devnull = os.open(os.devnull, os.O_RDWR)
            for fd in (0, 1, 2):
                os.dup2(devnull, fd)
            os.close(devnull)
            self.supervise(job)
            status = 0
        except Exception:
            logger.exception("Supervisor for '%s' failed", job.command)
        finally:
            logging.shutdown()
            os._exit(status)
