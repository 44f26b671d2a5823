"""File watcher: stream lines appended to a file, optionally filtered by a regex."""

from __future__ import annotations

import logging
import os
import re
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import BinaryIO, Iterator

from shtools.errors import InvalidValueError, PreconditionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WatchOptions:
    path: str
    pattern: str | None = None
    initial_lines: int = 0
    poll_interval: float = 0.25


def check_watchable(path: str) -> None:
    if not os.path.exists(path):
        raise PreconditionError(f"File '{path}' does not exist")
    if not os.path.isfile(path):
        raise PreconditionError(f"'{path}' is not a regular file")
    if not os.access(path, os.R_OK):
        raise PreconditionError(f"File '{path}' is not readable")


def compile_pattern(pattern: str | None) -> re.Pattern | None:
    if pattern is None:
        return None
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise InvalidValueError(f"Invalid pattern '{pattern}': {exc}")


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


def _tail_lines(f: BinaryIO, count: int) -> list[bytes]:
    """Return the last *count* complete lines and leave *f* after the last one."""
    if count <= 0:
        f.seek(0, os.SEEK_END)
        return []
    f.seek(0)
    lines: deque[bytes] = deque(maxlen=count)
    end = 0
    for raw in iter(f.readline, b""):
        if not raw.endswith(b"\n"):
            # Unterminated last line is still being written; follow() picks it up.
            break
        lines.append(raw)
        end = f.tell()
    f.seek(end)
    return list(lines)


def follow(options: WatchOptions, stop: threading.Event | None = None) -> Iterator[str]:
    """Yield lines appended to ``options.path`` after the call, forever.

    Lines keep their trailing newline and arrive in file order. With a
    pattern, only lines where it matches (``re.search``) are yielded. A file
    that shrinks is read again from the start. *stop* ends the generator.
    """
    check_watchable(options.path)
    regex = compile_pattern(options.pattern)

    def wanted(line: str) -> bool:
        return regex is None or regex.search(line) is not None

    with open(options.path, "rb") as f:
        for raw in _tail_lines(f, options.initial_lines):
            line = _decode(raw)
            if wanted(line):
                yield line

        pending = b""
        while stop is None or not stop.is_set():
            chunk = f.readline()
            if chunk:
                pending += chunk
                if pending.endswith(b"\n"):
                    line, pending = _decode(pending), b""
                    if wanted(line):
                        yield line
                continue

            try:
                size = os.fstat(f.fileno()).st_size
            except OSError as exc:
                logger.warning("Cannot stat '%s': %s", options.path, exc)
                size = f.tell()
            if size < f.tell():
                logger.debug("'%s' truncated, reading from the start", options.path)
                f.seek(0)
                pending = b""
                continue

            logger.trace("No new data in '%s'", options.path)
            time.sleep(options.poll_interval)
