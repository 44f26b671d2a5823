"""Clipboard copier: move bytes from stdin, a file or arguments into X buffers.

Data is only ever read through one of two sanctioned readers, ``echo``
(a literal string) and ``cat`` (file contents), and written with ``xclip``
into the CLIPBOARD buffer, the PRIMARY selection, or both.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import BinaryIO, Callable

from shtools.errors import DelegateError, InvalidValueError, PreconditionError, UsageError
from shtools.platform.clipboard import CLIPBOARD, PRIMARY
from shtools.platform.system_adapter import ISystemAdapter

logger = logging.getLogger(__name__)

# Sources
STDIN = "stdin"
FILE = "file"
ARGS = "args"

# Destinations
TARGET_CLIPBOARD = "clipboard"
TARGET_SELECTION = "selection"
TARGET_BOTH = "both"

_TARGET_SELECTIONS: dict[str, tuple[str, ...]] = {
    TARGET_CLIPBOARD: (CLIPBOARD,),
    TARGET_SELECTION: (PRIMARY,),
    TARGET_BOTH: (CLIPBOARD, PRIMARY),
}


@dataclass(frozen=True)
class CopyOptions:
    source: str = STDIN
    target: str = TARGET_CLIPBOARD
    values: tuple[str, ...] = field(default_factory=tuple)

    @property
    def selections(self) -> tuple[str, ...]:
        try:
            return _TARGET_SELECTIONS[self.target]
        except KeyError:
            raise InvalidValueError(f"Unknown destination: {self.target}")


def _read_string(value: str) -> bytes:
    return value.encode("utf-8")


def _read_file(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


# Only these two readers may move data into the clipboard.
READERS: dict[str, Callable[[str], bytes]] = {
    "echo": _read_string,
    "cat": _read_file,
}


def read_with(reader: str, value: str) -> bytes:
    """Read *value* through a sanctioned reader, rejecting anything else."""
    func = READERS.get(reader)
    if func is None:
        raise InvalidValueError(f"Invalid read command: '{reader}'")
    return func(value)


class ClipboardCopier:
    """Validates the source and copies its bytes into the requested buffers."""

    def __init__(self, system: ISystemAdapter, stdin: BinaryIO | None = None) -> None:
        self._system = system
        self._stdin = stdin

    def load(self, options: CopyOptions) -> bytes:
        """Validate the source of *options* and return the payload."""
        if options.source == FILE:
            if len(options.values) != 1:
                raise UsageError("Exactly one file must be given")
            path = options.values[0]
            if not os.path.exists(path):
                raise PreconditionError(f"File does not exist: '{path}'")
            if not os.path.isfile(path):
                raise PreconditionError(f"Not a regular file: '{path}'")
            try:
                return read_with("cat", path)
            except OSError as exc:
                raise PreconditionError(f"Cannot read '{path}': {exc.strerror}")

        if options.source == ARGS:
            if not options.values:
                raise UsageError("Missing text to copy")
            return read_with("echo", " ".join(options.values))

        if options.source == STDIN:
            if options.values:
                raise UsageError("Unexpected arguments when reading standard input")
            if self._stdin is None:
                raise PreconditionError("No input")
            data = self._stdin.read()
            if not data:
                raise PreconditionError("No input")
            return data

        raise InvalidValueError(f"Unknown source: {options.source}")

    def check_backend(self) -> None:
        if self._system.which("xclip") is None:
            raise PreconditionError("xclip is not installed")
        if not self._system.display_available():
            raise PreconditionError("Cannot open X display")

    def copy(self, options: CopyOptions) -> int:
        """Copy according to *options*. Returns the number of bytes copied."""
        selections = options.selections
        data = self.load(options)
        self.check_backend()

        for selection in selections:
            result = self._system.set_clipboard(data, selection=selection)
            if result.returncode != 0:
                detail = f": {result.stderr}" if result.stderr else ""
                raise DelegateError(f"xclip failed for {selection} (status {result.returncode}){detail}")
            logger.debug("Copied %d bytes to %s", len(data), selection)

        return len(data)
