"""Scaffold generator: create empty executable script stubs."""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)

EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


@dataclass
class ScaffoldResult:
    name: str
    path: str
    created: bool
    reason: str = ""


def create_stub(directory: str, name: str, shebang: str,
                which: Callable[[str], str | None]) -> ScaffoldResult:
    """Create one stub, or explain why it was skipped."""
    path = os.path.join(directory, name)

    if not name or os.sep in name:
        return ScaffoldResult(name, path, False, f"Invalid script name '{name}'")
    if os.path.lexists(path):
        return ScaffoldResult(name, path, False, f"File '{path}' already exists")
    if which(name) is not None:
        return ScaffoldResult(name, path, False, f"Command '{name}' already exists")

    try:
        # 'x' mode refuses to clobber a file created since the check above.
        with open(path, "x", encoding="utf-8") as f:
            f.write(shebang + "\n")
        mode = os.stat(path).st_mode
        os.chmod(path, mode | EXEC_BITS)
    except OSError as exc:
        return ScaffoldResult(name, path, False, f"Cannot create '{path}': {exc.strerror or exc}")

    logger.info("Created stub %s", path)
    return ScaffoldResult(name, path, True)


def scaffold(names: list[str], directory: str, shebang: str,
             which: Callable[[str], str | None]) -> list[ScaffoldResult]:
    """Create a stub for every name; one failure never stops the rest."""
    return [create_stub(directory, name, shebang, which) for name in names]
