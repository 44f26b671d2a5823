"""Installer: link every script of a directory into a bin directory.

Each script is made executable and symlinked under the same name. Names
matching the skip pattern (and the installer's own name) are left alone.
Any failure aborts the whole run.
"""

from __future__ import annotations

import logging
import os
import re
import stat

from shtools.errors import PreconditionError

logger = logging.getLogger(__name__)

EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


def skip_regexp(pattern: str, self_name: str | None = None) -> re.Pattern:
    if self_name:
        pattern = f"{pattern}|{re.escape(self_name)}"
    return re.compile(pattern)


def ensure_bin_directory(bin_dir: str) -> None:
    """Create *bin_dir* if missing and make it writable if it is not."""
    if not bin_dir:
        raise PreconditionError("Missing argument")

    if not os.path.isdir(bin_dir):
        try:
            os.mkdir(bin_dir)
        except OSError:
            raise PreconditionError(f"Cannot create bin directory - {bin_dir}")
        logger.info("Created bin directory %s", bin_dir)

    if not os.access(bin_dir, os.W_OK):
        try:
            os.chmod(bin_dir, os.stat(bin_dir).st_mode | stat.S_IWUSR)
        except OSError:
            raise PreconditionError(f"Directory '{bin_dir}' is not writable")
        if not os.access(bin_dir, os.W_OK):
            raise PreconditionError(f"Directory '{bin_dir}' is not writable")


def list_scripts(source_dir: str, skip: re.Pattern) -> list[str]:
    try:
        names = sorted(os.listdir(source_dir))
    except OSError as exc:
        raise PreconditionError(f"Cannot read source directory '{source_dir}': {exc.strerror}")
    return [
        name for name in names
        if not skip.search(name) and os.path.isfile(os.path.join(source_dir, name))
    ]


def install_scripts(source_dir: str, bin_dir: str, skip_pattern: str,
                    self_name: str | None = None) -> list[str]:
    """Link the scripts of *source_dir* into *bin_dir*; returns the links made."""
    ensure_bin_directory(bin_dir)
    source_dir = os.path.abspath(source_dir)
    skip = skip_regexp(skip_pattern, self_name)

    links = []
    for name in list_scripts(source_dir, skip):
        script = os.path.join(source_dir, name)
        link = os.path.join(bin_dir, name)

        try:
            os.chmod(script, os.stat(script).st_mode | EXEC_BITS)
        except OSError:
            raise PreconditionError(f"Cannot add execute rights to: '{script}'")

        # Replace whatever a previous install left behind.
        if os.path.lexists(link):
            try:
                os.unlink(link)
            except OSError:
                logger.debug("Could not unlink %s", link)

        try:
            os.symlink(script, link)
        except OSError:
            raise PreconditionError(f"Cannot link '{script}' to '{link}'")

        logger.info("Linked %s -> %s", link, script)
        links.append(link)

    return links
