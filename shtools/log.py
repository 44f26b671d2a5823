"""Logging setup and custom levels for shtools.

Levels (ascending):
    TRACE =  5  — every poll of a watched file, every parsed ps row
    DEBUG = 10  — option assembly, resolved paths, chosen notifier
    INFO  = 20  — launched pids, signalled pids, created links (default)

Usage:
    from shtools.log import setup_logging
    log = setup_logging(debug=args.debug, log_file=config['log_file'])
    logger = logging.getLogger(__name__)
    logger.trace("very noisy message")
"""

from __future__ import annotations

import logging
import logging.handlers
import os
import sys
from pathlib import Path

TRACE: int = 5
logging.addLevelName(TRACE, "TRACE")


def _trace(self: logging.Logger, message: object, *args: object, **kwargs: object) -> None:
    if self.isEnabledFor(TRACE):
        self._log(TRACE, message, args, **kwargs)  # type: ignore[attr-defined]


# Patch Logger class once at import time
logging.Logger.trace = _trace  # type: ignore[attr-defined]

DEFAULT_LOG_FILE = '~/.shtools.log'


def setup_logging(debug: bool = False, log_file: str | None = None) -> logging.Logger:
    """Setup logging to both console and file

    Calling it again replaces the handlers of the previous call, so the
    console handler always writes to the current ``sys.stderr``.

    Args:
        debug: Enable debug level logging
        log_file: Path to log file (default: ~/.shtools.log)
    """
    logger = logging.getLogger('shtools')
    logger.setLevel(TRACE if debug else logging.DEBUG)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    log_path = Path(os.path.expanduser(log_file or DEFAULT_LOG_FILE))

    fmt = logging.Formatter(
        '[%(asctime)s] %(levelname)-8s %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # File handler (rotate log file when it gets too large)
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=10*1024*1024,  # 10 MB
            backupCount=5
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(fmt)
        logger.addHandler(file_handler)
    except OSError as e:
        print(f"Warning: Could not setup file logging: {e}", file=sys.stderr)

    # Console handler (warnings only unless debugging)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(TRACE if debug else logging.WARNING)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    logger.addHandler(console_handler)

    return logger
