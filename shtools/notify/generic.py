"""NotifySendNotifier — freedesktop notification daemon via notify-send."""

from __future__ import annotations

import logging

from shtools.notify.base import BaseNotifier
from shtools.platform.system_adapter import ISystemAdapter

logger = logging.getLogger(__name__)


class NotifySendNotifier(BaseNotifier):
    """Notifier for any desktop running a notification daemon."""

    name = "notify-send"

    def __init__(self, system: ISystemAdapter, timeout: int = 5) -> None:
        self._system = system
        self._timeout = timeout

    def available(self) -> bool:
        return self._system.which("notify-send") is not None

    def notify(self, title: str, message: str, critical: bool = False) -> bool:
        args = [
            "notify-send",
            "-a", "shtools",
            "-u", "critical" if critical else "normal",
            "-i", "dialog-error" if critical else "dialog-information",
            "-t", str(self._timeout * 1000),
            title,
            message,
        ]
        result = self._system.run_command(args, timeout=5.0)
        if result.returncode != 0:
            logger.warning("notify-send failed (%s): %s", result.returncode, result.stderr.strip())
            return False
        logger.debug("Notification sent via notify-send: %s", title)
        return True
