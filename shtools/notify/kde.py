"""KDENotifier — KDE Plasma passive popups via kdialog."""

from __future__ import annotations

import logging

from shtools.notify.base import BaseNotifier
from shtools.platform.system_adapter import ISystemAdapter

logger = logging.getLogger(__name__)


class KDENotifier(BaseNotifier):
    """Notifier for KDE Plasma — uses the native kdialog passive popup."""

    name = "kde"

    def __init__(self, system: ISystemAdapter, timeout: int = 5) -> None:
        self._system = system
        self._timeout = timeout

    def available(self) -> bool:
        return self._system.which("kdialog") is not None

    def notify(self, title: str, message: str, critical: bool = False) -> bool:
        args = [
            "kdialog",
            "--title", title,
            "--icon", "dialog-error" if critical else "dialog-information",
            "--passivepopup", message, str(self._timeout),
        ]
        result = self._system.run_command(args, timeout=5.0)
        if result.returncode != 0:
            logger.warning("kdialog failed (%s): %s", result.returncode, result.stderr.strip())
            return False
        logger.debug("Notification sent via kdialog: %s", title)
        return True
