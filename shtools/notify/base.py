"""BaseNotifier — abstract interface for desktop notifications."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class BaseNotifier(ABC):
    """Base class for desktop-environment-specific notifiers."""

    name: str = "base"

    @abstractmethod
    def available(self) -> bool:
        """Return True if the notification tool exists on this host."""

    @abstractmethod
    def notify(self, title: str, message: str, critical: bool = False) -> bool:
        """Show a notification. Returns True if it was delivered."""

    def announce_exit(self, command: str, returncode: int) -> bool:
        """Report how a background command finished."""
        if returncode == 0:
            return self.notify("Command finished", f"'{command}' completed successfully")
        return self.notify(
            "Command failed",
            f"'{command}' exited with status {returncode}",
            critical=True,
        )


class NullNotifier(BaseNotifier):
    """Notifier used when notifications are disabled or unavailable."""

    name = "none"

    def available(self) -> bool:
        return True

    def notify(self, title: str, message: str, critical: bool = False) -> bool:
        logger.debug("Notification suppressed: %s - %s", title, message)
        return False
