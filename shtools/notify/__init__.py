"""Notifiers: desktop-environment-specific completion notifications."""

from __future__ import annotations

import logging

from shtools.notify.base import BaseNotifier, NullNotifier
from shtools.notify.generic import NotifySendNotifier
from shtools.notify.kde import KDENotifier
from shtools.platform.system_adapter import ISystemAdapter
from shtools.utils.desktop import detect_desktop_environment

logger = logging.getLogger(__name__)


def get_notifier(kind: str, system: ISystemAdapter, timeout: int = 5) -> BaseNotifier:
    """Return the notifier for *kind* ('auto', 'kde', 'notify-send' or 'none').

    'auto' picks the KDE notifier on Plasma and the generic daemon notifier
    everywhere else. A notifier whose tool is missing degrades to
    ``NullNotifier``.
    """
    if kind == "none":
        return NullNotifier()

    if kind == "auto":
        de = detect_desktop_environment()
        kind = "kde" if de == "kde" else "notify-send"
        logger.debug("Desktop environment %r, using %s notifier", de, kind)

    if kind == "kde":
        notifier: BaseNotifier = KDENotifier(system, timeout=timeout)
    elif kind == "notify-send":
        notifier = NotifySendNotifier(system, timeout=timeout)
    else:
        raise ValueError(f"Unknown notifier: {kind}")

    if not notifier.available():
        logger.warning("Notification tool for '%s' not found, notifications disabled", notifier.name)
        return NullNotifier()
    return notifier


__all__ = [
    "BaseNotifier",
    "KDENotifier",
    "NotifySendNotifier",
    "NullNotifier",
    "get_notifier",
]
