"""Low-level X11 selection helpers for the clipboard copier."""

from __future__ import annotations

import logging

from Xlib import display as xdisplay
from Xlib.error import DisplayError

logger = logging.getLogger(__name__)

CLIPBOARD = "clipboard"
PRIMARY = "primary"

SELECTIONS = (CLIPBOARD, PRIMARY)


def x11_display_available() -> bool:
    """Return True if an X display can be opened (xclip needs one)."""
    try:
        d = xdisplay.Display()
    except (DisplayError, OSError) as exc:
        logger.debug("X display unavailable: %s", exc)
        return False
    d.close()
    return True


def xclip_input_args(selection: str) -> list[str]:
    """Command line that makes xclip read stdin into *selection*."""
    if selection not in SELECTIONS:
        raise ValueError(f"Unknown selection: {selection}")
    return ["xclip", "-i", "-selection", selection]
