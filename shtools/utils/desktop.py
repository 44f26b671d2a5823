"""Desktop environment detection"""

from __future__ import annotations
import os


def detect_desktop_environment() -> str:
    """
    Detect the current desktop environment from the session variables

    Returns:
        str: 'kde', 'cinnamon', 'gnome', 'xfce', 'mate' or 'generic'
    """
    desktop = os.environ.get('XDG_CURRENT_DESKTOP', '').lower()
    session = os.environ.get('DESKTOP_SESSION', '').lower()

    for token in (desktop, session):
        if 'kde' in token or 'plasma' in token:
            return 'kde'
        if 'cinnamon' in token:
            return 'cinnamon'
        if 'gnome' in token:
            return 'gnome'
        if 'xfce' in token:
            return 'xfce'
        if 'mate' in token:
            return 'mate'

    return 'generic'
