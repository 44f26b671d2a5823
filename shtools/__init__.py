"""shtools — small command-line utilities for the Linux desktop."""

import shtools.log  # noqa: F401  registers the TRACE level
from shtools.__version__ import __version__

__all__ = ['__version__']
