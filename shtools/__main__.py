#!/usr/bin/env python3
"""
shtools entry point for running as a module: python3 -m shtools <command> ...
"""

import sys
from shtools.cli import main

if __name__ == '__main__':
    sys.exit(main())
