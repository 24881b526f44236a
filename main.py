#!/usr/bin/env python3
"""
Image to ASCII Art Converter
============================
Command line entry point; see ``ascii_art_engine.cli`` for the options.
"""

import sys

from ascii_art_engine.cli import main


if __name__ == '__main__':
    sys.exit(main())
