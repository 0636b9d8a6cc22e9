#!/usr/bin/env python3
"""
Main script for waila-cli
"""

import sys

from waila_cli.cli import main


if __name__ == "__main__":
    sys.exit(main())
