"""
Headless CHIP-8 runner: python main.py PROGRAM
"""

import sys

from chipax.cli import main

if __name__ == "__main__":
    sys.exit(main())
