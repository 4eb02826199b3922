#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Entry point for running markextract as a module.

This allows the package to be executed as:
    python -m markextract [arguments]
"""

import sys

from markextract.cli import main

if __name__ == "__main__":
    sys.exit(main())
