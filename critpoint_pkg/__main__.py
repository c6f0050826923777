"""Main entry point for running critpoint_pkg as a module.

This allows running Critpoint with:
    python -m critpoint_pkg
    python -m critpoint_pkg --health-check
    python -m critpoint_pkg -e "x^2 + y^2"
"""

from __future__ import annotations

import sys

from .cli import main_entry

if __name__ == "__main__":
    sys.exit(main_entry())
