"""Entry point for running the shell as a module.

This allows the package to be run with:
    python -m shellcore
"""

from __future__ import annotations

from shellcore.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
