"""Punto de entrada ``python -m glucemia_xp``."""

from __future__ import annotations

from glucemia_xp.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
