"""Permite ejecutar la CLI con `python -m vibe`."""

from __future__ import annotations

from vibe.cli.main import run

if __name__ == "__main__":
    run()
