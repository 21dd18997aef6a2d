from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(message)s"


def _coerce_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else logging.WARNING


def configure_logging(level: str | int = "WARNING") -> None:
    """Logging a stderr (Rich) para no mezclarse con las respuestas en stdout."""

    logging.basicConfig(
        level=_coerce_level(level),
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)],
        force=True,
    )
    # httpx loguea cada request a INFO; solo lo queremos en DEBUG.
    logging.getLogger("httpx").setLevel(logging.DEBUG if _coerce_level(level) <= logging.DEBUG else logging.WARNING)
