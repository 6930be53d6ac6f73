"""Logging setup: rich output on stderr.

stdout is reserved for the STDIO transport's protocol stream, so every
handler installed here writes to stderr.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

stderr_console = Console(stderr=True)


def configure_logging(level: str | int = "INFO") -> None:
    """Install a single :class:`RichHandler` on the root logger."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.addHandler(
        RichHandler(console=stderr_console, show_path=False, rich_tracebacks=True)
    )
    root.setLevel(level)
    # Per-request lines come from our own middleware.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
