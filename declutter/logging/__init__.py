"""Logging package with Rich-based progress reporting."""
from __future__ import annotations

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .rich_logger import FilesPerSecondColumn, QuietProgressReporter, RichProgressReporter


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Route log records through Rich on stderr."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, console=console or Console(stderr=True))],
        force=True,
    )


__all__ = [
    "FilesPerSecondColumn",
    "QuietProgressReporter",
    "RichProgressReporter",
    "setup_logging",
]
