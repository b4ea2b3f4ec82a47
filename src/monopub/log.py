"""Logging setup."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(verbose: bool = False, console: Console | None = None) -> None:
    """Route monopub log records through rich.

    Args:
        verbose: Show debug records instead of warnings only.
        console: Console to write to (stderr by default).
    """
    logger = logging.getLogger("monopub")
    logger.handlers.clear()
    logger.addHandler(
        RichHandler(
            console=console or Console(stderr=True),
            show_time=False,
            show_path=verbose,
            markup=False,
        )
    )
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False
