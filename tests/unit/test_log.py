"""Tests for logging setup."""

from __future__ import annotations

import io
import logging

from rich.console import Console
from rich.logging import RichHandler

from monopub.log import setup_logging


def test_setup_logging_levels() -> None:
    setup_logging()
    logger = logging.getLogger("monopub")
    assert logger.level == logging.WARNING
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], RichHandler)

    setup_logging(verbose=True)
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1


def test_records_reach_console() -> None:
    buffer = io.StringIO()
    setup_logging(console=Console(file=buffer, width=200))

    logging.getLogger("monopub.publish.registry").warning("Ignoring unknown access level")

    assert "Ignoring unknown access level" in buffer.getvalue()
