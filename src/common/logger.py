"""Logging setup with rich console output.

Usage:
    from common.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Store updated")
"""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

LOG_LEVEL_ENV = "AUTOLENS_LOG_LEVEL"

# Diagnostics go to stderr so JSON output on stdout stays clean.
console = Console(stderr=True)


def _rich_handler() -> RichHandler:
    handler = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def get_logger(name: str, level: str | None = None) -> logging.Logger:
    """Get a module logger.

    Handlers are installed by ``setup_logging``; until then records simply
    propagate to the root logger (so pytest's caplog sees them).
    """
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level.upper())
    return logger


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure the root logger once at the CLI entry point.

    The ``AUTOLENS_LOG_LEVEL`` environment variable overrides ``level``.
    """
    level = os.getenv(LOG_LEVEL_ENV, level).upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(_rich_handler())

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(file_handler)


__all__ = ["LOG_LEVEL_ENV", "console", "get_logger", "setup_logging"]
