"""Loguru sink setup for the CLI. Library modules only call ``logger``."""

from __future__ import annotations

import sys
from typing import Final

from loguru import logger

CONSOLE_FORMAT: Final[str] = "<level>[{level.name}]</level> {message}"
FILE_FORMAT: Final[str] = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function} | {message}"


def setup_logging(level: str = "WARNING", log_file: str | None = None) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)
    if log_file:
        logger.add(log_file, level=level, format=FILE_FORMAT)
