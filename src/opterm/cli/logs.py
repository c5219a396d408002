"""Log file setup for the CLI.

While raw mode owns the terminal nothing may be logged to it, so logs
only ever go to a file.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_file: Path, level: str = "INFO") -> None:
    """Configure application logging to a rotating file."""
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    log_file = log_file.expanduser()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    # Keep up to 5 log files, max 1MB each
    handler = RotatingFileHandler(
        log_file,
        maxBytes=1024 * 1024,
        backupCount=4,
        encoding="utf-8",
    )

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        handlers=[handler],
        force=True,
    )
