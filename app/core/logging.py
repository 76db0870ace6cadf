"""
Logging setup - one place that wires handlers for every wallcal.* logger.

Modules only call logging.getLogger("wallcal.<area>"); the handlers are
attached here once, at application start-up.

Log Format:
==========
    [2024-06-10 09:00:00] INFO [wallcal.services.refresh] Refreshed 12 events

When LOG_DIR is configured, two files are written as well:
- error.log: ERROR and above
- combined.log: everything at LOG_LEVEL and above
"""

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER_NAME = "wallcal"


def configure_logging(level: str = "INFO", log_dir: Optional[str] = None) -> logging.Logger:
    """
    Configure the wallcal logger hierarchy.

    Safe to call more than once (e.g. from tests and from the app lifespan):
    existing handlers are replaced rather than duplicated.

    Args:
        level: Level name such as "INFO" or "DEBUG"
        log_dir: Optional directory for error.log / combined.log

    Returns:
        The configured "wallcal" root logger
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level.upper())

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)

        error_file = logging.FileHandler(path / "error.log", encoding="utf-8")
        error_file.setLevel(logging.ERROR)
        error_file.setFormatter(formatter)
        logger.addHandler(error_file)

        combined_file = logging.FileHandler(path / "combined.log", encoding="utf-8")
        combined_file.setFormatter(formatter)
        logger.addHandler(combined_file)

    return logger
