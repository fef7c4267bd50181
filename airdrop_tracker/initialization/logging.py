"""
Initialization - Logging Module.

Configures loguru: stderr plus a rotating file sink.
"""

import sys
from pathlib import Path

from loguru import logger

from airdrop_tracker.config.settings import settings


def setup_logging(
    log_file: str = "tracker.log",
    level: str | None = None,
    log_dir: str | None = None,
) -> None:
    """
    Configure logger with file rotation.

    Args:
        log_file: File name inside log_dir
        level: Log level (default: settings.log_level)
        log_dir: Directory (default: settings.log_dir)
    """
    level = (level or settings.log_level).upper()
    directory = Path(log_dir or settings.log_dir)
    directory.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if settings.debug else level,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan> - <level>{message}</level>"
        ),
    )
    logger.add(
        str(directory / log_file),
        rotation="1 day",
        retention="7 days",
        level=level,
        encoding="utf-8",
    )
