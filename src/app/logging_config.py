"""
Logging setup via loguru.

Console output is human readable; an optional JSON file sink (LOG_FILE)
rotates for later analysis.
"""

import os
import sys
from pathlib import Path
from typing import Optional

from loguru import logger


def configure_logging(log_level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """Replace loguru's default handler.

    Args:
        log_level: console level; defaults to $LOG_LEVEL or INFO.
        log_file: JSON log path; defaults to $LOG_FILE, no file sink when unset.
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=(log_level or os.getenv("LOG_LEVEL") or "INFO").upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan> | "
            "<level>{message}</level>"
        ),
    )

    path = log_file or os.getenv("LOG_FILE")
    if path:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            path,
            level="DEBUG",
            serialize=True,
            rotation="10 MB",
            retention=5,
            enqueue=True,
        )
