"""Loguru sink configuration shared by the CLI and embedding applications."""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

from embedkit.utils.config import LoggingConfig

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>"
)


def setup_logging(config: LoggingConfig | None = None, *, verbose: bool = False) -> None:
    """Replace loguru's default sink with a stderr sink and an optional file sink."""
    config = config or LoggingConfig()
    level = "DEBUG" if verbose else config.level

    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level)

    if config.file:
        target = Path(config.file)
        target.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(target),
            level=level,
            rotation=config.rotation,
            retention=config.retention,
        )
