"""Utility functions for figma-icon-sync."""

import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    console: bool = True,
) -> None:
    """
    Configure loguru sinks for the CLI.

    - Drops the default handler so repeated calls never duplicate output
    - Logs to stderr when console is enabled
    - Logs to a rotating file when log_file is given (relative paths are
      resolved under the user's home directory)
    """
    logger.remove()

    if console:
        logger.add(sys.stderr, level=level, backtrace=True, diagnose=False, colorize=True)

    if log_file:
        path = Path(log_file)
        if not path.is_absolute():
            path = Path.home() / path
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(path),
            level=level,
            rotation="10 MB",
            retention="10 days",
            backtrace=True,
            diagnose=False,
            enqueue=True,
        )
