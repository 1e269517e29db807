"""Logging configuration using loguru.

Logs go to a daily rotated file only, so nothing is written over the TUI.
"""

import os
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    import loguru

# Remove default handler
logger.remove()

_default_log_dir = Path.home() / ".local" / "share" / "biblios" / "logs"
LOG_DIR = Path(os.environ.get("BIBLIOS_LOG_DIR", str(_default_log_dir))).expanduser()
LOG_DIR.mkdir(parents=True, exist_ok=True)

logger.add(
    LOG_DIR / "biblios_{time:YYYY-MM-DD}.log",
    level="DEBUG",
    format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
    rotation="00:00",  # New file at midnight
    retention="1 week",
    compression="gz",
    backtrace=True,
    diagnose=False,
)


def get_logger(name: str) -> "loguru.Logger":
    """Get a logger instance with the given name.

    Args:
        name: The name for the logger (typically __name__).

    Returns:
        A configured logger instance.
    """
    return logger.bind(name=name)
