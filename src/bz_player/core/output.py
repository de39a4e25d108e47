"""
Unified output system using Loguru.
User-facing messages go to the log file and, unless suppressed, to the console.
"""

import threading
from pathlib import Path

from loguru import logger

from .console import safe_print

LEVEL_STYLES = {
    "debug": "cyan",
    "info": None,
    "success": "green",
    "warning": "yellow",
    "error": "red",
}


def setup_loguru(log_file: Path, level: str = "INFO") -> None:
    """
    Configure loguru for file-only logging (the console shows user messages only).

    Args:
        log_file: Path to log file
        level: Minimum level for file logging (DEBUG, INFO, WARNING, ERROR)
    """
    # Remove default handler
    logger.remove()

    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        rotation="10 MB",
        retention=5,  # Keep 5 backup files
        level=level.upper(),
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}",
        enqueue=False,  # Synchronous writes (thread-safe but blocking)
    )

    logger.info(f"Loguru initialized: {log_file} (level={level})")


def mark_thread_silent(silent: bool = True) -> None:
    """Suppress console output of log() for the calling thread."""
    threading.current_thread().silent_logging = silent


def log(message: str, level: str = "info") -> None:
    """
    Unified logging: writes to file AND prints to the console.

    Background threads with silent_logging=True only write to the log file;
    their user-facing output travels over the notification channel instead.

    Args:
        message: User-facing message
        level: Log level (debug, info, success, warning, error)
    """
    log_func = getattr(logger, level)
    log_func(message)

    silent = getattr(threading.current_thread(), "silent_logging", False)
    if not silent:
        safe_print(message, style=LEVEL_STYLES.get(level))
