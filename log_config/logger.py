"""Centralized logging configuration using loguru."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"

# Remove default handler
logger.remove()

# Add console handler with INFO level
_console_handler_id = logger.add(
    sys.stderr,
    level="INFO",
    format=CONSOLE_FORMAT,
    colorize=True,
)

_file_handler_ids: List[int] = []


def configure_file_logging(log_dir: Path, level: str = "DEBUG") -> List[int]:
    """Add rotating file handlers under ``log_dir``.

    Writes a general log and an error-only log. Calling it again replaces
    the previous file handlers.

    Args:
        log_dir: Directory for log files (created if missing)
        level: Minimum level for the general log file

    Returns:
        Handler ids registered with loguru
    """
    remove_file_logging()

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    _file_handler_ids.append(
        logger.add(
            log_dir / "slidetracker_{time}.log",
            rotation="50 MB",
            retention="10 days",
            level=level,
            format=FILE_FORMAT,
            enqueue=True,  # Thread-safe logging
        )
    )
    _file_handler_ids.append(
        logger.add(
            log_dir / "errors_{time}.log",
            rotation="10 MB",
            retention="30 days",
            level="ERROR",
            format=FILE_FORMAT,
            enqueue=True,
        )
    )
    return list(_file_handler_ids)


def remove_file_logging() -> None:
    """Remove the handlers added by configure_file_logging."""
    for handler_id in _file_handler_ids:
        logger.remove(handler_id)
    _file_handler_ids.clear()


def configure_logging(level: str = "INFO", log_dir: Optional[Path] = None) -> None:
    """Apply the logging section of the app config.

    Replaces the console handler at ``level`` and, when ``log_dir`` is set,
    adds the rotating file handlers.
    """
    global _console_handler_id
    logger.remove(_console_handler_id)
    _console_handler_id = logger.add(
        sys.stderr,
        level=level,
        format=CONSOLE_FORMAT,
        colorize=True,
    )
    if log_dir is not None:
        configure_file_logging(Path(log_dir))


def get_logger(name: Optional[str] = None):
    """Get a logger instance with the given name.

    Args:
        name: Module name for the logger (usually __name__)

    Returns:
        Configured logger instance
    """
    if name:
        return logger.bind(name=name)
    return logger


# Performance logging helper
def log_performance(operation: str, duration_ms: float, threshold_ms: float = 50.0) -> None:
    """Log performance metrics with warnings for slow operations.

    Args:
        operation: Description of the operation
        duration_ms: Duration in milliseconds
        threshold_ms: Threshold for warning (default: 50ms)
    """
    if duration_ms > threshold_ms:
        logger.warning(f"Slow operation: {operation} took {duration_ms:.2f}ms (threshold: {threshold_ms}ms)")
    else:
        logger.debug(f"Performance: {operation} took {duration_ms:.2f}ms")


# Export configured logger
__all__ = ["logger", "get_logger", "configure_file_logging", "configure_logging", "remove_file_logging", "log_performance"]
