"""Centralized logging configuration using loguru."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

CONSOLE_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"

# Remove default handler
logger.remove()

# Add console handler with INFO level
_console_sink_id = logger.add(
    sys.stderr,
    level="INFO",
    format=CONSOLE_FORMAT,
    colorize=True,
)
_file_sink_ids: list[int] = []


def configure_logging(level: str = "INFO", log_dir: Optional[Path] = None) -> None:
    """Reconfigure the console level and optionally enable rotating file logs.

    Args:
        level: Minimum level for the console sink
        log_dir: Directory for the debug and error log files (None disables them)
    """
    global _console_sink_id

    logger.remove(_console_sink_id)
    _console_sink_id = logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)

    for sink_id in _file_sink_ids:
        logger.remove(sink_id)
    _file_sink_ids.clear()
    if log_dir is None:
        return

    log_dir.mkdir(parents=True, exist_ok=True)
    _file_sink_ids.append(
        logger.add(
            log_dir / "autoaim_{time}.log",
            rotation="50 MB",
            retention="10 days",
            level="DEBUG",
            format=FILE_FORMAT,
            enqueue=True,  # Thread-safe logging
        )
    )
    # Add error-specific log file
    _file_sink_ids.append(
        logger.add(
            log_dir / "errors_{time}.log",
            rotation="10 MB",
            retention="30 days",
            level="ERROR",
            format=FILE_FORMAT,
            enqueue=True,
        )
    )


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
def log_performance(operation: str, duration_ms: float, threshold_ms: float = 100.0) -> None:
    """Log performance metrics with warnings for slow operations.

    Args:
        operation: Description of the operation
        duration_ms: Duration in milliseconds
        threshold_ms: Threshold for warning (default: 100ms)
    """
    if duration_ms > threshold_ms:
        logger.warning(f"Slow operation: {operation} took {duration_ms:.2f}ms (threshold: {threshold_ms}ms)")
    else:
        logger.debug(f"Performance: {operation} took {duration_ms:.2f}ms")


# Export configured logger
__all__ = ["logger", "configure_logging", "get_logger", "log_performance"]
