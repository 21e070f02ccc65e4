"""
Loguru-based logging configuration for the linear regression tool.

Usage:
    from src.utils.logger import logger

    logger.info("Loading training data...")
    logger.error("Failed to load training data!")
"""

import sys
from pathlib import Path

from loguru import logger

TOOL_NAME = "grt-lin-reg-tool"

# Remove default handler
logger.remove()

# Log format with timestamp, level, tool tag, and message
LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>[" + TOOL_NAME + "]</cyan> "
    "<level>{message}</level>"
)

# Simple format for file logging (no color codes)
FILE_LOG_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
    "{level: <8} | "
    "{name}:{function}:{line} | "
    "{message}"
)

# Records at or above this level go to stderr instead of stdout
STDERR_LEVEL = "ERROR"

# Handlers added by setup_logger; other sinks (e.g. test captures) are left alone
_handler_ids: list[int] = []


def _below_stderr_level(record) -> bool:
    return record["level"].no < logger.level(STDERR_LEVEL).no


def setup_logger(
    log_level: str = "INFO",
    log_dir: str | Path = "logs",
    log_file: str = "lin-reg-tool.log",
    rotation: str = "10 MB",
    retention: str = "7 days",
    enable_stdout: bool = True,
    enable_file: bool = False,
) -> None:
    """
    Configure the logger with stdout/stderr and file handlers.

    Info and warning lines are written to stdout, errors to stderr.

    Args:
        log_level: Minimum log level to capture (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory to store log files
        log_file: Name of the log file
        rotation: When to rotate the log file (e.g., "10 MB", "1 day", "00:00")
        retention: How long to keep old log files (e.g., "7 days", "1 week")
        enable_stdout: Whether to output logs to stdout/stderr
        enable_file: Whether to output logs to file
    """
    # Remove handlers from a previous call
    while _handler_ids:
        logger.remove(_handler_ids.pop())

    if enable_stdout:
        _handler_ids.append(logger.add(
            sys.stdout,
            format=LOG_FORMAT,
            level=log_level,
            filter=_below_stderr_level,
            colorize=True,
        ))
        _handler_ids.append(logger.add(
            sys.stderr,
            format=LOG_FORMAT,
            level=STDERR_LEVEL,
            colorize=True,
            backtrace=True,
            diagnose=False,
        ))

    # Add file handler with rotation
    if enable_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        _handler_ids.append(logger.add(
            log_path / log_file,
            format=FILE_LOG_FORMAT,
            level=log_level,
            rotation=rotation,
            retention=retention,
            compression="zip",
            backtrace=True,
            diagnose=True,
        ))

    logger.debug(f"Logger initialized with level={log_level}")


# Initialize with defaults on import
# Can be reconfigured by calling setup_logger() with custom parameters
setup_logger()


# Export the configured logger
__all__ = ["logger", "setup_logger", "TOOL_NAME"]
