"""
Logging for DepthTongueTracker.

All modules log through children of the "DepthTongueTracker" logger.
setup_logging() attaches a console handler and, optionally, a rotating
file in the log directory:

1. $DEPTH_TONGUE_TRACKER_LOG_DIR if set
2. %APPDATA%/DepthTongueTracker/logs on Windows
3. ~/.depth_tongue_tracker/logs otherwise

Per-frame conditions (skipped frames, dropped frames) can occur at sensor
rate; log_throttled() keeps them from flooding the log.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .config import LOG_BACKUP_COUNT, LOG_DIR_ENV, LOG_FILENAME, LOG_MAX_BYTES, LOG_THROTTLE_INTERVAL

LOGGER_NAME = "DepthTongueTracker"

_FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s.%(funcName)s:%(lineno)d | %(message)s"
_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"


def get_log_directory() -> Path:
    """Resolve the log directory and make sure it exists."""
    override = os.environ.get(LOG_DIR_ENV)
    appdata = os.environ.get("APPDATA")
    if override:
        log_dir = Path(override)
    elif appdata:
        log_dir = Path(appdata) / "DepthTongueTracker" / "logs"
    else:
        log_dir = Path.home() / ".depth_tongue_tracker" / "logs"

    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    return handler


def _file_handler(log_path: Path) -> logging.Handler:
    # File always records debug output, whatever the console level
    handler = RotatingFileHandler(
        log_path,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8"
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(
    debug: bool = False,
    log_to_file: bool = True,
    log_filename: Optional[str] = None,
    log_dir: Optional[Path] = None
) -> logging.Logger:
    """
    Configure and return the application logger.

    Calling it again replaces the handlers of the previous call.

    Args:
        debug: Log debug messages (direction changes, debounce) to the console.
        log_to_file: Also write to a rotating log file.
        log_filename: File name inside the log directory.
        log_dir: Log directory, instead of get_log_directory().

    Returns:
        The "DepthTongueTracker" logger.
    """
    level = logging.DEBUG if debug else logging.INFO
    app_logger = logging.getLogger(LOGGER_NAME)
    app_logger.setLevel(level)

    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()

    app_logger.addHandler(_console_handler(level))

    if not log_to_file:
        return app_logger

    directory = Path(log_dir) if log_dir is not None else get_log_directory()
    directory.mkdir(parents=True, exist_ok=True)
    log_path = directory / (log_filename or LOG_FILENAME)
    app_logger.addHandler(_file_handler(log_path))
    app_logger.debug(f"Log file: {log_path}")
    return app_logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Child of the application logger, or the application logger itself."""
    app_logger = logging.getLogger(LOGGER_NAME)
    return app_logger.getChild(name) if name else app_logger


def log_throttled(
    target: logging.Logger,
    level: int,
    count: int,
    message: str,
    interval: int = LOG_THROTTLE_INTERVAL
) -> bool:
    """
    Log a repeating per-frame condition on its first and every interval-th occurrence.

    Args:
        target: Logger to write to.
        level: Logging level.
        count: How often the condition has occurred so far (1-based).
        message: Message text; the occurrence count is appended.
        interval: Occurrences between two log lines.

    Returns:
        True if a line was written.
    """
    if count != 1 and (interval <= 0 or count % interval != 0):
        return False
    target.log(level, f"{message} ({count} so far)")
    return True
