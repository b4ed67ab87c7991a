"""
Logging setup for the gpeople command line.

The library only creates loggers under the ``gpeople_connector`` hierarchy
(``logging.getLogger(__name__)`` in each module); handlers are installed
here by the CLI. Console output goes to stderr, colored on a terminal, and
a dated log file under the log directory captures everything at DEBUG.

Environment:
    GPEOPLE_CONNECTOR_LOG_LEVEL  Console level name (default: INFO)
    GPEOPLE_CONNECTOR_DEBUG      1/true/yes forces DEBUG
    GPEOPLE_CONNECTOR_LOG_FILE   Explicit log file, or "none" to disable it
"""

import logging
import os
import sys
from datetime import date
from pathlib import Path
from typing import TextIO

LOGGER_NAME = "gpeople_connector"
LOG_FILE_PREFIX = "gpeople_connector_"

CONSOLE_FORMAT = "%(levelname)s: %(message)s"
VERBOSE_FORMAT = (
    "%(asctime)s %(levelname)-8s %(name)s [%(filename)s:%(lineno)d] %(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ENV_LOG_LEVEL = "GPEOPLE_CONNECTOR_LOG_LEVEL"
ENV_DEBUG = "GPEOPLE_CONNECTOR_DEBUG"
ENV_LOG_FILE = "GPEOPLE_CONNECTOR_LOG_FILE"

# ANSI colors by level name
LEVEL_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
RESET = "\033[0m"


def supports_color(stream: TextIO) -> bool:
    """True if ``stream`` is a terminal and colors are not switched off."""
    # https://no-color.org/
    if os.environ.get("NO_COLOR") or os.environ.get("TERM") == "dumb":
        return False
    return hasattr(stream, "isatty") and stream.isatty()


class ConsoleFormatter(logging.Formatter):
    """Formatter that wraps each console line in its level's color."""

    def __init__(self, fmt: str = CONSOLE_FORMAT, color: bool = False):
        super().__init__(fmt, DATE_FORMAT)
        self.color = color

    def formatMessage(self, record: logging.LogRecord) -> str:
        text = super().formatMessage(record)
        code = LEVEL_COLORS.get(record.levelname) if self.color else None
        return f"{code}{text}{RESET}" if code else text


def level_from_env() -> int:
    """Console level from GPEOPLE_CONNECTOR_DEBUG / _LOG_LEVEL, INFO if unset."""
    if os.environ.get(ENV_DEBUG, "").lower() in ("1", "true", "yes"):
        return logging.DEBUG

    level = logging.getLevelName(os.environ.get(ENV_LOG_LEVEL, "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def log_file_path(log_dir: Path) -> Path | None:
    """
    Where the file handler writes.

    Returns:
        GPEOPLE_CONNECTOR_LOG_FILE if set, None if it is "none"/"disabled",
        otherwise ``<log_dir>/gpeople_connector_YYYYMMDD.log``
    """
    override = os.environ.get(ENV_LOG_FILE)
    if override:
        if override.lower() in ("none", "disabled"):
            return None
        return Path(override)
    return log_dir / f"{LOG_FILE_PREFIX}{date.today():%Y%m%d}.log"


def setup_logging(
    verbose: bool = False, log_dir: Path | None = None, color: bool = True
) -> logging.Logger:
    """
    Install console and file handlers on the package logger.

    Calling again replaces the previous handlers.

    Args:
        verbose: DEBUG on the console, with file and line in each message
        log_dir: Directory for the dated log file; None disables file logging
        color: Color console output when stderr is a terminal

    Returns:
        The package root logger
    """
    console_level = logging.DEBUG if verbose else level_from_env()

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.propagate = False
    logger.setLevel(console_level)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(
        ConsoleFormatter(
            VERBOSE_FORMAT if verbose else CONSOLE_FORMAT,
            color=color and supports_color(sys.stderr),
        )
    )
    logger.addHandler(console)

    file_path = log_file_path(log_dir) if log_dir is not None else None
    if file_path is not None:
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(file_path, encoding="utf-8")
        except OSError as e:
            logger.warning(f"Could not create log file {file_path}: {e}")
        else:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(VERBOSE_FORMAT, DATE_FORMAT))
            logger.addHandler(file_handler)
            logger.setLevel(logging.DEBUG)
            logger.debug(f"Log file: {file_path}")

    return logger


def cleanup_old_logs(log_dir: Path, keep_count: int = 10) -> int:
    """
    Delete all but the ``keep_count`` newest log files in ``log_dir``.

    Returns:
        Number of files deleted; 0 when keep_count <= 0 or the directory
        does not exist
    """
    if keep_count <= 0 or not log_dir.is_dir():
        return 0

    logs = sorted(
        log_dir.glob(f"{LOG_FILE_PREFIX}*.log"),
        key=lambda p: p.stat().st_mtime,
        reverse=True,
    )

    deleted = 0
    for old_log in logs[keep_count:]:
        try:
            old_log.unlink()
        except OSError as e:
            logging.getLogger(LOGGER_NAME).debug(f"Could not delete {old_log}: {e}")
        else:
            deleted += 1
    return deleted
