"""
Logging setup for the organizer.

Modules obtain loggers with get_logger(__name__). A run attaches two sinks to
the package logger: a timestamped log file in the output directory (UTF-8
with BOM so Windows editors show non-ASCII names correctly) and a
RichHandler on stderr.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "FontOrganizerCore"
LOG_FILE_PREFIX = "Log_"
LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(message)s"
LOG_DATE_FORMAT = "%Y/%m/%d %H:%M:%S"


def get_logger(name: str) -> logging.Logger:
    """Return a logger below the package root logger."""
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def log_file_name(now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return f"{LOG_FILE_PREFIX}{now.strftime('%Y%m%d%H%M%S')}.txt"


def setup_run_logging(
    output_dir: Optional[Path],
    verbose: bool = False,
    console: Optional[Console] = None,
) -> Optional[Path]:
    """
    Configure the package logger for one run.

    Args:
        output_dir: Directory receiving the log file, or None for console only
        verbose: Show DEBUG records on the console
        console: Rich console for the stderr handler

    Returns:
        Path of the log file, or None when no file was requested

    Raises:
        OSError: the log file cannot be created
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
        log_time_format="[%X]",
    )
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.addHandler(console_handler)

    if output_dir is None:
        return None

    log_path = Path(output_dir) / log_file_name()
    file_handler = logging.FileHandler(log_path, mode="w", encoding="utf-8-sig")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(LOG_FILE_FORMAT, LOG_DATE_FORMAT))
    logger.addHandler(file_handler)
    return log_path


def close_run_logging() -> None:
    """Flush and detach every handler attached by setup_run_logging."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.flush()
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
