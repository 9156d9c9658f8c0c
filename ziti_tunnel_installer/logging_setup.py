"""Console and file logging for the installer."""

import logging
import os
from pathlib import Path
from typing import Union

from rich.logging import RichHandler

from .errors import LogSetupError
from .ui import console

LOGGER_NAME = "ziti_install"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(debug: bool = False) -> logging.Logger:
    """
    Configure the installer logger with a Rich console handler.

    Any handlers from a previous call are removed first.

    Args:
        debug: Show DEBUG records (including command output) on the console

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    rich_handler = RichHandler(
        console=console,
        rich_tracebacks=True,
        markup=False,
        show_time=True,
        show_path=False,
        log_time_format=f"[{DATE_FORMAT}]",
    )
    rich_handler.setLevel(logging.DEBUG if debug else logging.INFO)
    logger.addHandler(rich_handler)
    return logger


def add_file_handler(logger: logging.Logger, log_file: Union[str, Path]) -> Path:
    """
    Attach a timestamping file handler to logger.

    Raises:
        LogSetupError: If the log file cannot be created or opened
    """
    log_file = Path(log_file)
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        os.chmod(str(log_file), 0o600)  # Secure the log file
    except OSError as e:
        raise LogSetupError(f"Cannot write log: {log_file} ({e})") from e

    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(file_handler)
    logger.debug("Logging to %s", log_file)
    return log_file
