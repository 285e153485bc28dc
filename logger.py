"""Application logging.

Everything Painel reports goes through the ``painel`` logger: a short
``LEVEL - message`` line on the console for the user, and a timestamped line
in a per-day file under ``log_dir`` for later inspection.
"""

import logging
from datetime import date
from pathlib import Path
from config import Config

LOGGER_NAME = "painel"

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
CONSOLE_FORMAT = "%(levelname)s - %(message)s"


def log_file_path(log_dir: Path, day: date = None) -> Path:
    """Log file for a given day, e.g. ``painel-2024-03-15.log``."""
    return log_dir / f"{LOGGER_NAME}-{(day or date.today()).isoformat()}.log"


def setup_logging(config: Config) -> logging.Logger:
    """Attach the file and console handlers to the painel logger.

    Safe to call more than once: previous handlers are closed and replaced.
    """
    config.log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(config.log_level)

    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    file_handler = logging.FileHandler(log_file_path(config.log_dir), encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))

    for handler in (file_handler, console_handler):
        handler.setLevel(config.log_level)
        logger.addHandler(handler)

    return logger


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)
