"""Logging configuration for the API server.

Level comes from ``Settings.LOG_LEVEL``; unknown names fall back to INFO.
"""

import logging
import sys

from parcelhub.core.config import settings

HANDLER_NAME = "parcelhub.console"

LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def get_log_level(level_name: str | None = None) -> int:
    """Resolve a level name to a logging constant (default: INFO)."""
    name = (level_name or settings.LOG_LEVEL).upper()
    return LOG_LEVEL_MAP.get(name, logging.INFO)


def setup_logging(level_name: str | None = None) -> None:
    """Configure the root logger to write to stdout.

    Safe to call more than once: existing stdout handlers installed by a
    previous call are replaced rather than duplicated.
    """
    formatter = logging.Formatter(
        fmt="[%(asctime)s] %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(get_log_level(level_name))

    for handler in list(root_logger.handlers):
        if handler.get_name() == HANDLER_NAME:
            root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.set_name(HANDLER_NAME)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Keep SQL echo out of the application log unless explicitly wanted
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
