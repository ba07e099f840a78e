"""Logging setup for command-line entry points."""

import logging
from typing import Optional

from config.constants import LOG_FORMAT


def configure_logging(level: int = logging.INFO, filename: Optional[str] = None) -> None:
    """Configure the root logger once per process.

    Args:
        level: Root log level
        filename: Log file (if None, logs go to stderr)
    """
    logging.basicConfig(
        filename=filename,
        level=level,
        format=LOG_FORMAT,
    )
    # Retry and connection chatter from urllib3 is only useful when debugging
    if level > logging.DEBUG:
        logging.getLogger("urllib3").setLevel(logging.WARNING)
