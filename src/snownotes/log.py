"""
Logging setup for snownotes.

Modules log through logging.getLogger(__name__); entry points call
setup_logging() before doing any work.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class StderrHandler(logging.StreamHandler):
    """Stream handler bound to whatever sys.stderr is when a record is written."""

    def __init__(self, level: int = logging.NOTSET):
        logging.Handler.__init__(self, level)

    @property
    def stream(self):
        return sys.stderr


def setup_logging(level: str | int = "WARNING") -> logging.Logger:
    """Configure the snownotes logger hierarchy to write to stderr."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    logger = logging.getLogger("snownotes")
    logger.setLevel(level)

    if not logger.handlers:
        handler = StderrHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger
