"""
Logging configuration for the application.
"""
import logging
import sys

from jobhunt.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str | None = None) -> logging.Logger:
    """Configure root logging once. Returns the application logger."""
    level_val = level or settings.LOG_LEVEL
    logging.basicConfig(
        level=getattr(logging, level_val.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    return logging.getLogger("jobhunt")
