"""Logging configuration for the portal."""

import logging
import sys

from portal.core.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Third-party loggers that echo full request URLs (and with them API keys).
_QUIET_LOGGERS = ("httpx", "httpcore")


def setup_logging() -> None:
    """Configure process-wide logging to stdout.

    Level is DEBUG when settings.debug is True, otherwise INFO. HTTP client
    loggers stay at WARNING because identity provider URLs carry the API key.
    """
    settings = get_settings()
    log_level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name (usually ``__name__``)."""
    return logging.getLogger(name)
