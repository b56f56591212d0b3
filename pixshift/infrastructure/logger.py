"""
Diagnostic logger for PixShift.

This is the process log written to stderr. The timestamped event log of
phase transitions lives in `pixshift.services.event_log`.
"""

import logging
import sys


LOGGER_NAME = "PixShift"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logger(
    name: str = LOGGER_NAME,
    level: int = logging.INFO
) -> logging.Logger:
    """
    Create (or fetch) the named logger with a single stderr handler.

    Calling this repeatedly never stacks handlers.
    """
    _logger = logging.getLogger(name)
    if not _logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        _logger.addHandler(handler)
    _logger.setLevel(level)
    return _logger


logger = setup_logger()
