"""
Infrastructure helpers for PixShift: diagnostic logging and error types.
"""

from .logger import logger, setup_logger
from .error_handler import (
    PixShiftError,
    DisplayToolError,
    ConfigurationError,
    handle_tool_error,
)

__all__ = [
    "logger",
    "setup_logger",
    "PixShiftError",
    "DisplayToolError",
    "ConfigurationError",
    "handle_tool_error",
]
