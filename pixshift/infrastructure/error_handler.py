"""
Error types and error translation helpers for PixShift.

Cycling never raises on a failed tool invocation. These errors are for the
paths that need an answer from the tool (output listing, resolution lookup)
and for invalid configuration.
"""

import functools
from typing import Any, Awaitable, Callable, Optional, TypeVar

from .logger import logger


T = TypeVar("T")


class PixShiftError(Exception):
    """Base exception for PixShift errors."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.message = message
        self.original_error = original_error
        super().__init__(message)

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message} (Original: {self.original_error})"
        return self.message


class DisplayToolError(PixShiftError):
    """The display tool could not be run or reported a failure."""


class ConfigurationError(PixShiftError, ValueError):
    """Invalid cycler configuration."""


def handle_tool_error(
    func: Callable[..., Awaitable[T]]
) -> Callable[..., Awaitable[T]]:
    """
    Decorator translating launch failures of the display tool into
    `DisplayToolError`.

    `PixShiftError` raised inside the wrapped coroutine passes through
    untouched.
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return await func(*args, **kwargs)
        except PixShiftError:
            raise
        except OSError as e:
            logger.error(f"Display tool failed in {func.__name__}: {e}")
            raise DisplayToolError("Could not run display tool", e) from e

    return wrapper


__all__ = [
    "PixShiftError",
    "DisplayToolError",
    "ConfigurationError",
    "handle_tool_error",
]
