"""
Service layer for PixShift.
"""

from .display import DisplayService, CommandResult
from .event_log import EventLog

__all__ = [
    "DisplayService",
    "CommandResult",
    "EventLog",
]
