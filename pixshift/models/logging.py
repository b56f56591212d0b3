"""
Event log models for PixShift.

A log entry is one line of the append-only event log:
``<YYYY-MM-DD HH:MM:SS> - <message>``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
SEPARATOR = " - "


@dataclass(frozen=True)
class LogEntry:
    """Immutable record of a single phase transition."""

    message: str
    timestamp: datetime = field(
        default_factory=lambda: datetime.now().replace(microsecond=0)
    )

    def format(self) -> str:
        """Render the entry as a log line (without the trailing newline)."""

        return f"{self.timestamp.strftime(TIMESTAMP_FORMAT)}{SEPARATOR}{self.message}"

    @classmethod
    def parse(cls, line: str) -> "LogEntry":
        """Parse a log line back into an entry."""

        line = line.rstrip("\r\n")
        stamp, sep, message = line.partition(SEPARATOR)
        if not sep:
            raise ValueError(f"Malformed log line: {line!r}")
        try:
            timestamp = datetime.strptime(stamp, TIMESTAMP_FORMAT)
        except ValueError as e:
            raise ValueError(f"Malformed log timestamp: {stamp!r}") from e
        return cls(message=message, timestamp=timestamp)


__all__ = [
    "TIMESTAMP_FORMAT",
    "LogEntry",
]
