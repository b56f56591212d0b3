"""
Append-only event log of phase transitions.
"""

from pathlib import Path
from typing import List, Union

from ..models import LogEntry
from ..infrastructure.logger import logger


class EventLog:
    """
    Writes one timestamped line per event to a UTF-8 text file.

    The file is opened in append mode for every write, and each line goes
    out in a single write followed by a flush, so an interrupted process
    leaves at most complete lines behind.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def write(self, message: str) -> LogEntry:
        """
        Append ``message`` to the log.

        Write failures are reported as warnings and otherwise ignored.
        """
        entry = LogEntry(message=message)
        line = entry.format() + "\n"
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(line)
                f.flush()
        except OSError as e:
            logger.warning(f"Could not write to event log {self.path}: {e}")
        else:
            logger.debug(f"Logged: {entry.format()}")
        return entry

    def read_entries(self) -> List[LogEntry]:
        """Parse every well-formed line of the log; a missing log is empty."""

        if not self.path.exists():
            return []
        entries = []
        with self.path.open("r", encoding="utf-8", errors="replace") as f:
            for line in f:
                try:
                    entries.append(LogEntry.parse(line))
                except ValueError:
                    logger.debug(f"Skipping malformed log line: {line!r}")
        return entries


__all__ = [
    "EventLog",
]
