"""
Core data models API surface for PixShift.

This file re-exports model classes from domain-specific modules so callers
can write `from pixshift.models import X`.
"""

from .transform import (
    Phase,
    format_value,
    TransformMatrix,
    CycleStatistics,
)
from .logging import LogEntry, TIMESTAMP_FORMAT
from .config import CyclerConfig

__all__ = [
    # Transform models
    "Phase",
    "format_value",
    "TransformMatrix",
    "CycleStatistics",
    # Log models
    "LogEntry",
    "TIMESTAMP_FORMAT",
    # Config models
    "CyclerConfig",
]
