"""
PixShift - periodically shift a display output's transform matrix.
"""

from .core import TransformCycler
from .interfaces.api import PixelShifter
from .models import CyclerConfig, TransformMatrix, Phase, LogEntry

__version__ = "0.1.0"

__all__ = [
    "PixelShifter",
    "TransformCycler",
    "CyclerConfig",
    "TransformMatrix",
    "Phase",
    "LogEntry",
]
