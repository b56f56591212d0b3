"""
Core cycling logic for PixShift.
"""

from .cycler import TransformCycler

__all__ = [
    "TransformCycler",
]
