"""
Public interfaces for PixShift: the Python API and the command line.
"""

from .api import PixelShifter

__all__ = [
    "PixelShifter",
]
