"""
Transform domain models for PixShift.

This module contains the transform matrix handed to the display tool, the
two cycle phases and the statistics gathered while cycling.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from ..infrastructure.logger import logger


class Phase(Enum):
    """The two alternating states of the cycle."""

    RESET = "reset"         # Identity matrix in effect
    APPLIED = "applied"     # Shift matrix in effect


def format_value(value: float) -> str:
    """
    Render one matrix value the way the display tool receives it.

    Integral values lose the decimal point. Everything else is written with
    six decimals, so magnitudes below 5e-7 come out as zero.
    """
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.6f}"


@dataclass(frozen=True)
class TransformMatrix:
    """Immutable 3x3 affine transform, stored row-major."""

    values: Tuple[float, ...]

    def __post_init__(self) -> None:
        if len(self.values) != 9:
            raise ValueError(
                f"Transform matrix needs 9 values, got {len(self.values)}"
            )

    @classmethod
    def identity(cls) -> "TransformMatrix":
        return cls((1, 0, 0, 0, 1, 0, 0, 0, 1))

    @classmethod
    def shift(cls, x: float, y: float) -> "TransformMatrix":
        """Matrix translating the output by ``x`` and ``y``."""

        return cls((1, 0, x, 0, 1, y, 0, 0, 1))

    @classmethod
    def from_pixel_shift(
        cls,
        px_x: float,
        px_y: float,
        width: int,
        height: int
    ) -> "TransformMatrix":
        """
        Build a shift matrix from a pixel offset.

        The offset is normalized by the output resolution, so a one pixel
        shift on a 1920x1080 output yields ``1/1920`` and ``1/1080``.
        Offsets that normalize below the six-decimal precision of
        `format_value` are sent as zero; a warning is logged for them.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid resolution: {width}x{height}")

        x, y = px_x / width, px_y / height
        for pixels, value in ((px_x, x), (px_y, y)):
            if pixels and round(value, 6) == 0:
                logger.warning(
                    f"Pixel shift {pixels:g} on {width}x{height} rounds to 0; "
                    "the transform will not move the output"
                )
        return cls.shift(x, y)

    @property
    def rows(self) -> Tuple[Tuple[float, ...], ...]:
        return (self.values[0:3], self.values[3:6], self.values[6:9])

    @property
    def is_identity(self) -> bool:
        return self == TransformMatrix.identity()

    def to_argument(self) -> str:
        """Flatten into the ``a,b,c,d,e,f,g,h,i`` form used by ``--transform``."""

        return ",".join(format_value(v) for v in self.values)

    def __str__(self) -> str:
        return self.to_argument()


@dataclass
class CycleStatistics:
    """Counters collected while the cycler runs."""

    completed_cycles: int = 0
    apply_count: int = 0
    reset_count: int = 0
    command_failures: int = 0
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @property
    def duration_seconds(self) -> float:
        """Get total duration in seconds."""

        if self.start_time and self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return 0.0


__all__ = [
    "Phase",
    "format_value",
    "TransformMatrix",
    "CycleStatistics",
]
