"""
Configuration models for PixShift.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .transform import TransformMatrix
from ..infrastructure.error_handler import ConfigurationError


DEFAULT_LOG_PATH = Path("./display_transform.log")


@dataclass(frozen=True)
class CyclerConfig:
    """
    Immutable configuration for the transform cycler.

    Built once at startup and handed to the cycler. The defaults reproduce
    the classic behaviour: shift DP-1 by one unit every 20 seconds.
    """

    display_output: str = "DP-1"
    shift_x: float = 1
    shift_y: float = 1
    log_path: Path = field(default=DEFAULT_LOG_PATH)
    phase_duration: float = 20.0  # Seconds held after each phase

    # Tool settings
    tool: str = "xrandr"
    strict: bool = False  # Warn when the tool exits non-zero

    # Pinned mode and framebuffer ("WxH"), sent along with every transform
    mode: Optional[str] = None
    framebuffer: Optional[str] = None

    # Shutdown behaviour
    reset_on_exit: bool = True
    full_reset: bool = False  # Finish with `--auto` on the output

    def __post_init__(self) -> None:
        if not self.display_output:
            raise ConfigurationError("display_output must not be empty")
        if not math.isfinite(self.phase_duration) or self.phase_duration <= 0:
            raise ConfigurationError(
                f"phase_duration must be a positive number, got {self.phase_duration}"
            )
        for name in ("shift_x", "shift_y"):
            if not math.isfinite(getattr(self, name)):
                raise ConfigurationError(
                    f"{name} must be a finite number, got {getattr(self, name)}"
                )
        if not self.tool:
            raise ConfigurationError("tool must not be empty")
        # Accept plain strings for convenience
        object.__setattr__(self, "log_path", Path(self.log_path))

    @property
    def apply_matrix(self) -> TransformMatrix:
        return TransformMatrix.shift(self.shift_x, self.shift_y)

    @property
    def reset_matrix(self) -> TransformMatrix:
        return TransformMatrix.identity()


__all__ = [
    "DEFAULT_LOG_PATH",
    "CyclerConfig",
]
