"""
Python API for PixShift.

Example:
    >>> shifter = PixelShifter(verbose=True)
    >>> config = CyclerConfig(display_output="HDMI-1", phase_duration=60)
    >>> asyncio.run(shifter.start(config))
"""

import logging
from dataclasses import replace
from typing import List, Optional

from ..core import TransformCycler
from ..models import CyclerConfig, CycleStatistics, TransformMatrix
from ..services import DisplayService
from ..infrastructure.error_handler import DisplayToolError

from pixshift.infrastructure.logger import logger


FRAMEBUFFER_MARGIN = 2


class PixelShifter:
    """
    High-level entry point wrapping the cycler and display service.

    Holds at most one active cycler, which `stop()` cancels.
    """

    def __init__(self, verbose: bool = False, strict: bool = False):
        self.verbose = verbose
        self.strict = strict
        self.cycler: Optional[TransformCycler] = None
        self._stop_requested = False
        self._apply_verbosity()

    @property
    def stop_requested(self) -> bool:
        return self._stop_requested

    def _apply_verbosity(self) -> None:
        if self.verbose:
            logger.setLevel(logging.DEBUG)
            logger.debug("Verbose logging enabled")
        else:
            logger.setLevel(logging.INFO)

    def set_verbose(self, verbose: bool) -> None:
        """Enable or disable debug output."""

        self.verbose = verbose
        self._apply_verbosity()

    def create_cycler(self, config: CyclerConfig) -> TransformCycler:
        """Build a cycler for ``config``, honouring this API's strict flag."""

        if self.strict and not config.strict:
            config = replace(config, strict=True)
        self.cycler = TransformCycler(config)
        if self._stop_requested:
            self.cycler.cancel()
            self._stop_requested = False
        return self.cycler

    async def start(
        self,
        config: CyclerConfig,
        max_cycles: Optional[int] = None
    ) -> CycleStatistics:
        """Run the apply/reset cycle until `stop()` is called."""

        cycler = self.create_cycler(config)
        return await cycler.run(max_cycles=max_cycles)

    async def shift_once(self, config: CyclerConfig, hold: float = 2.0) -> CycleStatistics:
        """Apply the shift once, hold it ``hold`` seconds, then reset."""

        cycler = self.create_cycler(config)
        return await cycler.shift_once(hold=hold)

    def stop(self) -> bool:
        """
        Stop the active cycler.

        A stop requested while no cycler is running is remembered and applied
        to the next one `create_cycler` builds.

        Returns:
            True if a running cycler was signalled
        """
        if self.cycler is not None and self.cycler.is_running:
            return self.cycler.cancel()

        self._stop_requested = True
        logger.info("Stop requested before a cycler was started")
        return False

    async def list_outputs(self, tool: str = "xrandr") -> List[str]:
        """Connected outputs as reported by the display tool."""

        return await DisplayService(tool=tool).list_connected_outputs()

    async def resolve_pixel_shift(self, config: CyclerConfig) -> CyclerConfig:
        """
        Treat ``config``'s shifts as pixels and convert them to matrix units.

        Raises:
            DisplayToolError: If the output's resolution cannot be determined
        """
        service = DisplayService(tool=config.tool)
        resolution = await service.get_resolution(config.display_output)
        if resolution is None:
            raise DisplayToolError(
                f"Could not detect resolution for {config.display_output}"
            )

        width, height = resolution
        matrix = TransformMatrix.from_pixel_shift(
            config.shift_x, config.shift_y, width, height
        )
        logger.debug(
            f"{config.display_output} is {width}x{height}; "
            f"pixel shift {config.shift_x:g},{config.shift_y:g} -> {matrix}"
        )
        _, _, shift_x, _, _, shift_y, _, _, _ = matrix.values
        # Keep the signal mode fixed and the framebuffer 2px larger while shifting
        return replace(
            config,
            shift_x=shift_x,
            shift_y=shift_y,
            mode=f"{width}x{height}",
            framebuffer=f"{width + FRAMEBUFFER_MARGIN}x{height + FRAMEBUFFER_MARGIN}",
        )
