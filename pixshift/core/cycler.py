"""
Cycler driving the apply/reset loop of the display transform
with cancellation and event logging.
"""

import asyncio
from datetime import datetime
from typing import Optional

from ..models import CyclerConfig, CycleStatistics, Phase, format_value
from ..services import DisplayService, EventLog

from pixshift.infrastructure.logger import logger


START_MESSAGE = "Script started."
RESET_MESSAGE = "Resetting transformation to default."
STOP_MESSAGE = "Script stopped."


def apply_message(config: CyclerConfig) -> str:
    return (
        f"Applying transformation: SHIFT_X={format_value(config.shift_x)}, "
        f"SHIFT_Y={format_value(config.shift_y)}"
    )


####
##      TRANSFORM CYCLER
#####
class TransformCycler:
    """
    Alternates an output between the shift matrix and the identity matrix,
    holding each for ``phase_duration`` seconds and logging every transition.

    The logged message records intent: it is written before the tool runs
    and regardless of whether the tool succeeds.
    """

    def __init__(
        self,
        config: CyclerConfig,
        display_service: Optional[DisplayService] = None,
        event_log: Optional[EventLog] = None
    ):
        self.config = config
        self.display_service = display_service or DisplayService(
            tool=config.tool, strict=config.strict
        )
        self.event_log = event_log or EventLog(config.log_path)

        self._phase = Phase.RESET
        self._is_running = False
        self._cancellation_event = asyncio.Event()
        self.statistics = CycleStatistics()

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def is_running(self) -> bool:
        return self._is_running

    def log(self, message: str) -> None:
        """Append a timestamped line to the event log."""

        self.event_log.write(message)

    async def apply_transform(self) -> Optional[int]:
        """Set the shift matrix on the configured output."""

        returncode = await self.display_service.set_transform(
            self.config.display_output, self.config.apply_matrix,
            mode=self.config.mode, fb=self.config.framebuffer
        )
        self._record(returncode)
        self.statistics.apply_count += 1
        self._phase = Phase.APPLIED
        return returncode

    async def reset_transform(self) -> Optional[int]:
        """Set the identity matrix on the configured output."""

        returncode = await self.display_service.set_transform(
            self.config.display_output, self.config.reset_matrix,
            mode=self.config.mode, fb=self.config.framebuffer
        )
        self._record(returncode)
        self.statistics.reset_count += 1
        self._phase = Phase.RESET
        return returncode

    def _record(self, returncode: Optional[int]) -> None:
        if returncode != 0:
            self.statistics.command_failures += 1

    async def _hold(self, seconds: float) -> bool:
        """
        Wait ``seconds`` or until cancelled.

        Returns:
            True if cancellation was requested
        """
        try:
            await asyncio.wait_for(self._cancellation_event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return False
        return True

    async def run(self, max_cycles: Optional[int] = None) -> CycleStatistics:
        """
        Run the apply/reset cycle until cancelled.

        Args:
            max_cycles: Stop after this many completed cycles (None for no limit)

        Returns:
            Statistics for the run
        """
        if self._is_running:
            raise RuntimeError("Transform cycler is already running")
        if max_cycles is not None and max_cycles < 0:
            raise ValueError("max_cycles must not be negative")

        self._is_running = True
        self.statistics = CycleStatistics(start_time=datetime.now())
        logger.info(
            f"Cycling {self.config.display_output} every "
            f"{self.config.phase_duration:g}s (matrix {self.config.apply_matrix})"
        )
        self.log(START_MESSAGE)

        try:
            while not self._cancellation_event.is_set():
                if max_cycles is not None and self.statistics.completed_cycles >= max_cycles:
                    break

                self.log(apply_message(self.config))
                await self.apply_transform()
                if await self._hold(self.config.phase_duration):
                    break

                self.log(RESET_MESSAGE)
                await self.reset_transform()
                self.statistics.completed_cycles += 1
                if await self._hold(self.config.phase_duration):
                    break
        finally:
            await self._shutdown()

        return self.statistics

    async def shift_once(self, hold: float = 2.0) -> CycleStatistics:
        """Apply the shift a single time, hold it, then reset."""

        if self._is_running:
            raise RuntimeError("Transform cycler is already running")

        self._is_running = True
        self.statistics = CycleStatistics(start_time=datetime.now())
        try:
            self.log(apply_message(self.config))
            await self.apply_transform()
            await self._hold(hold)
            self.log(RESET_MESSAGE)
            await self.reset_transform()
            self.statistics.completed_cycles += 1
        finally:
            self.statistics.end_time = datetime.now()
            self._is_running = False
        return self.statistics

    async def _shutdown(self) -> None:
        if self._phase is Phase.APPLIED and self.config.reset_on_exit:
            logger.info(f"Restoring identity transform on {self.config.display_output}")
            self.log(RESET_MESSAGE)
            await self.reset_transform()
            self.statistics.completed_cycles += 1

        if self.config.full_reset:
            logger.info(f"Resetting {self.config.display_output} to driver defaults")
            self._record(
                await self.display_service.reset_display(self.config.display_output)
            )

        self.log(STOP_MESSAGE)
        self.statistics.end_time = datetime.now()
        self._is_running = False
        logger.info(
            f"Stopped after {self.statistics.completed_cycles} cycles "
            f"({self.statistics.command_failures} failed commands)"
        )

    def cancel(self) -> bool:
        """
        Request the cycle to stop.

        A request made before `run` starts is kept: the next `run` logs its
        start and stop lines without applying anything. `reset_state` clears it.

        Returns:
            True if a running cycle was signalled, False if nothing was running yet
        """
        self._cancellation_event.set()
        if not self._is_running:
            logger.info("Cancellation requested before cycle start")
            return False

        logger.info("Cycle cancelled")
        return True

    def reset_state(self) -> None:
        """Clear cancellation so the cycler can be run again."""

        self._cancellation_event.clear()
        self._phase = Phase.RESET
