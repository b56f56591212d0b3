"""
Service wrapping the external display-configuration tool (xrandr).
"""

import asyncio
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..models import TransformMatrix
from ..infrastructure.logger import logger
from ..infrastructure.error_handler import DisplayToolError, handle_tool_error


_GEOMETRY_RE = re.compile(r"^(\d+)x(\d+)\+\d+\+\d+$")
_MODE_RE = re.compile(r"^(\d+)x(\d+)")


@dataclass
class CommandResult:
    """Outcome of one tool invocation."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class DisplayService:
    """
    Runs the display tool as an asyncio subprocess.

    `set_transform` is fire-and-forget: it reports what happened through the
    logger and its return value, but never raises. The query methods raise
    `DisplayToolError` since their callers cannot proceed without output.
    """

    def __init__(self, tool: str = "xrandr", strict: bool = False):
        self.tool = tool
        self.strict = strict

    async def _run(self, args: Sequence[str]) -> CommandResult:
        logger.debug(f"Running: {self.tool} {' '.join(args)}")
        process = await asyncio.create_subprocess_exec(
            self.tool, *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE
        )
        stdout, stderr = await process.communicate()
        return CommandResult(
            returncode=process.returncode,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace")
        )

    async def _fire(self, output: str, args: Sequence[str], action: str) -> Optional[int]:
        """Run a state-changing command; failures are logged, never raised."""

        try:
            result = await self._run(args)
        except OSError as e:
            logger.warning(f"Failed to execute {self.tool} for {output}: {e}")
            return None

        if not result.ok:
            detail = result.stderr.strip() or f"exit code {result.returncode}"
            if self.strict:
                logger.warning(f"{self.tool} failed to {action} on {output}: {detail}")
            else:
                logger.debug(f"{self.tool} exited with {result.returncode}: {detail}")
        return result.returncode

    async def set_transform(
        self,
        output: str,
        matrix: TransformMatrix,
        mode: Optional[str] = None,
        fb: Optional[str] = None
    ) -> Optional[int]:
        """
        Ask the tool to set ``output``'s transform matrix.

        Args:
            output: Output name, e.g. ``DP-1``
            matrix: Transform to apply
            mode: Pin the output mode (``WxH``) so the signal stays constant
            fb: Framebuffer size (``WxH``) to keep while transforming

        Returns:
            The tool's exit code, or None if it could not be launched
        """
        args = ["--output", output]
        if mode:
            args += ["--mode", mode]
        if fb:
            args += ["--fb", fb]
        args += ["--transform", matrix.to_argument()]
        return await self._fire(output, args, f"set transform {matrix}")

    async def reset_display(self, output: str) -> Optional[int]:
        """Return ``output`` to the driver defaults with ``--auto``."""

        return await self._fire(output, ["--output", output, "--auto"], "reset display")

    @handle_tool_error
    async def _query(self, args: Sequence[str]) -> str:
        result = await self._run(args)
        if not result.ok:
            detail = result.stderr.strip() or f"exit code {result.returncode}"
            raise DisplayToolError(f"{self.tool} {' '.join(args)} failed: {detail}")
        return result.stdout

    async def list_connected_outputs(self) -> List[str]:
        """Names of every output the tool reports as connected."""

        text = await self._query(["--query"])
        return parse_connected_outputs(text)

    async def get_resolution(self, output: str) -> Optional[Tuple[int, int]]:
        """Current ``(width, height)`` of ``output``, or None if unknown."""

        text = await self._query(["--current"])
        return parse_resolution(text, output)


def parse_connected_outputs(text: str) -> List[str]:
    """Extract connected output names from tool query output."""

    outputs = []
    for line in text.splitlines():
        if " connected" in line:
            parts = line.split()
            if parts:
                outputs.append(parts[0])
    return outputs


def parse_resolution(text: str, output: str) -> Optional[Tuple[int, int]]:
    """
    Find the active resolution of ``output``.

    The output's ``connected`` line normally carries ``WxH+X+Y``. When it
    does not, the first mode line flagged with ``*`` is used instead.
    """
    for line in text.splitlines():
        parts = line.split()
        if len(parts) < 2 or parts[0] != output or parts[1] != "connected":
            continue
        for part in parts[2:]:
            match = _GEOMETRY_RE.match(part)
            if match:
                return int(match.group(1)), int(match.group(2))

    for line in text.splitlines():
        if "*" not in line:
            continue
        for part in line.split():
            match = _MODE_RE.match(part)
            if match:
                return int(match.group(1)), int(match.group(2))

    return None


__all__ = [
    "CommandResult",
    "DisplayService",
    "parse_connected_outputs",
    "parse_resolution",
]
