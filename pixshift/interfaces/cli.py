"""
Command line interface for PixShift.

With no arguments it shifts DP-1 by (1, 1) every 20 seconds, logging to
./display_transform.log, until interrupted.
"""

from __future__ import annotations

import argparse
import asyncio
import signal
from pathlib import Path
from typing import List, Optional

from .api import PixelShifter
from ..models import CyclerConfig
from ..models.config import DEFAULT_LOG_PATH
from ..infrastructure.error_handler import PixShiftError

from pixshift.infrastructure.logger import logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pixshift",
        description="Periodically apply and reset a display transform matrix.",
    )
    parser.add_argument("--output", default="DP-1", help="display output to shift (default: DP-1)")
    parser.add_argument("--shift-x", type=float, default=1, help="X offset of the transform (default: 1)")
    parser.add_argument("--shift-y", type=float, default=1, help="Y offset of the transform (default: 1)")
    parser.add_argument(
        "--interval", type=float, default=20.0,
        help="seconds to hold each phase (default: 20)",
    )
    parser.add_argument(
        "--log-file", type=Path, default=DEFAULT_LOG_PATH,
        help=f"append-only event log (default: {DEFAULT_LOG_PATH})",
    )
    parser.add_argument("--tool", default="xrandr", help="display configuration tool (default: xrandr)")
    parser.add_argument("--strict", action="store_true", help="warn when the tool exits with an error")
    parser.add_argument(
        "--no-reset-on-exit", dest="reset_on_exit", action="store_false",
        help="leave the shift in place when stopped mid-phase",
    )
    parser.add_argument(
        "--full-reset", action="store_true",
        help="on stop, also reset the output to driver defaults (xrandr --auto)",
    )
    parser.add_argument("--cycles", type=int, help="stop after this many cycles")
    parser.add_argument("--once", action="store_true", help="shift once, hold, then reset and exit")
    parser.add_argument("--hold", type=float, default=2.0, help="hold time for --once (default: 2)")
    parser.add_argument(
        "--pixels", action="store_true",
        help="interpret shifts as pixels, normalized by the output resolution",
    )
    parser.add_argument("--list-outputs", action="store_true", help="list connected outputs and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def config_from_args(args: argparse.Namespace) -> CyclerConfig:
    return CyclerConfig(
        display_output=args.output,
        shift_x=args.shift_x,
        shift_y=args.shift_y,
        log_path=args.log_file,
        phase_duration=args.interval,
        tool=args.tool,
        strict=args.strict,
        reset_on_exit=args.reset_on_exit,
        full_reset=args.full_reset,
    )


def install_signal_handlers(shifter: PixelShifter) -> None:
    """Route SIGINT and SIGTERM to a clean stop of the running cycler."""

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, shifter.stop)
        except (NotImplementedError, RuntimeError):
            # Not supported on this platform's event loop
            logger.debug(f"Cannot install handler for {sig.name}")


async def _run(args: argparse.Namespace, shifter: PixelShifter) -> int:
    install_signal_handlers(shifter)

    if args.list_outputs:
        for name in await shifter.list_outputs(tool=args.tool):
            print(name)
        return 0

    config = config_from_args(args)
    if args.pixels:
        config = await shifter.resolve_pixel_shift(config)

    if shifter.stop_requested:
        logger.info("Stopped before cycling started")
        return 0
    if args.once:
        await shifter.shift_once(config, hold=args.hold)
    else:
        await shifter.start(config, max_cycles=args.cycles)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.cycles is not None and args.cycles < 0:
        parser.error("--cycles must not be negative")

    shifter = PixelShifter(verbose=args.verbose, strict=args.strict)
    try:
        return asyncio.run(_run(args, shifter))
    except PixShiftError as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
