"""
Tests for the pixshift command line.
"""

import asyncio
import os
import signal
import sys

import pytest
from pathlib import Path
from unittest.mock import AsyncMock, patch

from pixshift.interfaces import cli
from pixshift.models import CyclerConfig, TransformMatrix
from pixshift.infrastructure.error_handler import DisplayToolError


def test_defaults_reproduce_classic_behaviour():
    args = cli.build_parser().parse_args([])
    config = cli.config_from_args(args)

    assert config == CyclerConfig()
    assert config.apply_matrix.to_argument() == "1,0,1,0,1,1,0,0,1"
    assert config.reset_matrix.to_argument() == "1,0,0,0,1,0,0,0,1"
    assert args.cycles is None
    assert not args.once


def test_flags_map_onto_config():
    args = cli.build_parser().parse_args([
        "--output", "HDMI-1",
        "--shift-x", "3",
        "--shift-y", "-2",
        "--interval", "60",
        "--log-file", "/tmp/pix.log",
        "--tool", "/opt/xrandr",
        "--strict",
        "--no-reset-on-exit",
    ])
    config = cli.config_from_args(args)

    assert config.display_output == "HDMI-1"
    assert config.shift_x == 3
    assert config.shift_y == -2
    assert config.phase_duration == 60
    assert config.log_path == Path("/tmp/pix.log")
    assert config.tool == "/opt/xrandr"
    assert config.strict is True
    assert config.reset_on_exit is False


def test_main_runs_cycles(tmp_path):
    log_file = tmp_path / "pix.log"
    with patch.object(cli.PixelShifter, "start", new_callable=AsyncMock) as mock_start:
        rc = cli.main(["--cycles", "2", "--log-file", str(log_file)])

    assert rc == 0
    config = mock_start.await_args.args[0]
    assert config.log_path == log_file
    assert mock_start.await_args.kwargs["max_cycles"] == 2


def test_main_once(tmp_path):
    with patch.object(cli.PixelShifter, "shift_once", new_callable=AsyncMock) as mock_once, \
         patch.object(cli.PixelShifter, "start", new_callable=AsyncMock) as mock_start:
        rc = cli.main(["--once", "--hold", "5", "--log-file", str(tmp_path / "pix.log")])

    assert rc == 0
    assert mock_once.await_args.kwargs["hold"] == 5
    mock_start.assert_not_awaited()


def test_main_list_outputs(capsys):
    with patch.object(
        cli.PixelShifter, "list_outputs", new_callable=AsyncMock, return_value=["eDP-1", "DP-1"]
    ):
        rc = cli.main(["--list-outputs"])

    assert rc == 0
    assert capsys.readouterr().out.splitlines() == ["eDP-1", "DP-1"]


def test_main_pixels_resolves_before_start(tmp_path):
    resolved = CyclerConfig(shift_x=0.001, shift_y=0.001, log_path=tmp_path / "pix.log")
    with patch.object(
        cli.PixelShifter, "resolve_pixel_shift", new_callable=AsyncMock, return_value=resolved
    ), patch.object(cli.PixelShifter, "start", new_callable=AsyncMock) as mock_start:
        rc = cli.main(["--pixels", "--cycles", "1"])

    assert rc == 0
    assert mock_start.await_args.args[0] is resolved


def test_main_reports_tool_errors():
    with patch.object(
        cli.PixelShifter, "list_outputs", new_callable=AsyncMock,
        side_effect=DisplayToolError("Could not run display tool"),
    ), patch("pixshift.interfaces.cli.logger") as mock_logger:
        rc = cli.main(["--list-outputs"])

    assert rc == 1
    mock_logger.error.assert_called_once_with("Could not run display tool")


def test_main_rejects_invalid_interval():
    with patch("pixshift.interfaces.cli.logger") as mock_logger:
        rc = cli.main(["--interval", "0", "--cycles", "1"])
    assert rc == 1
    mock_logger.error.assert_called_once()


def test_main_rejects_negative_cycles():
    with pytest.raises(SystemExit) as info:
        cli.main(["--cycles", "-1"])
    assert info.value.code == 2


def test_full_reset_flag():
    assert cli.config_from_args(cli.build_parser().parse_args([])).full_reset is False
    args = cli.build_parser().parse_args(["--full-reset"])
    assert cli.config_from_args(args).full_reset is True


# ---- Signal handling -------------------------------------------------------

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="needs POSIX signals")


@posix_only
def test_sigterm_stops_cycle_cleanly(tmp_path):
    log_file = tmp_path / "display_transform.log"

    async def send_sigterm_on_apply(output, matrix, **kwargs):
        if not matrix.is_identity:
            os.kill(os.getpid(), signal.SIGTERM)
        return 0

    with patch(
        "pixshift.services.display.DisplayService.set_transform",
        new_callable=AsyncMock, side_effect=send_sigterm_on_apply,
    ) as mock_set:
        rc = cli.main(["--interval", "30", "--log-file", str(log_file)])

    assert rc == 0
    assert mock_set.await_count == 2
    assert mock_set.await_args.args[1] == TransformMatrix.identity()

    raw = log_file.read_bytes()
    assert raw.endswith(b"\n")
    lines = raw.decode("utf-8").splitlines()
    assert [line.split(" - ", 1)[1] for line in lines] == [
        "Script started.",
        "Applying transformation: SHIFT_X=1, SHIFT_Y=1",
        "Resetting transformation to default.",
        "Script stopped.",
    ]


@posix_only
def test_sigint_during_output_listing_exits_cleanly():
    async def interrupted_listing(*args, **kwargs):
        os.kill(os.getpid(), signal.SIGINT)
        await asyncio.sleep(0.05)
        return ["DP-1"]

    with patch.object(
        cli.PixelShifter, "list_outputs", new_callable=AsyncMock, side_effect=interrupted_listing
    ):
        rc = cli.main(["--list-outputs"])

    assert rc == 0


@posix_only
def test_sigterm_during_resolution_skips_cycling(tmp_path):
    resolved = CyclerConfig(log_path=tmp_path / "pix.log")

    async def interrupted_resolution(config):
        os.kill(os.getpid(), signal.SIGTERM)
        await asyncio.sleep(0.05)
        return resolved

    with patch.object(
        cli.PixelShifter, "resolve_pixel_shift",
        new_callable=AsyncMock, side_effect=interrupted_resolution,
    ), patch.object(cli.PixelShifter, "start", new_callable=AsyncMock) as mock_start:
        rc = cli.main(["--pixels"])

    assert rc == 0
    mock_start.assert_not_awaited()
