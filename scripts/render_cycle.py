"""Render a whole cycle (or part of one) as an animated GIF."""

from __future__ import annotations

import argparse
import logging

from holland.config import load_config
from holland.log import configure_logging
from holland.model.tunnels import Tunnels
from holland.rendering import build_frame_data, compose_frame, save_animation
from holland.rendering.frame_data import frame_minutes

_logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--config", default="config/config.yaml")
    parser.add_argument("--output", default="emulator_output/cycle.gif")
    parser.add_argument("--start", type=float, default=0.0)
    parser.add_argument("--end", type=float, default=None, help="defaults to one full period")
    parser.add_argument("--step", type=float, default=0.25, help="simulated minutes per frame")
    args = parser.parse_args()

    config = load_config(args.config)
    configure_logging(config.log)

    tunnels = Tunnels(config.tunnels)
    end = args.end if args.end is not None else args.start + tunnels.period
    minutes = frame_minutes(args.start, end, args.step)
    _logger.info("Rendering %d frames from minute %s to %s", len(minutes), args.start, end)

    frames = [compose_frame(build_frame_data(tunnels, minute), config.display) for minute in minutes]
    save_animation(frames, args.output, fps=config.display.fps)

    for direction in ("east", "west"):
        shares = tunnels.space_time_shares(direction)
        _logger.info(
            "%sbound shared lane: bikes %.1f%%, buffer %.1f%%, cars %.1f%%",
            direction,
            shares.bikes * 100,
            shares.buffer * 100,
            shares.cars * 100,
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
