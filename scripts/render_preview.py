"""Render a preview frame of both bores at one minute of the cycle."""

from __future__ import annotations

import argparse
import logging

from holland.config import load_config
from holland.log import configure_logging
from holland.model.tunnels import Tunnels
from holland.rendering import build_frame_data, compose_frame, save_frame

_logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("minute", nargs="?", type=float, default=50.0)
    parser.add_argument("--config", default="config/config.yaml")
    parser.add_argument("--output", default="emulator_output/frame.png")
    args = parser.parse_args()

    config = load_config(args.config)
    configure_logging(config.log)

    tunnels = Tunnels(config.tunnels)
    data = build_frame_data(tunnels, args.minute)
    frame = compose_frame(data, config.display)
    save_frame(frame, args.output)
    _logger.info(
        "Rendered minute %s (east %s, west %s, %d vehicles) to %s",
        args.minute,
        data.phases.east,
        data.phases.west,
        len(data.vehicles),
        args.output,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
