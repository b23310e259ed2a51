"""Frame output helpers: single PNG frames and animated cycles."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from PIL import Image

_logger = logging.getLogger(__name__)


def save_frame(image: Image.Image, path: str = "emulator_output/frame.png") -> None:
    """Save a frame to disk as a PNG image."""
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(output_path, format="PNG")
    _logger.debug("Saved frame to %s", output_path)


def save_animation(
    frames: Sequence[Image.Image],
    path: str = "emulator_output/cycle.gif",
    fps: int = 10,
) -> None:
    """Save frames as a looping GIF."""
    if not frames:
        raise ValueError("Animation requires at least one frame")
    if fps <= 0:
        raise ValueError(f"fps must be positive, got {fps}")
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    first, *rest = frames
    first.save(
        output_path,
        format="GIF",
        save_all=True,
        append_images=rest,
        duration=int(round(1000 / fps)),
        loop=0,
    )
    _logger.info("Saved %d-frame animation to %s", len(frames), output_path)


__all__ = ["save_animation", "save_frame"]
