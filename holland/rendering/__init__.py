"""Rendering utilities for tunnel schedule previews."""

from holland.rendering.composer import compose_frame
from holland.rendering.emulator import save_animation, save_frame
from holland.rendering.frame_data import FrameData, build_frame_data

__all__ = ["FrameData", "build_frame_data", "compose_frame", "save_animation", "save_frame"]
