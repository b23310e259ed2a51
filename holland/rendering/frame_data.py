"""Data structures for rendering frames."""

from __future__ import annotations

from dataclasses import dataclass
import math

from holland.model.timeline import require_finite, wrap
from holland.model.tunnels import TunnelPhases, Tunnels
from holland.model.vehicles import VehicleView
from holland.model.zones import ColorRectangle


@dataclass(frozen=True)
class FrameData:
    """Everything the composer draws for one minute of the cycle."""

    minute: float
    vehicles: list[VehicleView]
    rectangles: list[ColorRectangle]
    phases: TunnelPhases
    lane_width_px: float
    lane_height_px: float
    bore_y: dict[str, float]  # lane-space y of each bore's top lane edge


def clock_label(abs_min: float, period: float = 60) -> str:
    """``MM:SS`` within the cycle."""
    minute = wrap(abs_min, period)
    whole = math.floor(minute)
    seconds = min(int(round((minute - whole) * 60)), 59)
    return f"{whole:02d}:{seconds:02d}"


def frame_minutes(start: float, end: float, step: float) -> list[float]:
    """Minutes ``start, start + step, ...`` strictly before ``end``."""
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")
    if end <= start:
        raise ValueError(f"end ({end}) must be after start ({start})")
    count = math.ceil((end - start) / step)
    return [start + idx * step for idx in range(count)]


def build_frame_data(tunnels: Tunnels, abs_min: float) -> FrameData:
    require_finite(abs_min)
    config = tunnels.config
    return FrameData(
        minute=abs_min,
        vehicles=tunnels.get_all_vehicles(abs_min),
        rectangles=tunnels.get_color_rectangles(abs_min),
        phases=tunnels.get_phases(abs_min),
        lane_width_px=config.eb.lane_width_px,
        lane_height_px=config.eb.lane_height_px,
        bore_y={config.eb.direction: config.eb.y, config.wb.direction: config.wb.y},
    )


__all__ = ["FrameData", "build_frame_data", "clock_label", "frame_minutes"]
