"""Green (bikes only) and red (buffer) overlays on a bore's shared lane."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from holland.model.timeline import TimePoint, Timeline
from holland.model.types import EAST

if TYPE_CHECKING:
    from holland.model.tunnel import Tunnel

GREEN = "green"
RED = "red"


@dataclass(frozen=True)
class ZoneEdges:
    """Pixel x of the zone boundaries; ``red_end == green_end`` means no red zone yet."""

    green_start: float
    green_end: float
    red_end: float

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.green_start, self.green_end, self.red_end)


@dataclass(frozen=True)
class ColorRectangle:
    """Axis-aligned overlay in the bore's local pixel space."""

    direction: str
    color: str
    x: float
    y: float
    width: float
    height: float


class ColorZones:
    """Zone edges for one bore as a function of its relative minute.

    Three edges advance from the entrance, each clamped at the far end: the
    lead edge of the bike-only zone at car speed from minute 0, the Sweep from
    ``sweep_start_min`` and the Pace car from ``pace_start_min``. Between the
    Sweep and the Pace car the lane is a buffer closed to both bikes and cars.
    """

    def __init__(self, tunnel: Tunnel) -> None:
        config = tunnel.config
        width = config.lane_width_px
        self.direction = config.direction
        self.width = width
        self.sweep_start_min = config.sweep_start_min
        self.end_min = config.reopen_min
        self.lead = self._edge(0.0, tunnel.px_per_min(config.car_mph))
        self.sweep = self._edge(config.sweep_start_min, tunnel.px_per_min(tunnel.sweep_mph))
        self.pace = self._edge(config.pace_start_min, tunnel.px_per_min(tunnel.pace_mph))

    def _edge(self, start_min: float, px_per_min: float) -> Timeline[float]:
        return Timeline(
            [TimePoint(start_min, 0.0), TimePoint(start_min + self.width / px_per_min, self.width)]
        )

    def _x(self, progress: float) -> float:
        return progress if self.direction == EAST else self.width - progress

    def at(self, rel_min: float) -> ZoneEdges | None:
        """Zone edges at ``rel_min``, or None while the lane carries cars only."""
        if rel_min <= 0 or rel_min >= self.end_min:
            return None
        lead = self._x(self.lead.at(rel_min))
        sweep = self._x(self.sweep.at(rel_min))
        green_start = min(sweep, lead)
        green_end = max(sweep, lead)
        if rel_min < self.sweep_start_min:
            red_end = green_end
        else:
            red_end = self._x(self.pace.at(rel_min))
        return ZoneEdges(green_start, green_end, red_end)


def zone_rectangles(edges: ZoneEdges | None, direction: str, y: float, height: float) -> list[ColorRectangle]:
    """Green rectangle first, then red; zero-width rectangles are dropped."""
    if edges is None:
        return []
    spans = [(GREEN, edges.green_start, edges.green_end)]
    if edges.red_end < edges.green_start:
        spans.append((RED, edges.red_end, edges.green_start))
    elif edges.red_end > edges.green_end:
        spans.append((RED, edges.green_end, edges.red_end))
    return [
        ColorRectangle(direction, color, start, y, end - start, height)
        for color, start, end in spans
        if end - start > 0
    ]


__all__ = ["ColorRectangle", "ColorZones", "GREEN", "RED", "ZoneEdges", "zone_rectangles"]
