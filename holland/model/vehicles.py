"""Cars, bikes and escorts as keyframed paths over the shared Timeline engine."""

from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import Any

from holland.model.timeline import Interp, TimePoint, Timeline, require_finite, wrap
from holland.model.types import (
    BIKE,
    CAR,
    DEQUEUEING,
    EXITING,
    KINDS,
    ORIGIN,
    QUEUED,
    TRANSITING,
    XY,
    Pos,
    direction_sign,
    lerp_pos,
)


@dataclass(frozen=True)
class VehicleView:
    """A visible vehicle at one query time, as handed to renderers."""

    id: str
    kind: str
    pos: Pos
    direction: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, eq=False)
class Vehicle:
    """A car, bike, sweep or pace vehicle with precomputed keyframes.

    Escorts carry a cyclic timeline and always have exactly one position.
    Tunnel vehicles carry a one-shot timeline on an unrolled tunnel-relative
    clock (it may start before minute 0 and run past ``period``); at a given
    relative minute each lifecycle overlapping it is reported separately,
    tagged by ``cycle``: 0 for the current pulse, +1 for the next, -1 for the
    previous. ``offset_min`` maps absolute minutes onto that clock.
    """

    id: str
    kind: str
    direction: str
    period: float
    timeline: Timeline[Pos]
    metadata: dict[str, Any] = field(default_factory=dict)
    offset_min: float = 0.0

    def __post_init__(self) -> None:
        if self.kind not in KINDS:
            raise ValueError(f"Vehicle kind must be one of {KINDS}, got {self.kind!r}")

    @property
    def cyclic(self) -> bool:
        return self.timeline.period is not None

    def instances(self, rel_min: float) -> list[tuple[int, Pos]]:
        """(cycle, position) for every lifecycle alive at ``rel_min``."""
        require_finite(rel_min)
        if self.cyclic:
            return [(0, self.timeline.at(rel_min))]
        first = self.timeline.first.min
        last = self.timeline.last.min
        lo = math.ceil((first - rel_min) / self.period)
        hi = math.floor((last - rel_min) / self.period)
        return [(-k, self.timeline.at(rel_min + k * self.period)) for k in range(hi, lo - 1, -1)]

    def pos(self, abs_min: float) -> Pos | None:
        """Position at ``abs_min`` of the current-pulse lifecycle, else the newest one alive."""
        found = self.instances(wrap(abs_min - self.offset_min, self.period))
        if not found:
            return None
        for cycle, pos in found:
            if cycle == 0:
                return pos
        return found[-1][1]

    def views(self, rel_min: float) -> list[VehicleView]:
        """Visible (opacity > 0) lifecycles at ``rel_min``."""
        views = []
        for cycle, pos in self.instances(rel_min):
            if pos.opacity <= 0:
                continue
            vehicle_id = self.id if cycle == 0 else f"{self.id}@{cycle:+d}"
            metadata = dict(self.metadata)
            if not self.cyclic:
                metadata["cycle"] = cycle
            views.append(VehicleView(vehicle_id, self.kind, pos, pos.direction, metadata))
        return views


def _offset(xy: XY, dx: float) -> XY:
    return XY(xy.x + dx, xy.y)


def _point(mins: float, xy: XY, state: str, direction: str, opacity: float = 1.0) -> TimePoint[Pos]:
    return TimePoint(mins, Pos(xy.x, xy.y, state, opacity, direction))


def build_car(
    vehicle_id: str,
    direction: str,
    period: float,
    spawn_min: float,
    entry_min: float,
    queue_start_min: float,
    stop: XY,
    entrance: XY,
    exit: XY,
    transit_mins: float,
    fade_mins: float,
    fade_dist: float,
    metadata: dict[str, Any] | None = None,
    offset_min: float = 0.0,
) -> Vehicle:
    """Keyframes for one car.

    ``stop`` is where the car first comes to rest: its queue slot when it is
    held back (``entry_min > spawn_min``), otherwise the lane entrance. A held
    car is ``queued`` until ``queue_start_min`` and ``dequeueing`` from then
    until it reaches the entrance.
    """
    d = direction_sign(direction)
    points = [_point(spawn_min - fade_mins, _offset(stop, -d * fade_dist), ORIGIN, direction, 0.0)]
    if entry_min > spawn_min:
        if queue_start_min > spawn_min:
            points.append(_point(spawn_min, stop, QUEUED, direction))
        points.append(_point(queue_start_min, stop, DEQUEUEING, direction))
    exit_min = entry_min + transit_mins
    points += [
        _point(entry_min, entrance, TRANSITING, direction),
        _point(exit_min, exit, EXITING, direction),
        _point(exit_min + fade_mins, _offset(exit, d * fade_dist), EXITING, direction, 0.0),
    ]
    timeline = Timeline(points, interp=lerp_pos)
    return Vehicle(vehicle_id, CAR, direction, period, timeline, dict(metadata or {}), offset_min)


def build_bike(
    vehicle_id: str,
    direction: str,
    period: float,
    spawn_min: float,
    entry_min: float,
    dequeue_mins: float,
    slot: XY,
    entrance: XY,
    midpoint: XY,
    exit: XY,
    down_mins: float,
    up_mins: float,
    fade_mins: float,
    fade_dist: float,
    metadata: dict[str, Any] | None = None,
    offset_min: float = 0.0,
) -> Vehicle:
    """Keyframes for one bike: pen slot, downhill half, uphill half, fade."""
    d = direction_sign(direction)
    dequeue_min = entry_min - dequeue_mins
    points = [_point(spawn_min - fade_mins, _offset(slot, -d * fade_dist), ORIGIN, direction, 0.0)]
    if dequeue_min > spawn_min:
        points.append(_point(spawn_min, slot, QUEUED, direction))
    points += [
        _point(dequeue_min, slot, DEQUEUEING, direction),
        _point(entry_min, entrance, TRANSITING, direction),
        _point(entry_min + down_mins, midpoint, TRANSITING, direction),
        _point(entry_min + down_mins + up_mins, exit, EXITING, direction),
        _point(
            entry_min + down_mins + up_mins + fade_mins,
            _offset(exit, d * fade_dist),
            EXITING,
            direction,
            0.0,
        ),
    ]
    timeline = Timeline(points, interp=lerp_pos)
    return Vehicle(vehicle_id, BIKE, direction, period, timeline, dict(metadata or {}), offset_min)


def build_cyclic(
    vehicle_id: str,
    kind: str,
    period: float,
    points: list[TimePoint[Pos]],
    interp: Interp = lerp_pos,
    metadata: dict[str, Any] | None = None,
) -> Vehicle:
    """Cyclic vehicle from keyframes at any minutes; they are reduced into one period."""
    wrapped = sorted(
        (TimePoint(point.min % period, point.val) for point in points),
        key=lambda point: point.min,
    )
    timeline = Timeline(wrapped, period=period, interp=interp)
    return Vehicle(vehicle_id, kind, wrapped[0].val.direction, period, timeline, dict(metadata or {}))


__all__ = ["Vehicle", "VehicleView", "build_bike", "build_car", "build_cyclic"]
