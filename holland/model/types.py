"""Shared value types for tunnel positions and phases."""

from __future__ import annotations

from dataclasses import dataclass

from holland.model.timeline import lerp

EAST = "east"
WEST = "west"
DIRECTIONS = (EAST, WEST)

NORMAL = "normal"
BIKES_ENTER = "bikes-enter"
CLEARING = "clearing"
SWEEP_PHASE = "sweep"
PACE_CAR = "pace-car"

ORIGIN = "origin"
QUEUED = "queued"
DEQUEUEING = "dequeueing"
TRANSITING = "transiting"
EXITING = "exiting"

CAR = "car"
BIKE = "bike"
SWEEP = "sweep"
PACE = "pace"
KINDS = (CAR, BIKE, SWEEP, PACE)


def direction_sign(direction: str) -> int:
    """+1 for eastbound (x grows toward the exit), -1 for westbound."""
    if direction == EAST:
        return 1
    if direction == WEST:
        return -1
    raise ValueError(f"Unknown direction: {direction!r}")


@dataclass(frozen=True)
class XY:
    """Point in a bore's local pixel space."""

    x: float
    y: float


@dataclass(frozen=True)
class Pos:
    """Interpolated position of a vehicle."""

    x: float
    y: float
    state: str
    opacity: float
    direction: str


def lerp_pos(start: Pos, end: Pos, ratio: float) -> Pos:
    """Blend coordinates and opacity; labels are held from ``start``."""
    return Pos(
        x=lerp(start.x, end.x, ratio),
        y=lerp(start.y, end.y, ratio),
        state=start.state,
        opacity=lerp(start.opacity, end.opacity, ratio),
        direction=start.direction,
    )


__all__ = [
    "BIKE",
    "BIKES_ENTER",
    "CAR",
    "CLEARING",
    "DEQUEUEING",
    "DIRECTIONS",
    "EAST",
    "EXITING",
    "KINDS",
    "NORMAL",
    "ORIGIN",
    "PACE",
    "PACE_CAR",
    "Pos",
    "QUEUED",
    "SWEEP",
    "SWEEP_PHASE",
    "TRANSITING",
    "WEST",
    "XY",
    "direction_sign",
    "lerp_pos",
]
