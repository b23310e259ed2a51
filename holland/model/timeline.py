"""Keyframe interpolation over a (possibly cyclic) minute axis."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
import math
from typing import Any, Callable, Generic, Sequence, TypeVar

T = TypeVar("T")

Interp = Callable[[Any, Any, float], Any]


def lerp(start: float, end: float, ratio: float) -> float:
    """Linear interpolation between two scalars."""
    return start + (end - start) * ratio


def require_finite(mins: float) -> float:
    if not math.isfinite(mins):
        raise ValueError(f"Time must be a finite number of minutes, got {mins!r}")
    return mins


def wrap(mins: float, period: float) -> float:
    """Reduce ``mins`` into ``[0, period)`` for any sign of input."""
    wrapped = require_finite(mins) % period
    # Tiny negative inputs round up to exactly ``period``.
    if wrapped >= period:
        return 0.0
    return wrapped


@dataclass(frozen=True)
class TimePoint(Generic[T]):
    """A value pinned to a minute."""

    min: float
    val: T


class Timeline(Generic[T]):
    """Interpolates between keyframes.

    With a ``period`` the axis is cyclic: queries are reduced modulo the period
    and the segment from the last keyframe runs to the first keyframe one
    period later. Without one, queries outside the keyframes clamp to the
    first or last value.
    """

    def __init__(
        self,
        points: Sequence[TimePoint[T]],
        period: float | None = None,
        interp: Interp = lerp,
    ) -> None:
        if not points:
            raise ValueError("Timeline requires at least one point")
        for prev, point in zip(points, points[1:]):
            if not point.min > prev.min:
                raise ValueError(
                    f"Timeline points must be strictly ascending: {prev.min} then {point.min}"
                )
        if period is not None:
            if not period > 0:
                raise ValueError(f"Timeline period must be positive, got {period}")
            if points[0].min < 0 or points[-1].min >= period:
                raise ValueError(
                    f"Periodic timeline points must lie in [0, {period}), "
                    f"got {points[0].min}..{points[-1].min}"
                )
        self.points = tuple(points)
        self.period = period
        self.interp = interp
        self._mins = [point.min for point in self.points]

    @property
    def first(self) -> TimePoint[T]:
        return self.points[0]

    @property
    def last(self) -> TimePoint[T]:
        return self.points[-1]

    def at(self, mins: float) -> T:
        """Value at ``mins``; exact at keyframe minutes."""
        require_finite(mins)
        points = self.points
        if self.period is None:
            if mins <= points[0].min:
                return points[0].val
            if mins >= points[-1].min:
                return points[-1].val
        else:
            mins = wrap(mins, self.period)

        idx = bisect_right(self._mins, mins)
        if idx == 0:
            # Before the first keyframe of a cyclic timeline: still on the wrap segment.
            start = points[-1]
            end = points[0]
            start_min = start.min - self.period
            end_min = end.min
        elif idx == len(points):
            start = points[-1]
            end = points[0]
            start_min = start.min
            end_min = end.min + self.period
        else:
            start = points[idx - 1]
            end = points[idx]
            start_min = start.min
            end_min = end.min

        span = end_min - start_min
        if span <= 0:
            return start.val
        return self.interp(start.val, end.val, (mins - start_min) / span)


__all__ = ["Interp", "TimePoint", "Timeline", "lerp", "require_finite", "wrap"]
