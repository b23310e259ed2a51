"""Sweep and Pace: the two escorts that serve both bores once per cycle."""

from __future__ import annotations

import logging

from holland.config import EscortConfig, TunnelConfigError
from holland.model.timeline import TimePoint, wrap
from holland.model.tunnel import Tunnel
from holland.model.types import (
    DEQUEUEING,
    EXITING,
    ORIGIN,
    PACE,
    SWEEP,
    TRANSITING,
    XY,
    Pos,
    lerp_pos,
)
from holland.model.vehicles import VehicleView, build_cyclic

_logger = logging.getLogger(__name__)


def escort_blend(start: Pos, end: Pos, ratio: float) -> Pos:
    """Once an escort leaves a tunnel mouth it belongs to its next leg."""
    pos = lerp_pos(start, end, ratio)
    if start.state == EXITING and ratio > 0:
        return Pos(pos.x, pos.y, end.state, pos.opacity, end.direction)
    return pos


class Escort:
    """A Sweep or Pace vehicle on one cyclic path through both bores.

    For each bore the escort waits at that bore's staging point, pulls up to
    the shared lane one minute before its start, crosses at its own speed and
    then heads to the other bore's staging point, arriving
    ``official_reset_mins`` after it left.
    """

    def __init__(self, kind: str, eb: Tunnel, wb: Tunnel, config: EscortConfig) -> None:
        if kind not in (SWEEP, PACE):
            raise ValueError(f"Escort kind must be {SWEEP!r} or {PACE!r}, got {kind!r}")
        self.kind = kind
        self.config = config
        self.tunnels = (eb, wb)
        self.period = eb.config.period
        self.transit_mins = eb.minutes_to_cross(config.mph)
        self._check_legs()
        self.vehicle = build_cyclic(kind, kind, self.period, self._keyframes(), interp=escort_blend)
        _logger.debug(
            "Built %s escort: %.2f min crossing, starts %s",
            kind,
            self.transit_mins,
            {tunnel.direction: self.start_min(tunnel) for tunnel in self.tunnels},
        )

    def start_rel_min(self, tunnel: Tunnel) -> float:
        if self.kind == SWEEP:
            return tunnel.config.sweep_start_min
        return tunnel.config.pace_start_min

    def start_min(self, tunnel: Tunnel) -> float:
        """Absolute minute at which this escort enters ``tunnel``."""
        return wrap(tunnel.config.offset_min + self.start_rel_min(tunnel), self.period)

    def staging(self, tunnel: Tunnel) -> XY:
        """Waiting point just outside ``tunnel``'s shared-lane entrance."""
        entrance = tunnel.r.entrance
        return XY(
            entrance.x - tunnel.d * self.config.staging_offset,
            entrance.y + tunnel.d * self.config.vertical_offset,
        )

    def _check_legs(self) -> None:
        for tunnel, other in (self.tunnels, tuple(reversed(self.tunnels))):
            leg = 1 + self.transit_mins + tunnel.config.official_reset_mins
            gap = wrap(self.start_min(other) - self.start_min(tunnel), self.period)
            if leg >= gap:
                raise TunnelConfigError(
                    f"{self.kind} cannot leave the {tunnel.direction}bound tunnel and reach "
                    f"the {other.direction}bound staging point in time: needs {leg:.2f} min, "
                    f"has {gap:.2f}"
                )

    def _keyframes(self) -> list[TimePoint[Pos]]:
        points = []
        for tunnel, other in (self.tunnels, tuple(reversed(self.tunnels))):
            start = tunnel.config.offset_min + self.start_rel_min(tunnel)
            exit_min = start + self.transit_mins
            direction = tunnel.direction
            staging = self.staging(tunnel)
            entrance = tunnel.r.entrance
            exit = tunnel.r.exit
            next_staging = self.staging(other)
            points += [
                TimePoint(start - 1, Pos(staging.x, staging.y, DEQUEUEING, 1.0, direction)),
                TimePoint(start, Pos(entrance.x, entrance.y, TRANSITING, 1.0, direction)),
                TimePoint(exit_min, Pos(exit.x, exit.y, EXITING, 1.0, direction)),
                TimePoint(
                    exit_min + tunnel.config.official_reset_mins,
                    Pos(next_staging.x, next_staging.y, ORIGIN, 1.0, other.direction),
                ),
            ]
        return points

    def pos(self, abs_min: float) -> Pos:
        return self.vehicle.pos(abs_min)

    def current_tunnel(self, abs_min: float) -> str | None:
        """Direction of the bore the escort is inside, if any."""
        for tunnel in self.tunnels:
            since_start = wrap(abs_min - self.start_min(tunnel), self.period)
            if since_start <= self.transit_mins:
                return tunnel.direction
        return None

    def view(self, abs_min: float) -> VehicleView:
        pos = self.pos(abs_min)
        return VehicleView(
            self.vehicle.id,
            self.kind,
            pos,
            pos.direction,
            {"current_tunnel": self.current_tunnel(abs_min)},
        )


def build_escorts(eb: Tunnel, wb: Tunnel, sweep: EscortConfig, pace: EscortConfig) -> tuple[Escort, Escort]:
    return Escort(SWEEP, eb, wb, sweep), Escort(PACE, eb, wb, pace)


__all__ = ["Escort", "build_escorts", "escort_blend"]
