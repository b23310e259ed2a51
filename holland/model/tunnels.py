"""Both bores plus their escorts behind one per-minute query API."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from holland.config import TunnelsConfig, default_tunnels_config
from holland.model.escorts import Escort, build_escorts
from holland.model.timeline import require_finite
from holland.model.tunnel import Tunnel
from holland.model.types import EAST, WEST
from holland.model.vehicles import VehicleView
from holland.model.zones import GREEN, RED, ColorRectangle

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TunnelPhases:
    """Phase of each bore at one minute."""

    east: str
    west: str


@dataclass(frozen=True)
class SpaceTimeShares:
    """Fractions of a bore's shared-lane space-time, over one cycle."""

    bikes: float
    buffer: float
    cars: float


class Tunnels:
    """Eastbound and westbound bores with the Sweep and Pace escorts."""

    def __init__(self, config: TunnelsConfig | None = None) -> None:
        if config is None:
            config = default_tunnels_config()
        self.config = config
        self.eb = Tunnel(config.eb, sweep_mph=config.sweep.mph, pace_mph=config.pace.mph)
        self.wb = Tunnel(config.wb, sweep_mph=config.sweep.mph, pace_mph=config.pace.mph)
        self.sweep, self.pace = build_escorts(self.eb, self.wb, config.sweep, config.pace)
        _logger.info(
            "Tunnels ready: eastbound offset %s, westbound offset %s, period %s",
            config.eb.offset_min,
            config.wb.offset_min,
            config.eb.period,
        )

    @property
    def period(self) -> float:
        return self.config.eb.period

    @property
    def escorts(self) -> tuple[Escort, Escort]:
        return (self.sweep, self.pace)

    def tunnel(self, direction: str) -> Tunnel:
        if direction == EAST:
            return self.eb
        if direction == WEST:
            return self.wb
        raise ValueError(f"Unknown direction: {direction!r}")

    def get_all_vehicles(self, abs_min: float) -> list[VehicleView]:
        """Eastbound vehicles, westbound vehicles, then the sweep and the pace car."""
        require_finite(abs_min)
        vehicles = self.eb.all_vehicles(abs_min) + self.wb.all_vehicles(abs_min)
        vehicles.append(self.sweep.view(abs_min))
        vehicles.append(self.pace.view(abs_min))
        return vehicles

    def get_phases(self, abs_min: float) -> TunnelPhases:
        return TunnelPhases(east=self.eb.phase_at(abs_min), west=self.wb.phase_at(abs_min))

    def get_color_rectangles(self, abs_min: float) -> list[ColorRectangle]:
        return self.eb.color_rectangles(abs_min) + self.wb.color_rectangles(abs_min)

    def space_time_shares(self, direction: str = EAST, samples: int = 600) -> SpaceTimeShares:
        """Share of the shared lane given to bikes (green), the buffer (red) and cars.

        Integrates rectangle widths over ``samples`` evenly spaced minutes of
        one cycle; everything not green or red is open to cars.
        """
        if samples <= 0:
            raise ValueError(f"samples must be positive, got {samples}")
        tunnel = self.tunnel(direction)
        width = tunnel.config.lane_width_px
        step = self.period / samples
        totals = {GREEN: 0.0, RED: 0.0}
        for idx in range(samples):
            abs_min = tunnel.config.offset_min + (idx + 0.5) * step
            for rect in tunnel.color_rectangles(abs_min):
                totals[rect.color] += rect.width
        capacity = width * samples
        bikes = totals[GREEN] / capacity
        buffer = totals[RED] / capacity
        return SpaceTimeShares(bikes=bikes, buffer=buffer, cars=1.0 - bikes - buffer)


__all__ = ["SpaceTimeShares", "TunnelPhases", "Tunnels"]
