"""One bore of the tunnel: its clock, lanes, car and bike fleets, and zones."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from holland.config import TunnelConfig, TunnelConfigError
from holland.model.timeline import wrap
from holland.model.types import (
    BIKES_ENTER,
    CLEARING,
    NORMAL,
    PACE_CAR,
    SWEEP_PHASE,
    XY,
    direction_sign,
)
from holland.model.vehicles import Vehicle, VehicleView, build_bike, build_car
from holland.model.zones import ColorRectangle, ColorZones, zone_rectangles

_logger = logging.getLogger(__name__)

BIKES_PER_ROW = 5
BIKE_SPACING_X = 20
BIKE_SPACING_Y = 15
BIKE_PEN_MARGIN = 10


@dataclass(frozen=True)
class Lane:
    """A lane's mouth and far end, on the lane center line."""

    id: str
    entrance: XY
    exit: XY

    @property
    def midpoint(self) -> XY:
        return XY((self.entrance.x + self.exit.x) / 2, (self.entrance.y + self.exit.y) / 2)


@dataclass(frozen=True)
class PhaseWindow:
    """A phase's span in tunnel-relative minutes, anchored to the absolute clock."""

    phase: str
    rel_start: float
    rel_end: float
    abs_start: float

    @property
    def duration(self) -> float:
        return self.rel_end - self.rel_start


@dataclass(frozen=True)
class _CarSlot:
    lane: str
    index: int
    spawn_min: float


class Tunnel:
    """One directional bore.

    All vehicle paths are computed once here; every query afterwards is a pure
    function of the minute it is given.
    """

    def __init__(
        self,
        config: TunnelConfig,
        sweep_mph: float | None = None,
        pace_mph: float | None = None,
    ) -> None:
        self.config = config
        self.direction = config.direction
        self.sweep_mph = sweep_mph if sweep_mph is not None else config.bike_flat_mph
        self.pace_mph = pace_mph if pace_mph is not None else config.car_mph
        self.d = direction_sign(config.direction)

        width = config.lane_width_px
        height = config.lane_height_px
        entrance_x = 0.0 if self.d > 0 else width
        exit_x = width - entrance_x
        l_y = config.y + height * (1 - self.d * 0.5)
        r_y = config.y + height * (1 + self.d * 0.5)
        self.l = Lane("L", XY(entrance_x, l_y), XY(exit_x, l_y))
        self.r = Lane("R", XY(entrance_x, r_y), XY(exit_x, r_y))
        self.pen = XY(config.pen_relative_x, config.pen_relative_y)

        self.cars = self._build_cars()
        self.bikes = self._build_bikes()
        self.color_zones = ColorZones(self)
        _logger.debug(
            "Built %sbound tunnel: %d cars, %d bikes, offset %s",
            self.direction,
            len(self.cars),
            len(self.bikes),
            config.offset_min,
        )

    def minutes_to_cross(self, mph: float, length_mi: float | None = None) -> float:
        if length_mi is None:
            length_mi = self.config.length_mi
        return length_mi * 60.0 / mph

    def px_per_min(self, mph: float) -> float:
        return self.config.lane_width_px / self.minutes_to_cross(mph)

    def rel_mins(self, abs_min: float) -> float:
        """Minutes since this bore's pen last opened."""
        return wrap(abs_min - self.config.offset_min, self.config.period)

    def get_phase(self, rel_min: float) -> str:
        config = self.config
        if rel_min < 0 or rel_min >= config.period:
            rel_min = wrap(rel_min, config.period)
        if rel_min < config.pen_close_min:
            return BIKES_ENTER
        if rel_min < config.sweep_start_min:
            return CLEARING
        if rel_min < config.pace_start_min:
            return SWEEP_PHASE
        if rel_min < config.reopen_min:
            return PACE_CAR
        return NORMAL

    def phase_at(self, abs_min: float) -> str:
        return self.get_phase(self.rel_mins(abs_min))

    def phase_schedule(self) -> list[PhaseWindow]:
        """The five phases of one cycle, in order, starting when the pen opens."""
        config = self.config
        bounds = [
            (BIKES_ENTER, 0.0, config.pen_close_min),
            (CLEARING, config.pen_close_min, config.sweep_start_min),
            (SWEEP_PHASE, config.sweep_start_min, config.pace_start_min),
            (PACE_CAR, config.pace_start_min, config.reopen_min),
            (NORMAL, config.reopen_min, config.period),
        ]
        return [
            PhaseWindow(phase, start, end, wrap(config.offset_min + start, config.period))
            for phase, start, end in bounds
            if end > start
        ]

    def _car_slots(self) -> list[_CarSlot]:
        config = self.config
        count = round(config.period * config.cars_per_min)
        slots = []
        for idx in range(count):
            slots.append(_CarSlot("L", idx, (idx + 0.5) / config.cars_per_min))
            slots.append(_CarSlot("R", idx, idx / config.cars_per_min))
        return slots

    def _build_cars(self) -> list[Vehicle]:
        config = self.config
        rate = config.cars_released_per_min
        headway = 1.0 / rate
        transit = self.minutes_to_cross(config.car_mph)
        fade_dist = self.px_per_min(config.car_mph) * config.fade_mins
        queue_speed = config.queued_car_width_px * rate
        prefix = f"car-{self.direction[0]}"

        cars = []
        prev_entry = None
        for slot in self._car_slots():
            spawn = slot.spawn_min
            lane = self.l if slot.lane == "L" else self.r
            entry = spawn
            queue_start = spawn
            if slot.lane == "R":
                # Shared lane: held from the pen opening until the pace car leads
                # traffic back in, then released in spawn order.
                earliest = prev_entry + headway if prev_entry is not None else spawn
                if spawn < config.pace_start_min:
                    earliest = max(earliest, config.pace_start_min + headway)
                entry = max(spawn, earliest)
                queue_start = max(spawn, config.pace_start_min)
                if entry > spawn and entry > config.reopen_min:
                    raise TunnelConfigError(
                        f"{self.direction}bound car queue does not drain before minute "
                        f"{config.reopen_min}: car {slot.index} enters at {entry:.2f}"
                    )
                prev_entry = entry
            queued = entry > spawn
            stop = lane.entrance
            if queued:
                depth = (entry - queue_start) * queue_speed
                stop = XY(lane.entrance.x - self.d * depth, lane.entrance.y)
            cars.append(
                build_car(
                    f"{prefix}-{slot.lane}-{slot.index}",
                    self.direction,
                    config.period,
                    spawn_min=spawn,
                    entry_min=entry,
                    queue_start_min=queue_start,
                    stop=stop,
                    entrance=lane.entrance,
                    exit=lane.exit,
                    transit_mins=transit,
                    fade_mins=config.fade_mins,
                    fade_dist=fade_dist,
                    metadata={
                        "lane": slot.lane,
                        "index": slot.index,
                        "spawn_min": spawn,
                        "entry_min": entry,
                        "queued": queued,
                    },
                    offset_min=config.offset_min,
                )
            )
        return cars

    def pen_slot(self, release_index: int) -> XY:
        """Where the ``release_index``-th bike of a pulse waits in the pen."""
        col = release_index % BIKES_PER_ROW
        row = release_index // BIKES_PER_ROW
        return XY(
            self.pen.x + BIKE_PEN_MARGIN + col * BIKE_SPACING_X,
            self.pen.y + BIKE_PEN_MARGIN + row * BIKE_SPACING_Y,
        )

    def bike_spawn_min(self, index: int) -> float:
        """Effective spawn: bikes arriving after the pen closes wait for the next pulse."""
        config = self.config
        nominal = index / config.bikes_per_min
        if nominal >= config.pen_close_min:
            return nominal - config.period
        return nominal

    def _build_bikes(self) -> list[Vehicle]:
        config = self.config
        count = round(config.period * config.bikes_per_min)
        headway = 1.0 / config.bikes_released_per_min
        half = config.length_mi / 2
        down_mins = self.minutes_to_cross(config.bike_down_mph, half)
        up_mins = self.minutes_to_cross(config.bike_up_mph, half)
        fade_dist = (config.lane_width_px / 2) / up_mins * config.fade_mins
        prefix = f"bike-{self.direction[0]}"

        order = sorted(range(count), key=self.bike_spawn_min)
        bikes: list[Vehicle | None] = [None] * count
        prev_entry = None
        for release_index, idx in enumerate(order):
            spawn = self.bike_spawn_min(idx)
            entry = max(spawn + config.bike_dequeue_mins, 0.0)
            if prev_entry is not None:
                entry = max(entry, prev_entry + headway)
            if entry >= config.sweep_start_min:
                raise TunnelConfigError(
                    f"{self.direction}bound bike pulse does not clear the pen before the "
                    f"sweep at minute {config.sweep_start_min}: bike {idx} enters at {entry:.2f}"
                )
            prev_entry = entry
            bikes[idx] = build_bike(
                f"{prefix}-{idx}",
                self.direction,
                config.period,
                spawn_min=spawn,
                entry_min=entry,
                dequeue_mins=config.bike_dequeue_mins,
                slot=self.pen_slot(release_index),
                entrance=self.r.entrance,
                midpoint=self.r.midpoint,
                exit=self.r.exit,
                down_mins=down_mins,
                up_mins=up_mins,
                fade_mins=config.fade_mins,
                fade_dist=fade_dist,
                metadata={
                    "index": idx,
                    "spawn_min": spawn,
                    "entry_min": entry,
                    "release_index": release_index,
                },
                offset_min=config.offset_min,
            )
        return [bike for bike in bikes if bike is not None]

    def all_vehicles(self, abs_min: float) -> list[VehicleView]:
        """Every visible car and bike lifecycle in this bore at ``abs_min``."""
        rel = self.rel_mins(abs_min)
        views = []
        for vehicle in self.cars + self.bikes:
            views.extend(vehicle.views(rel))
        return views

    def color_rectangles(self, abs_min: float) -> list[ColorRectangle]:
        edges = self.color_zones.at(self.rel_mins(abs_min))
        top = self.r.entrance.y - self.config.lane_height_px / 2
        return zone_rectangles(edges, self.direction, top, self.config.lane_height_px)


__all__ = ["BIKES_PER_ROW", "Lane", "PhaseWindow", "Tunnel"]
