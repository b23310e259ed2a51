"""Configuration for the tunnel schedule model and its renderer."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
import math
import os
from typing import Any

from dotenv import load_dotenv
import yaml

from holland.model.types import DIRECTIONS, EAST, WEST


class TunnelConfigError(ValueError):
    """Raised when a schedule configuration cannot produce a valid cycle."""


def _check_positive(context: str, name: str, value: float) -> None:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise TunnelConfigError(f"{context}.{name} must be a number, got {value!r}")
    if not math.isfinite(value) or value <= 0:
        raise TunnelConfigError(f"{context}.{name} must be positive and finite, got {value!r}")


def _check_finite(context: str, name: str, value: float) -> None:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise TunnelConfigError(f"{context}.{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise TunnelConfigError(f"{context}.{name} must be finite, got {value!r}")


@dataclass(frozen=True)
class TunnelConfig:
    """Schedule, rates and layout of one bore.

    Minutes named ``*_min`` are tunnel-relative: minute 0 is when that bore's
    pen opens. Pixel values are in the bore's local space, where the tunnel
    spans ``x`` in ``[0, lane_width_px]``.
    """

    direction: str
    offset_min: float
    pen_relative_x: float
    pen_relative_y: float
    period: float = 60
    length_mi: float = 2
    car_mph: float = 24
    bike_down_mph: float = 15
    bike_up_mph: float = 8
    bike_flat_mph: float = 12
    pen_close_min: float = 3
    sweep_start_min: float = 5
    pace_start_min: float = 10
    official_reset_mins: float = 5
    cars_per_min: float = 1
    cars_released_per_min: float = 5
    bikes_per_min: float = 0.25
    bikes_released_per_min: float = 5
    bike_dequeue_mins: float = 1
    fade_mins: float = 1
    y: float = 0
    lane_width_px: float = 800
    lane_height_px: float = 30
    queued_car_width_px: float = 30
    pen_width_px: float = 120
    pen_height_px: float = 70

    def __post_init__(self) -> None:
        context = f"{self.direction}bound" if self.direction in DIRECTIONS else "tunnel"
        if self.direction not in DIRECTIONS:
            raise TunnelConfigError(f"direction must be one of {DIRECTIONS}, got {self.direction!r}")
        for name in (
            "period",
            "length_mi",
            "car_mph",
            "bike_down_mph",
            "bike_up_mph",
            "bike_flat_mph",
            "pen_close_min",
            "sweep_start_min",
            "pace_start_min",
            "official_reset_mins",
            "cars_per_min",
            "cars_released_per_min",
            "bikes_per_min",
            "bikes_released_per_min",
            "bike_dequeue_mins",
            "fade_mins",
            "lane_width_px",
            "lane_height_px",
            "queued_car_width_px",
            "pen_width_px",
            "pen_height_px",
        ):
            _check_positive(context, name, getattr(self, name))
        for name in ("offset_min", "pen_relative_x", "pen_relative_y", "y"):
            _check_finite(context, name, getattr(self, name))

        if not 0 <= self.offset_min < self.period:
            raise TunnelConfigError(
                f"{context}.offset_min must lie in [0, {self.period}), got {self.offset_min}"
            )
        if not (
            self.pen_close_min
            < self.sweep_start_min
            < self.pace_start_min
            < self.reopen_min
            <= self.period
        ):
            raise TunnelConfigError(
                f"{context} phases must satisfy 0 < pen_close_min < sweep_start_min < "
                f"pace_start_min < pace_start_min + official_reset_mins <= period, got "
                f"{self.pen_close_min}, {self.sweep_start_min}, {self.pace_start_min}, "
                f"{self.reopen_min}, {self.period}"
            )
        if self.cars_per_min >= self.cars_released_per_min:
            raise TunnelConfigError(
                f"{context}.cars_released_per_min ({self.cars_released_per_min}) must exceed "
                f"cars_per_min ({self.cars_per_min}) or the car queue never drains"
            )

    @property
    def reopen_min(self) -> float:
        """Tunnel-relative minute at which the shared lane is back to normal."""
        return self.pace_start_min + self.official_reset_mins


@dataclass(frozen=True)
class EscortConfig:
    """Speed and staging geometry of an escort vehicle."""

    mph: float
    staging_offset: float
    vertical_offset: float

    def __post_init__(self) -> None:
        _check_positive("escort", "mph", self.mph)
        _check_finite("escort", "staging_offset", self.staging_offset)
        _check_finite("escort", "vertical_offset", self.vertical_offset)


DEFAULT_SWEEP = EscortConfig(mph=12, staging_offset=35, vertical_offset=30)
DEFAULT_PACE = EscortConfig(mph=24, staging_offset=60, vertical_offset=60)


@dataclass(frozen=True)
class TunnelsConfig:
    """Both bores plus the two escorts that alternate between them."""

    eb: TunnelConfig
    wb: TunnelConfig
    sweep: EscortConfig = DEFAULT_SWEEP
    pace: EscortConfig = DEFAULT_PACE

    def __post_init__(self) -> None:
        if self.eb.direction != EAST:
            raise TunnelConfigError(f"eb must be eastbound, got {self.eb.direction!r}")
        if self.wb.direction != WEST:
            raise TunnelConfigError(f"wb must be westbound, got {self.wb.direction!r}")
        # Escorts drive both bores on one clock.
        for name in ("period", "length_mi", "lane_width_px", "lane_height_px"):
            if getattr(self.eb, name) != getattr(self.wb, name):
                raise TunnelConfigError(
                    f"eb.{name} ({getattr(self.eb, name)}) and wb.{name} "
                    f"({getattr(self.wb, name)}) must match"
                )


@dataclass(frozen=True)
class DisplayConfig:
    """Canvas layout for rendered frames."""

    width: int
    height: int
    margin_x: int
    westbound_y: int
    eastbound_y: int
    fps: int


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str
    log_dir: str


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration."""

    tunnels: TunnelsConfig
    display: DisplayConfig
    log: LoggingConfig


def default_tunnels_config() -> TunnelsConfig:
    """The Holland Tunnel schedule: eastbound pen opens at :45, westbound at :15."""
    return TunnelsConfig(
        eb=TunnelConfig(direction=EAST, offset_min=45, pen_relative_x=-80, pen_relative_y=110),
        wb=TunnelConfig(direction=WEST, offset_min=15, pen_relative_x=870, pen_relative_y=-80),
    )


_SCHEDULE_KEYS = frozenset(
    item.name for item in fields(TunnelConfig) if item.name != "direction"
)
_ESCORT_KEYS = frozenset(item.name for item in fields(EscortConfig))


def _require_key(mapping: dict[str, Any], key: str, context: str) -> Any:
    if key not in mapping:
        raise ValueError(f"Missing required key '{key}' in {context} config")
    return mapping[key]


def _require_mapping(data: dict[str, Any], key: str, required: bool = True) -> dict[str, Any]:
    section = _require_key(data, key, key) if required else data.get(key, {})
    if section is None:
        section = {}
    if not isinstance(section, dict):
        raise ValueError(f"'{key}' config must be a mapping")
    return section


def _reject_unknown(section: dict[str, Any], allowed: frozenset[str], context: str) -> None:
    unknown = sorted(set(section) - allowed)
    if unknown:
        raise ValueError(f"Unknown keys {unknown} in {context} config")


def _tunnel_config(direction: str, schedule: dict[str, Any], section: dict[str, Any], context: str) -> TunnelConfig:
    _reject_unknown(section, _SCHEDULE_KEYS, context)
    _require_key(section, "offset_min", context)
    merged = {**schedule, **section}
    for key in ("pen_relative_x", "pen_relative_y"):
        _require_key(merged, key, context)
    return TunnelConfig(direction=direction, **merged)


def _escort_config(data: dict[str, Any], key: str, default: EscortConfig) -> EscortConfig:
    section = _require_mapping(data, key, required=False)
    _reject_unknown(section, _ESCORT_KEYS, key)
    return EscortConfig(
        mph=section.get("mph", default.mph),
        staging_offset=section.get("staging_offset", default.staging_offset),
        vertical_offset=section.get("vertical_offset", default.vertical_offset),
    )


def load_config(path: str = "config/config.yaml") -> AppConfig:
    """Load application configuration from a YAML file."""
    load_dotenv()
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except FileNotFoundError as exc:
        raise ValueError(f"Config file not found: {path}") from exc

    if not isinstance(data, dict):
        raise ValueError("Config file must contain a mapping at the top level")

    schedule = _require_mapping(data, "schedule", required=False)
    _reject_unknown(schedule, _SCHEDULE_KEYS, "schedule")
    eastbound_section = _require_mapping(data, "eastbound")
    westbound_section = _require_mapping(data, "westbound")
    display_section = _require_mapping(data, "display")
    logging_section = _require_mapping(data, "logging")

    tunnels = TunnelsConfig(
        eb=_tunnel_config(EAST, schedule, eastbound_section, "eastbound"),
        wb=_tunnel_config(WEST, schedule, westbound_section, "westbound"),
        sweep=_escort_config(data, "sweep", DEFAULT_SWEEP),
        pace=_escort_config(data, "pace", DEFAULT_PACE),
    )

    display = DisplayConfig(
        width=_require_key(display_section, "width", "display"),
        height=_require_key(display_section, "height", "display"),
        margin_x=_require_key(display_section, "margin_x", "display"),
        westbound_y=_require_key(display_section, "westbound_y", "display"),
        eastbound_y=_require_key(display_section, "eastbound_y", "display"),
        fps=_require_key(display_section, "fps", "display"),
    )

    logging = LoggingConfig(
        level=_require_key(logging_section, "level", "logging"),
        log_dir=_require_key(logging_section, "log_dir", "logging"),
    )
    level_override = os.environ.get("HOLLAND_LOG_LEVEL")
    if level_override:
        logging = replace(logging, level=level_override)

    return AppConfig(tunnels=tunnels, display=display, log=logging)


__all__ = [
    "AppConfig",
    "DEFAULT_PACE",
    "DEFAULT_SWEEP",
    "DisplayConfig",
    "EscortConfig",
    "LoggingConfig",
    "TunnelConfig",
    "TunnelConfigError",
    "TunnelsConfig",
    "default_tunnels_config",
    "load_config",
]
