"""Frame composer: draws both bores, their zones and vehicles with Pillow."""

from __future__ import annotations

from PIL import Image, ImageDraw, ImageFont

from holland.config import DisplayConfig
from holland.model.types import BIKE, CAR, EAST, PACE, SWEEP, WEST
from holland.model.zones import GREEN, RED
from holland.rendering.frame_data import FrameData, clock_label

DEFAULT_DISPLAY = DisplayConfig(
    width=1200,
    height=460,
    margin_x=200,
    westbound_y=100,
    eastbound_y=250,
    fps=10,
)

COLOR_BACKGROUND = (18, 18, 18)
COLOR_LANE = (58, 58, 58)
COLOR_LANE_DIVIDER = (120, 120, 120)
COLOR_TEXT = (230, 230, 230)
COLOR_PHASE = (150, 150, 150)

COLOR_ZONE = {
    GREEN: (0, 150, 60),
    RED: (170, 30, 30),
}

COLOR_VEHICLE = {
    CAR: (90, 140, 255),
    BIKE: (255, 200, 0),
    SWEEP: (255, 255, 255),
    PACE: (255, 80, 200),
}

VEHICLE_RADIUS = {
    CAR: 5,
    BIKE: 3,
    SWEEP: 6,
    PACE: 6,
}

TEXT_MARGIN = 6

FONT = ImageFont.load_default()


def _band_y(display: DisplayConfig, direction: str) -> int:
    return display.eastbound_y if direction == EAST else display.westbound_y


def _to_canvas(display: DisplayConfig, direction: str, x: float, y: float) -> tuple[float, float]:
    return display.margin_x + x, _band_y(display, direction) + y


def _draw_lanes(draw: ImageDraw.ImageDraw, data: FrameData, display: DisplayConfig) -> None:
    for direction, top in data.bore_y.items():
        left, upper = _to_canvas(display, direction, 0, top)
        right = left + data.lane_width_px - 1
        lower = upper + 2 * data.lane_height_px - 1
        draw.rectangle((left, upper, right, lower), fill=COLOR_LANE)


def _draw_dividers(draw: ImageDraw.ImageDraw, data: FrameData, display: DisplayConfig) -> None:
    for direction, top in data.bore_y.items():
        left, middle = _to_canvas(display, direction, 0, top + data.lane_height_px)
        draw.line((left, middle, left + data.lane_width_px - 1, middle), fill=COLOR_LANE_DIVIDER)


def _draw_vehicles(image: Image.Image, data: FrameData, display: DisplayConfig) -> Image.Image:
    layer = Image.new("RGBA", image.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)
    # Escorts go on top of the fleets they lead.
    ordered = sorted(data.vehicles, key=lambda vehicle: vehicle.kind in (SWEEP, PACE))
    for vehicle in ordered:
        pos = vehicle.pos
        x, y = _to_canvas(display, vehicle.direction, pos.x, pos.y)
        radius = VEHICLE_RADIUS.get(vehicle.kind, 4)
        alpha = max(0, min(255, int(round(pos.opacity * 255))))
        fill = COLOR_VEHICLE.get(vehicle.kind, COLOR_TEXT) + (alpha,)
        box = (x - radius, y - radius, x + radius, y + radius)
        if vehicle.kind in (SWEEP, PACE):
            draw.rectangle(box, fill=fill)
        else:
            draw.ellipse(box, fill=fill)
    return Image.alpha_composite(image.convert("RGBA"), layer).convert("RGB")


def _draw_labels(draw: ImageDraw.ImageDraw, data: FrameData, display: DisplayConfig) -> None:
    draw.text((TEXT_MARGIN, TEXT_MARGIN), clock_label(data.minute), font=FONT, fill=COLOR_TEXT)
    for direction, phase in ((WEST, data.phases.west), (EAST, data.phases.east)):
        label = f"{direction}bound: {phase}"
        draw.text(
            (TEXT_MARGIN, _band_y(display, direction) - 4 * TEXT_MARGIN),
            label,
            font=FONT,
            fill=COLOR_PHASE,
        )


def compose_frame(data: FrameData, display: DisplayConfig = DEFAULT_DISPLAY) -> Image.Image:
    """Compose an RGB frame showing both bores at ``data.minute``."""
    if display.width <= 0 or display.height <= 0:
        raise ValueError(f"Display size must be positive, got {display.width}x{display.height}.")

    image = Image.new("RGB", (display.width, display.height), COLOR_BACKGROUND)
    draw = ImageDraw.Draw(image)
    _draw_lanes(draw, data, display)

    for rect in data.rectangles:
        left, upper = _to_canvas(display, rect.direction, rect.x, rect.y)
        draw.rectangle(
            (left, upper, left + rect.width - 1, upper + rect.height - 1),
            fill=COLOR_ZONE.get(rect.color, COLOR_LANE),
        )

    _draw_dividers(draw, data, display)
    image = _draw_vehicles(image, data, display)
    _draw_labels(ImageDraw.Draw(image), data, display)
    return image


__all__ = ["COLOR_VEHICLE", "COLOR_ZONE", "DEFAULT_DISPLAY", "compose_frame"]
