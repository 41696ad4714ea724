"""Layout constants and palette helpers for the heliostat UI."""

from __future__ import annotations

import math
from typing import List, Tuple

Color = Tuple[int, int, int]

# Scene metrics
SUN_RADIUS: int = 25
GROUND_BASE_OFFSET: int = 50
GROUND_STEP: int = 10
TOWER_BASE_WIDTH: int = 40
TOWER_TOP_WIDTH: int = 20
MIRROR_STAND_HEIGHT: int = 20
STAR_COUNT: int = 50

# HUD metrics
HUD_PADDING: int = 16
HUD_BAR_WIDTH: int = 240
HUD_BAR_HEIGHT: int = 10
HUD_LINE_HEIGHT: int = 24

# Colors expressed as RGB tuples
SUN_COLOR: Color = (251, 191, 36)
STAR_COLOR: Color = (255, 255, 255)
GROUND_COLOR: Color = (69, 26, 3)
TOWER_COLOR: Color = (51, 65, 85)
STAND_COLOR: Color = (148, 163, 184)
MIRROR_COLOR: Color = (203, 213, 225)
MIRROR_SELECTED_COLOR: Color = (56, 189, 248)
MIRROR_PIVOT_COLOR: Color = (255, 255, 255)
INCIDENT_RAY_COLOR: Color = (160, 140, 60)
MISS_RAY_COLOR: Color = (120, 110, 50)
HIT_RAY_COLOR: Color = (250, 204, 21)
RECEIVER_IDLE_COLOR: Color = (30, 41, 59)
RECEIVER_CORE_COLOR: Color = (0, 0, 0)
RECEIVER_GLOW_COLOR: Color = (56, 189, 248)
TEXT_COLOR: Color = (232, 236, 244)
ACCENT_COLOR: Color = (250, 204, 21)
BAR_BACKGROUND_COLOR: Color = (30, 41, 59)

# Sky gradients (top, middle, bottom) for each part of the day
DAWN_SKY: Tuple[Color, Color, Color] = ((15, 23, 42), (63, 26, 36), (253, 186, 116))
MIDDAY_SKY: Tuple[Color, Color, Color] = ((14, 165, 233), (125, 211, 252), (254, 243, 199))
DUSK_SKY: Tuple[Color, Color, Color] = ((30, 27, 75), (76, 29, 149), (194, 65, 12))

# Rendering order for composed scenes
DRAW_ORDER = ("sky", "sun", "ground", "tower", "rays", "mirrors", "receiver", "hud")


def sky_colors(time_of_day: float) -> Tuple[Color, Color, Color]:
    if time_of_day < 0.3:
        return DAWN_SKY
    if time_of_day < 0.7:
        return MIDDAY_SKY
    return DUSK_SKY


def star_alpha(time_of_day: float) -> float:
    """Star visibility: fades out over the first and in over the last fifth of the day."""

    if time_of_day < 0.2:
        return 1 - time_of_day * 5
    if time_of_day > 0.8:
        return (time_of_day - 0.8) * 5
    return 0.0


def receiver_glow(frame_energy: float) -> float:
    """Glow intensity in [0, 1] for the energy earned this frame."""

    if frame_energy <= 0:
        return 0.0
    return min(frame_energy / 5, 1.0)


def lerp_color(a: Color, b: Color, t: float) -> Color:
    t = max(0.0, min(1.0, t))
    return (
        int(round(a[0] + (b[0] - a[0]) * t)),
        int(round(a[1] + (b[1] - a[1]) * t)),
        int(round(a[2] + (b[2] - a[2]) * t)),
    )


def gradient_color(stops: Tuple[Color, Color, Color], t: float) -> Color:
    if t < 0.5:
        return lerp_color(stops[0], stops[1], t * 2)
    return lerp_color(stops[1], stops[2], (t - 0.5) * 2)


def ground_outline(width: int, height: int) -> List[Tuple[float, float]]:
    """Polygon of the dune silhouette along the bottom of the field."""

    points: List[Tuple[float, float]] = [(0, height), (0, height - GROUND_BASE_OFFSET)]
    for x in range(0, width + 1, GROUND_STEP):
        y = height - GROUND_BASE_OFFSET - math.sin(x * 0.01) * 20 - math.cos(x * 0.005) * 10
        points.append((x, y))
    points.append((width, height))
    return points


def star_positions(width: int, height: int) -> List[Tuple[int, int, int]]:
    """Deterministic star field as ``(x, y, radius)`` triples."""

    stars = []
    for i in range(STAR_COUNT):
        x = (math.sin(i * 123.45) * 0.5 + 0.5) * width
        y = (math.cos(i * 678.90) * 0.5 + 0.5) * height * 0.6
        stars.append((int(x), int(y), 1 + i % 2))
    return stars
