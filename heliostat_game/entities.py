"""Value objects describing the play field."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Tuple

from .vector import Vec2


MIRROR_WIDTH = 60.0
RECEIVER_RADIUS = 15.0


@dataclass(frozen=True)
class Viewport:
    """Size of the play field in canvas units."""

    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Viewport must have a positive size, got {self.width}x{self.height}")

    @classmethod
    def from_size(cls, size: Tuple[float, float]) -> "Viewport":
        return cls(float(size[0]), float(size[1]))


@dataclass(frozen=True)
class Mirror:
    """A ground-anchored plate rotating around ``position``."""

    id: int
    position: Vec2
    angle: float = 0.0  # radians, 0 is horizontal
    width: float = MIRROR_WIDTH
    is_selected: bool = False
    efficiency: float = 0.0

    def rotated_to(self, angle: float) -> "Mirror":
        return replace(self, angle=angle)

    def payload(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "position": list(self.position.as_tuple()),
            "angle": self.angle,
            "selected": self.is_selected,
            "efficiency": self.efficiency,
        }


@dataclass(frozen=True)
class Tower:
    """Receiver tower; ``position`` is the ground anchor."""

    position: Vec2
    height: float
    receiver_radius: float = RECEIVER_RADIUS
    receiver_offset: float = 0.0

    @property
    def receiver_center(self) -> Vec2:
        return self.position - Vec2(0.0, self.receiver_offset)

    @classmethod
    def for_viewport(cls, viewport: Viewport) -> "Tower":
        w, h = viewport.width, viewport.height
        return cls(
            position=Vec2(w * 0.8, h),
            height=h * 0.35,
            receiver_radius=RECEIVER_RADIUS,
            receiver_offset=h * 0.35 - 20,
        )
