"""Immutable 2D vector used throughout the simulation."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Vec2:
    """A point or direction in canvas coordinates (y grows downwards)."""

    x: float
    y: float

    def __add__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Vec2":
        return Vec2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __neg__(self) -> "Vec2":
        return Vec2(-self.x, -self.y)

    def dot(self, other: "Vec2") -> float:
        return self.x * other.x + self.y * other.y

    def magnitude(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y)

    def normalized(self) -> "Vec2":
        """Unit vector in the same direction, or the zero vector for zero input."""

        m = self.magnitude()
        if m == 0:
            return Vec2(0.0, 0.0)
        return Vec2(self.x / m, self.y / m)

    def distance_to(self, other: "Vec2") -> float:
        return math.sqrt((other.x - self.x) ** 2 + (other.y - self.y) ** 2)

    def angle(self) -> float:
        """Direction in radians, ``atan2(y, x)``."""

        return math.atan2(self.y, self.x)

    def perp(self) -> "Vec2":
        return Vec2(-self.y, self.x)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


ZERO = Vec2(0.0, 0.0)


def from_angle(theta: float) -> Vec2:
    """Unit vector pointing along ``theta`` radians."""

    return Vec2(math.cos(theta), math.sin(theta))


def distance(a: Vec2, b: Vec2) -> float:
    return a.distance_to(b)
