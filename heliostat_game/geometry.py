"""Reflection and intersection primitives."""

from __future__ import annotations

import math

from .vector import Vec2


def deg_to_rad(degrees: float) -> float:
    return degrees * math.pi / 180


def rad_to_deg(radians: float) -> float:
    return radians * 180 / math.pi


def reflect(incident: Vec2, normal: Vec2) -> Vec2:
    """Mirror ``incident`` about a surface with unit normal ``normal``.

    Computes ``R = I - 2 (I.N) N``. Both vectors are expected to be
    normalized already; a non-unit normal still gives the algebraic result
    but it no longer describes a physical reflection.
    """

    d = incident.dot(normal)
    return incident - normal * (2.0 * d)


def line_intersects_circle(p1: Vec2, p2: Vec2, center: Vec2, radius: float) -> bool:
    """Return True when the segment ``p1 -> p2`` touches the circle.

    The segment is parametrised as ``p1 + t (p2 - p1)`` for ``t`` in
    ``[0, 1]`` and substituted into the circle equation, giving
    ``a t^2 + b t + c = 0``. A zero-length segment never intersects.
    """

    d = p2 - p1
    f = p1 - center

    a = d.dot(d)
    if a == 0:
        return False
    b = 2 * f.dot(d)
    c = f.dot(f) - radius * radius

    discriminant = b * b - 4 * a * c
    if discriminant < 0:
        return False

    root = math.sqrt(discriminant)
    t1 = (-b - root) / (2 * a)
    t2 = (-b + root) / (2 * a)

    if 0 <= t1 <= 1:
        return True
    if 0 <= t2 <= 1:
        return True
    return False
