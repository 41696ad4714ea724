"""Per-frame evaluation of sunlight reflected by the mirror field.

The evaluator keeps no state between calls: each frame passes in the sun
position, the receiver and the current mirrors and receives a
:class:`FieldReport` describing every reflected ray and the energy it earned.
Mirrors do not shadow or occlude each other, so the frame energy is simply
the sum of the per-mirror contributions.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Iterable, List, Tuple

from .entities import Mirror, Tower
from .geometry import line_intersects_circle, reflect
from .vector import Vec2, from_angle


RAY_LENGTH = 1000.0
HIT_RADIUS_MARGIN = 1.5

PERFECT_ALIGNMENT = 0.99
PARTIAL_ALIGNMENT = 0.95
PERFECT_ENERGY = 2.0
PARTIAL_ENERGY = 0.5


class HitTier(Enum):
    """Energy tier earned by a single reflected ray."""

    MISS = "miss"
    MISALIGNED = "misaligned"
    PARTIAL = "partial"
    PERFECT = "perfect"

    @property
    def energy(self) -> float:
        if self is HitTier.PERFECT:
            return PERFECT_ENERGY
        if self is HitTier.PARTIAL:
            return PARTIAL_ENERGY
        return 0.0

    @staticmethod
    def from_alignment(alignment: float) -> "HitTier":
        if alignment > PERFECT_ALIGNMENT:
            return HitTier.PERFECT
        if alignment > PARTIAL_ALIGNMENT:
            return HitTier.PARTIAL
        return HitTier.MISALIGNED


@dataclass(frozen=True)
class Receiver:
    center: Vec2
    radius: float

    @classmethod
    def from_tower(cls, tower: Tower) -> "Receiver":
        return cls(center=tower.receiver_center, radius=tower.receiver_radius)


@dataclass(frozen=True)
class MirrorReading:
    """Ray geometry and hit result for one mirror during one frame."""

    mirror_id: int
    origin: Vec2
    incident: Vec2
    normal: Vec2
    reflected: Vec2
    ray_end: Vec2
    hit: bool
    alignment: float
    tier: HitTier

    @property
    def energy(self) -> float:
        return self.tier.energy

    @property
    def efficiency(self) -> float:
        if not self.hit:
            return 0.0
        return max(0.0, min(1.0, self.alignment))

    def payload(self) -> Dict[str, object]:
        return {
            "mirror": self.mirror_id,
            "reflected": list(self.reflected.as_tuple()),
            "ray_end": list(self.ray_end.as_tuple()),
            "hit": self.hit,
            "alignment": self.alignment,
            "tier": self.tier.value,
            "energy": self.energy,
        }


@dataclass(frozen=True)
class FieldReport:
    sun: Vec2
    receiver: Receiver
    readings: Tuple[MirrorReading, ...]

    @property
    def total_energy(self) -> float:
        return sum(reading.energy for reading in self.readings)

    @property
    def hits(self) -> int:
        return sum(1 for reading in self.readings if reading.hit)

    def reading_for(self, mirror_id: int) -> MirrorReading:
        for reading in self.readings:
            if reading.mirror_id == mirror_id:
                return reading
        raise KeyError(mirror_id)


def surface_normal(angle: float) -> Vec2:
    # The plate lies along ``angle``; its reflecting face trails by a quarter turn.
    return from_angle(angle - math.pi / 2)


def evaluate_mirror(mirror: Mirror, sun: Vec2, receiver: Receiver) -> MirrorReading:
    incident = (mirror.position - sun).normalized()
    normal = surface_normal(mirror.angle)
    reflected = reflect(incident, normal)
    ray_end = mirror.position + reflected * RAY_LENGTH

    hit = line_intersects_circle(
        mirror.position, ray_end, receiver.center, receiver.radius * HIT_RADIUS_MARGIN
    )
    alignment = 0.0
    tier = HitTier.MISS
    if hit:
        to_target = (receiver.center - mirror.position).normalized()
        alignment = reflected.dot(to_target)
        tier = HitTier.from_alignment(alignment)

    return MirrorReading(
        mirror_id=mirror.id,
        origin=mirror.position,
        incident=incident,
        normal=normal,
        reflected=reflected,
        ray_end=ray_end,
        hit=hit,
        alignment=alignment,
        tier=tier,
    )


def evaluate_field(sun: Vec2, receiver: Receiver, mirrors: Iterable[Mirror]) -> FieldReport:
    """Evaluate every mirror for the current frame."""

    readings = tuple(evaluate_mirror(mirror, sun, receiver) for mirror in mirrors)
    return FieldReport(sun=sun, receiver=receiver, readings=readings)


def apply_efficiency(mirrors: Iterable[Mirror], report: FieldReport) -> Tuple[Mirror, ...]:
    efficiencies = {reading.mirror_id: reading.efficiency for reading in report.readings}
    updated: List[Mirror] = []
    for mirror in mirrors:
        efficiency = efficiencies.get(mirror.id, 0.0)
        if efficiency != mirror.efficiency:
            mirror = replace(mirror, efficiency=efficiency)
        updated.append(mirror)
    return tuple(updated)


def aim_angle(position: Vec2, sun: Vec2, target: Vec2) -> float:
    """Mirror angle at ``position`` that reflects sunlight exactly onto ``target``.

    The reflecting normal bisects the reversed incident ray and the
    direction to the target, so it is parallel to ``to_target - incident``.
    """

    incident = (position - sun).normalized()
    to_target = (target - position).normalized()
    normal = (to_target - incident).normalized()
    if normal.magnitude() == 0:
        # Target lies straight along the incoming ray: use a grazing plate.
        normal = incident.perp()
    angle = normal.angle() + math.pi / 2
    return math.atan2(math.sin(angle), math.cos(angle))
