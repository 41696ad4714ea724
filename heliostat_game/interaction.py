"""Pointer handling for selecting and steering mirrors.

Every handler is a pure function ``(mirrors, interaction, pointer) ->
(mirrors, interaction)``. Callers apply the returned values in one go, so a
mirror list is never observed half-updated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional, Sequence, Tuple

from .entities import Mirror
from .vector import Vec2

logger = logging.getLogger(__name__)

INTERACTION_RADIUS = 40.0

Mirrors = Tuple[Mirror, ...]


@dataclass(frozen=True)
class InteractionState:
    """Which mirror is highlighted and whether the pointer is held down."""

    selected_id: Optional[int] = None
    dragging: bool = False


IDLE_INTERACTION = InteractionState()


def find_mirror_at(
    mirrors: Sequence[Mirror], pointer: Vec2, radius: float = INTERACTION_RADIUS
) -> Optional[int]:
    """Return the id of the mirror under ``pointer``.

    Every mirror closer than ``radius`` replaces the previous candidate, so
    when anchors overlap the one listed last wins.
    """

    found: Optional[int] = None
    for mirror in mirrors:
        if mirror.position.distance_to(pointer) < radius:
            found = mirror.id
    return found


def _with_selection(mirrors: Sequence[Mirror], selected_id: Optional[int]) -> Mirrors:
    updated = []
    for mirror in mirrors:
        flag = mirror.id == selected_id
        if mirror.is_selected != flag:
            mirror = replace(mirror, is_selected=flag)
        updated.append(mirror)
    return tuple(updated)


def pointer_down(
    mirrors: Sequence[Mirror],
    interaction: InteractionState,
    pointer: Vec2,
    *,
    running: bool,
    radius: float = INTERACTION_RADIUS,
) -> Tuple[Mirrors, InteractionState]:
    if not running:
        return tuple(mirrors), interaction

    selected_id = find_mirror_at(mirrors, pointer, radius)
    if selected_id is None:
        logger.debug("Pointer at (%.1f, %.1f) cleared the selection", pointer.x, pointer.y)
        return _with_selection(mirrors, None), InteractionState()

    logger.debug("Selected mirror %d", selected_id)
    return (
        _with_selection(mirrors, selected_id),
        InteractionState(selected_id=selected_id, dragging=True),
    )


def pointer_move(
    mirrors: Sequence[Mirror],
    interaction: InteractionState,
    pointer: Vec2,
    *,
    running: bool,
) -> Tuple[Mirrors, InteractionState]:
    """Snap the dragged mirror to face ``pointer``."""

    if not running or not interaction.dragging or interaction.selected_id is None:
        return tuple(mirrors), interaction

    updated = []
    for mirror in mirrors:
        if mirror.id == interaction.selected_id:
            mirror = mirror.rotated_to((pointer - mirror.position).angle())
        updated.append(mirror)
    return tuple(updated), interaction


def pointer_up(
    mirrors: Sequence[Mirror],
    interaction: InteractionState,
    *,
    running: bool,
) -> Tuple[Mirrors, InteractionState]:
    """End a drag; the selection highlight stays."""

    if not running or not interaction.dragging:
        return tuple(mirrors), interaction
    return tuple(mirrors), replace(interaction, dragging=False)
