"""Minimal pygame based UI helpers for headless testing.

This module keeps rendering deterministic so it can be exercised in
automated tests using the SDL ``dummy`` video driver. Canvas coordinates
are surface pixels, so pointer positions are handed to the game unchanged.
"""

from __future__ import annotations

import os
from typing import Iterable, List, Optional, Tuple

from ..game import HeliostatGame, Phase
from ..optics import FieldReport, Receiver, evaluate_field
from ..vector import Vec2, from_angle
from . import layout

Point = Tuple[float, float]
RaySegment = Tuple[layout.Color, Point, Point, int]


# Pygame is required for the UI helpers only.  The import is performed
# lazily in ``ensure_pygame`` so test environments can control the SDL
# configuration (e.g. select the ``dummy`` video driver) first.
_PYGAME = None


def ensure_pygame():
    global _PYGAME
    if _PYGAME is None:
        os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
        _PYGAME = __import__("pygame")
        _PYGAME.display.init()
        _PYGAME.font.init()
    return _PYGAME


def _point(v: Vec2) -> Tuple[float, float]:
    return (v.x, v.y)


class HeliostatUI:
    """Translate pygame input into pointer actions and draw the field."""

    def __init__(
        self,
        game: HeliostatGame,
        *,
        surface=None,
        show_hud: bool = True,
    ) -> None:
        pygame = ensure_pygame()
        self.game = game
        size = (int(game.viewport.width), int(game.viewport.height))
        self.surface = surface or pygame.Surface(size)
        self.show_hud = show_hud
        self.font = pygame.font.Font(None, 22) if show_hud else None

    # ------------------------------------------------------------------
    # Input handling
    def process_events(self, events: Iterable[object]) -> None:
        for event in events:
            self.handle_event(event)

    def handle_event(self, event) -> bool:
        """Route one pointer event to the game; return True if it was consumed."""

        pygame = ensure_pygame()
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self.game.pointer_down(event.pos)
        elif event.type == pygame.MOUSEMOTION:
            self.game.pointer_move(event.pos)
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self.game.pointer_up()
        elif event.type == getattr(pygame, "WINDOWLEAVE", None):
            self.game.pointer_up()
        elif event.type == pygame.FINGERDOWN:
            self.game.pointer_down(self._finger_position(event))
        elif event.type == pygame.FINGERMOTION:
            self.game.pointer_move(self._finger_position(event))
        elif event.type == pygame.FINGERUP:
            self.game.pointer_up()
        else:
            return False
        return True

    def _finger_position(self, event) -> Tuple[float, float]:
        # Touch events carry coordinates normalised to the window size.
        width, height = self.surface.get_size()
        return (event.x * width, event.y * height)

    def resize(self, size: Tuple[int, int]) -> None:
        pygame = ensure_pygame()
        self.surface = pygame.Surface(size)

    # ------------------------------------------------------------------
    # Rendering helpers
    def current_report(self) -> FieldReport:
        report = self.game.report
        if report is None:
            # Nothing simulated yet: evaluate so idle levels still show rays.
            receiver = Receiver.from_tower(self.game.tower)
            report = evaluate_field(self.game.sun, receiver, self.game.mirrors)
        return report

    def render(self):
        report = self.current_report()
        for layer in layout.DRAW_ORDER:
            if layer == "sky":
                self._draw_sky()
            elif layer == "sun":
                self._draw_sun()
            elif layer == "ground":
                self._draw_ground()
            elif layer == "tower":
                self._draw_tower()
            elif layer == "rays":
                self._draw_rays(report)
            elif layer == "mirrors":
                self._draw_mirrors()
            elif layer == "receiver":
                self._draw_receiver(report)
            elif layer == "hud" and self.show_hud:
                self._draw_hud()
        return self.surface

    def _draw_sky(self) -> None:
        pygame = ensure_pygame()
        width, height = self.surface.get_size()
        time_of_day = self.game.state.time_of_day
        stops = layout.sky_colors(time_of_day)
        for y in range(height):
            color = layout.gradient_color(stops, y / max(height - 1, 1))
            pygame.draw.line(self.surface, color, (0, y), (width, y))

        alpha = layout.star_alpha(time_of_day)
        if alpha <= 0:
            return
        for x, y, radius in layout.star_positions(width, height):
            background = self.surface.get_at((min(x, width - 1), min(y, height - 1)))
            color = layout.lerp_color(tuple(background)[:3], layout.STAR_COLOR, alpha)
            pygame.draw.circle(self.surface, color, (x, y), radius)

    def _draw_sun(self) -> None:
        pygame = ensure_pygame()
        pygame.draw.circle(self.surface, layout.SUN_COLOR, _point(self.game.sun), layout.SUN_RADIUS)

    def _draw_ground(self) -> None:
        pygame = ensure_pygame()
        width, height = self.surface.get_size()
        pygame.draw.polygon(self.surface, layout.GROUND_COLOR, layout.ground_outline(width, height))

    def _draw_tower(self) -> None:
        pygame = ensure_pygame()
        tower = self.game.tower
        x, y = tower.position.x, tower.position.y
        outline = [
            (x - layout.TOWER_BASE_WIDTH / 2, y),
            (x - layout.TOWER_TOP_WIDTH / 2, y - tower.height),
            (x + layout.TOWER_TOP_WIDTH / 2, y - tower.height),
            (x + layout.TOWER_BASE_WIDTH / 2, y),
        ]
        pygame.draw.polygon(self.surface, layout.TOWER_COLOR, outline)

    def ray_segments(self, report: FieldReport) -> List[RaySegment]:
        """Line segments ``(color, start, end, width)`` for every mirror's rays.

        Incident rays start at the sun as drawn, which may already have moved
        past the position the report was evaluated against.
        """

        sun = _point(self.game.sun)
        receiver = _point(report.receiver.center)
        segments: List[RaySegment] = []
        for reading in report.readings:
            origin = _point(reading.origin)
            segments.append((layout.INCIDENT_RAY_COLOR, sun, origin, 2))
            if reading.hit:
                segments.append((layout.HIT_RAY_COLOR, origin, receiver, 4))
            else:
                segments.append((layout.MISS_RAY_COLOR, origin, _point(reading.ray_end), 1))
        return segments

    def _draw_rays(self, report: FieldReport) -> None:
        pygame = ensure_pygame()
        for color, start, end, width in self.ray_segments(report):
            pygame.draw.line(self.surface, color, start, end, width)

    def _draw_mirrors(self) -> None:
        pygame = ensure_pygame()
        for mirror in self.game.mirrors:
            base = mirror.position
            pygame.draw.line(
                self.surface,
                layout.STAND_COLOR,
                _point(base),
                _point(base + Vec2(0.0, layout.MIRROR_STAND_HEIGHT)),
                2,
            )
            half = from_angle(mirror.angle) * (mirror.width / 2)
            color = layout.MIRROR_SELECTED_COLOR if mirror.is_selected else layout.MIRROR_COLOR
            pygame.draw.line(self.surface, color, _point(base - half), _point(base + half), 4)
            pygame.draw.circle(self.surface, layout.MIRROR_PIVOT_COLOR, _point(base), 3)

    def _draw_receiver(self, report: FieldReport) -> None:
        pygame = ensure_pygame()
        center = _point(report.receiver.center)
        radius = report.receiver.radius
        intensity = layout.receiver_glow(report.total_energy)
        if intensity > 0:
            core = layout.lerp_color(layout.RECEIVER_IDLE_COLOR, (255, 255, 255), intensity)
            pygame.draw.circle(self.surface, layout.RECEIVER_CORE_COLOR, center, radius)
            pygame.draw.circle(self.surface, core, center, radius - 2)
            pygame.draw.circle(self.surface, layout.RECEIVER_GLOW_COLOR, center, radius + 5, 3)
        else:
            pygame.draw.circle(self.surface, layout.RECEIVER_IDLE_COLOR, center, radius)
            pygame.draw.circle(self.surface, layout.TOWER_COLOR, center, radius, 1)

    def _draw_hud(self) -> None:
        pygame = ensure_pygame()
        state = self.game.state
        x = layout.HUD_PADDING
        y = layout.HUD_PADDING

        lines = [
            f"Level {state.level}   Score {state.score}",
            f"Energy {int(state.energy)} / {int(state.max_energy)}",
        ]
        for text in lines:
            self.surface.blit(self.font.render(text, True, layout.TEXT_COLOR), (x, y))
            y += layout.HUD_LINE_HEIGHT

        for fraction in (state.progress, state.time_of_day):
            bar = pygame.Rect(x, y, layout.HUD_BAR_WIDTH, layout.HUD_BAR_HEIGHT)
            pygame.draw.rect(self.surface, layout.BAR_BACKGROUND_COLOR, bar)
            filled = bar.copy()
            filled.width = int(layout.HUD_BAR_WIDTH * max(0.0, min(1.0, fraction)))
            pygame.draw.rect(self.surface, layout.ACCENT_COLOR, filled)
            y += layout.HUD_BAR_HEIGHT + 8

        message = self.status_message()
        if message:
            self.surface.blit(self.font.render(message, True, layout.ACCENT_COLOR), (x, y + 4))

    def status_message(self) -> Optional[str]:
        phase = self.game.state.phase
        if phase is Phase.IDLE:
            return "Press SPACE to start the day"
        if phase is Phase.VICTORY:
            return "Grid powered! Press N for the next level"
        if phase is Phase.DEFEAT:
            return "Insufficient energy generated. Press R to retry"
        return None


__all__ = ["HeliostatUI"]
