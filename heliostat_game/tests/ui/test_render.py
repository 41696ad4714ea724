"""Pixel probes for the deterministic pygame rendering.

Only a handful of pixels with a single obvious owner are checked, which keeps
the tests independent of font rasterisation and anti-aliasing.
"""

from __future__ import annotations

import math
from dataclasses import replace

import pytest

from heliostat_game.demo import steer_towards_receiver
from heliostat_game.entities import Viewport
from heliostat_game.game import HeliostatGame, Phase
from heliostat_game.ui import HeliostatUI, layout


def rgb(surface, position):
    return tuple(surface.get_at(position))[:3]


def make_ui(pygame, *, show_hud: bool = False) -> HeliostatUI:
    game = HeliostatGame(Viewport(640, 360))
    return HeliostatUI(game, surface=pygame.Surface((640, 360)), show_hud=show_hud)


def test_sun_is_drawn_at_dawn_position(pygame_module):
    ui = make_ui(pygame_module)

    rendered = ui.render()

    # Dawn sun sits at (64, 288); probe just inside its top edge.
    assert rgb(rendered, (64, 273)) == layout.SUN_COLOR


def test_receiver_glows_when_rays_land(pygame_module):
    ui = make_ui(pygame_module)
    ui.game.start()
    steer_towards_receiver(ui.game)
    ui.game.tick(1 / 60)

    rendered = ui.render()
    center = ui.game.tower.receiver_center
    expected = layout.lerp_color(layout.RECEIVER_IDLE_COLOR, (255, 255, 255), layout.receiver_glow(2.0))

    assert ui.game.report.total_energy == 2.0
    assert rgb(rendered, (int(center.x), int(center.y))) == expected


def test_receiver_stays_dark_without_hits(pygame_module):
    ui = make_ui(pygame_module)
    game = ui.game
    game.snapshot = replace(game.snapshot, mirrors=(game.mirrors[0].rotated_to(math.pi / 2),))

    rendered = ui.render()
    center = game.tower.receiver_center

    assert ui.current_report().total_energy == 0
    assert rgb(rendered, (int(center.x), int(center.y))) == layout.RECEIVER_IDLE_COLOR


def test_incident_rays_start_at_the_drawn_sun(pygame_module):
    ui = make_ui(pygame_module)
    game = ui.game
    game.start()
    for _ in range(120):
        steer_towards_receiver(game)
        game.tick(1 / 60)

    segments = ui.ray_segments(game.report)
    color, start, end, width = segments[0]

    # The report was evaluated before this tick moved the sun.
    assert game.report.sun != game.sun
    assert color == layout.INCIDENT_RAY_COLOR
    assert start == game.sun.as_tuple()
    assert end == game.mirrors[0].position.as_tuple()
    assert segments[1][0] == layout.HIT_RAY_COLOR


def test_render_with_hud_returns_surface(pygame_module):
    ui = make_ui(pygame_module, show_hud=True)

    rendered = ui.render()

    assert rendered is ui.surface
    assert rendered.get_size() == (640, 360)


def test_status_messages_follow_phase(pygame_module):
    ui = make_ui(pygame_module)
    game = ui.game

    assert "SPACE" in ui.status_message()
    game.start()
    assert ui.status_message() is None
    game.snapshot = replace(game.snapshot, state=replace(game.state, is_playing=False, victory=True))
    assert game.state.phase is Phase.VICTORY
    assert ui.status_message().startswith("Grid powered!")
    game.snapshot = replace(game.snapshot, state=replace(game.state, victory=False, game_over=True))
    assert "Press R" in ui.status_message()


def test_resize_replaces_surface(pygame_module):
    ui = make_ui(pygame_module)

    ui.resize((320, 200))

    assert ui.surface.get_size() == (320, 200)


@pytest.mark.parametrize(
    "time_of_day, expected",
    [(0.0, layout.DAWN_SKY), (0.29, layout.DAWN_SKY), (0.3, layout.MIDDAY_SKY), (0.69, layout.MIDDAY_SKY), (0.7, layout.DUSK_SKY), (1.0, layout.DUSK_SKY)],
)
def test_sky_palette_thresholds(time_of_day: float, expected):
    assert layout.sky_colors(time_of_day) == expected


def test_star_alpha_fades_at_both_ends():
    assert layout.star_alpha(0.0) == 1.0
    assert layout.star_alpha(0.1) == pytest.approx(0.5)
    assert layout.star_alpha(0.5) == 0.0
    assert layout.star_alpha(0.9) == pytest.approx(0.5)


def test_receiver_glow_saturates():
    assert layout.receiver_glow(0) == 0.0
    assert layout.receiver_glow(2.0) == pytest.approx(0.4)
    assert layout.receiver_glow(12.0) == 1.0


def test_ground_outline_spans_the_width():
    outline = layout.ground_outline(100, 80)

    assert outline[0] == (0, 80)
    assert outline[-1] == (100, 80)
    assert len(outline) == 2 + 11 + 1


def test_star_field_is_deterministic():
    stars = layout.star_positions(640, 360)

    assert stars == layout.star_positions(640, 360)
    assert len(stars) == layout.STAR_COUNT
    assert all(0 <= y <= 360 * 0.6 for _, y, _ in stars)
