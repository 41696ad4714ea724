import math
import sys
from dataclasses import replace
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from heliostat_game.demo import play_level, steer_towards_receiver
from heliostat_game.entities import Viewport
from heliostat_game.game import (
    LEVEL_CONFIGS,
    GameState,
    HeliostatGame,
    LevelConfig,
    Phase,
    add_energy,
    advance_day,
    init_level,
    level_config,
    start,
    step,
    sun_position,
)
from heliostat_game.vector import Vec2


VIEWPORT = Viewport(1000, 600)
LEVEL_ONE = LEVEL_CONFIGS[0]


def running_state(**overrides) -> GameState:
    state = GameState(max_energy=500, is_playing=True)
    return replace(state, **overrides)


@pytest.mark.parametrize(
    "level, expected",
    [(1, LEVEL_CONFIGS[0]), (3, LEVEL_CONFIGS[2]), (5, LEVEL_CONFIGS[4]), (42, LEVEL_CONFIGS[4]), (0, LEVEL_CONFIGS[0]), (-3, LEVEL_CONFIGS[0])],
)
def test_level_numbers_are_clamped_into_table(level: int, expected: LevelConfig):
    assert level_config(level) == expected


def test_init_level_lays_out_field_from_viewport():
    snapshot = init_level(3, VIEWPORT)

    assert snapshot.state.phase is Phase.IDLE
    assert snapshot.state.energy == 0
    assert snapshot.state.time_of_day == 0
    assert snapshot.state.max_energy == 2000
    assert [mirror.id for mirror in snapshot.mirrors] == [0, 1, 2]
    assert [mirror.position.x for mirror in snapshot.mirrors] == pytest.approx([225, 350, 475])
    assert all(mirror.position.y == 550 for mirror in snapshot.mirrors)
    assert all(mirror.angle == 0 and not mirror.is_selected for mirror in snapshot.mirrors)
    assert snapshot.tower.position == Vec2(800, 600)
    assert snapshot.tower.receiver_center.y == pytest.approx(410)
    assert snapshot.sun == sun_position(0.0, VIEWPORT)


def test_sun_follows_a_sine_arc():
    dawn = sun_position(0.0, VIEWPORT)
    noon = sun_position(0.5, VIEWPORT)
    dusk = sun_position(1.0, VIEWPORT)

    assert (dawn.x, dawn.y) == pytest.approx((100, 480))
    assert (noon.x, noon.y) == pytest.approx((500, 60))
    assert (dusk.x, dusk.y) == pytest.approx((900, 480))


def test_step_does_nothing_until_started():
    snapshot = init_level(1, VIEWPORT)

    assert step(snapshot, 1.0) is snapshot
    assert start(snapshot).state.phase is Phase.RUNNING


def test_negative_frame_delta_is_rejected():
    snapshot = start(init_level(1, VIEWPORT))

    with pytest.raises(ValueError):
        step(snapshot, -0.1)


def test_day_advances_by_time_scale():
    state, sun = advance_day(running_state(), Vec2(0, 0), 3.0, LEVEL_ONE, VIEWPORT)

    # Level one runs at half speed over a thirty second day.
    assert state.time_of_day == pytest.approx(3.0 / 30 * 0.5)
    assert state.phase is Phase.RUNNING
    assert sun == sun_position(state.time_of_day, VIEWPORT)


def test_reaching_dusk_without_enough_energy_is_defeat():
    state, sun = advance_day(
        running_state(energy=120, time_of_day=0.99), Vec2(1, 2), 5.0, LEVEL_ONE, VIEWPORT
    )

    assert state.time_of_day == 1.0
    assert state.game_over is True
    assert state.victory is False
    assert state.is_playing is False
    assert state.phase is Phase.DEFEAT
    assert sun == Vec2(1, 2)


def test_meeting_target_before_dusk_is_victory():
    state, _ = advance_day(running_state(energy=500, score=40), Vec2(0, 0), 1 / 60, LEVEL_ONE, VIEWPORT)

    assert state.victory is True
    assert state.game_over is False
    assert state.is_playing is False
    assert state.score == 540
    assert 0 < state.time_of_day < 1


def test_dusk_is_checked_before_the_energy_target():
    state, _ = advance_day(
        running_state(energy=510, time_of_day=0.999), Vec2(0, 0), 1.0, LEVEL_ONE, VIEWPORT
    )

    assert state.phase is Phase.DEFEAT


def test_terminal_snapshots_are_frozen():
    snapshot = start(init_level(1, VIEWPORT))
    won = replace(snapshot, state=replace(snapshot.state, energy=500))
    won = step(won, 1 / 60)

    assert won.state.phase is Phase.VICTORY
    assert step(won, 1 / 60) is won
    assert add_energy(won.state, 10) is won.state


def test_energy_is_capped_above_target():
    state = add_energy(running_state(energy=540), 100)

    assert state.energy == pytest.approx(550)
    assert add_energy(state, -5) is state


def test_energy_only_accrues_while_running():
    idle = GameState(max_energy=500)

    assert add_energy(idle, 20) is idle


def test_single_mirror_level_wins_in_about_four_seconds():
    results = play_level(1, Viewport(1280, 720), fps=60)

    # +2.0 per frame at 60 fps reaches the 500 target on frame 250.
    assert results["phase"] == Phase.VICTORY.value
    assert results["frames"] == 250
    assert results["elapsed"] == pytest.approx(250 / 60)
    assert results["energy"] == pytest.approx(500)
    assert results["time_of_day"] < 1.0
    assert results["score"] == 500


def test_untouched_mirrors_eventually_lose_the_day():
    results = play_level(2, Viewport(1280, 720), fps=20, autopilot=False)

    assert results["phase"] == Phase.DEFEAT.value
    assert results["time_of_day"] == 1.0
    assert results["energy"] < results["max_energy"]


def test_energy_never_decreases_during_a_level():
    game = HeliostatGame(Viewport(1280, 720), level=2)
    game.start()
    previous = game.state.energy

    for frame in range(400):
        if frame % 3 == 0:
            steer_towards_receiver(game)
        game.tick(1 / 30)
        assert game.state.energy >= previous
        previous = game.state.energy


def test_tick_updates_mirror_efficiency_and_report():
    game = HeliostatGame(Viewport(1280, 720))
    game.start()
    steer_towards_receiver(game)

    game.tick(1 / 60)

    assert game.report is not None
    assert game.report.total_energy == 2.0
    assert game.mirrors[0].efficiency == pytest.approx(1.0)
    summary = game.summary()
    assert summary["phase"] == "running"
    assert summary["frame_energy"] == 2.0
    assert summary["rays"][0]["tier"] == "perfect"


def test_restart_and_next_level_keep_score():
    game = HeliostatGame(Viewport(1280, 720))
    game.start()
    game.snapshot = replace(game.snapshot, state=replace(game.state, energy=500))
    game.tick(1 / 60)
    assert game.state.phase is Phase.VICTORY
    banked = game.state.score
    assert banked == math.floor(game.state.energy)

    game.next_level()

    assert game.state.level == 2
    assert game.state.phase is Phase.RUNNING
    assert game.state.score == banked
    assert game.state.energy == 0
    assert len(game.mirrors) == 2

    game.restart()

    assert game.state.level == 2
    assert game.state.score == banked
    assert game.state.time_of_day == 0


def test_levels_past_the_table_reuse_the_last_entry():
    game = HeliostatGame(Viewport(1280, 720), level=9)

    assert game.state.level == 9
    assert game.state.max_energy == LEVEL_CONFIGS[-1].target
    assert len(game.mirrors) == LEVEL_CONFIGS[-1].mirrors


def test_pointer_drag_through_game_sets_exact_angle():
    game = HeliostatGame(VIEWPORT)
    game.start()
    anchor = game.mirrors[0].position

    game.pointer_down((anchor.x + 5, anchor.y))
    game.pointer_move((anchor.x, anchor.y - 120))
    game.pointer_up()

    assert game.mirrors[0].angle == math.atan2(-120.0, 0.0)
    assert game.mirrors[0].is_selected
    assert game.snapshot.interaction.dragging is False


def test_viewport_must_be_positive():
    with pytest.raises(ValueError):
        Viewport(0, 600)


def test_level_changes_need_the_matching_phase():
    game = HeliostatGame(VIEWPORT)

    game.restart()
    game.next_level()
    assert game.state.phase is Phase.IDLE
    assert game.state.level == 1

    game.start()
    game.next_level()
    assert game.state.level == 1

    game.snapshot = replace(game.snapshot, state=replace(game.state, is_playing=False, victory=True))
    game.next_level()
    game.next_level()
    assert game.state.level == 2
