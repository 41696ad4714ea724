"""Day cycle, level progression and the per-frame simulation step."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple

from .entities import Mirror, Tower, Viewport
from .interaction import InteractionState, pointer_down, pointer_move, pointer_up
from .optics import FieldReport, Receiver, apply_efficiency, evaluate_field
from .vector import Vec2

logger = logging.getLogger(__name__)


DAY_DURATION_SECONDS = 30.0
ENERGY_HEADROOM = 1.1


@dataclass(frozen=True)
class LevelConfig:
    mirrors: int
    target: float
    time_scale: float


LEVEL_CONFIGS: Tuple[LevelConfig, ...] = (
    LevelConfig(mirrors=1, target=500, time_scale=0.5),
    LevelConfig(mirrors=2, target=1200, time_scale=0.8),
    LevelConfig(mirrors=3, target=2000, time_scale=1.0),
    LevelConfig(mirrors=4, target=3500, time_scale=1.2),
    LevelConfig(mirrors=5, target=5000, time_scale=1.5),
)


def level_config(level: int, levels: Sequence[LevelConfig] = LEVEL_CONFIGS) -> LevelConfig:
    """Configuration for a 1-based level number, clamped into the table."""

    index = min(max(int(level), 1) - 1, len(levels) - 1)
    return levels[index]


class Phase(Enum):
    IDLE = "idle"
    RUNNING = "running"
    VICTORY = "victory"
    DEFEAT = "defeat"


@dataclass(frozen=True)
class GameState:
    score: int = 0
    energy: float = 0.0
    max_energy: float = 500.0
    level: int = 1
    time_of_day: float = 0.0  # 0 is dawn, 1 is dusk
    is_playing: bool = False
    game_over: bool = False
    victory: bool = False

    @property
    def phase(self) -> Phase:
        if self.victory:
            return Phase.VICTORY
        if self.game_over:
            return Phase.DEFEAT
        if self.is_playing:
            return Phase.RUNNING
        return Phase.IDLE

    @property
    def running(self) -> bool:
        return self.phase is Phase.RUNNING

    @property
    def progress(self) -> float:
        if self.max_energy <= 0:
            return 1.0
        return min(self.energy / self.max_energy, 1.0)


@dataclass(frozen=True)
class Snapshot:
    """Everything the simulation knows at the end of a tick."""

    state: GameState
    mirrors: Tuple[Mirror, ...]
    tower: Tower
    sun: Vec2
    viewport: Viewport
    interaction: InteractionState = field(default_factory=InteractionState)
    report: Optional[FieldReport] = None


def sun_position(time_of_day: float, viewport: Viewport) -> Vec2:
    """Sun on a sine arc sweeping left to right, highest at midday."""

    w, h = viewport.width, viewport.height
    x = w * 0.1 + (w * 0.8) * time_of_day
    y = h * 0.8 - (h * 0.7) * math.sin(time_of_day * math.pi)
    return Vec2(x, y)


def place_mirrors(count: int, viewport: Viewport) -> Tuple[Mirror, ...]:
    w, h = viewport.width, viewport.height
    start_x = w * 0.1
    end_x = w * 0.6
    spacing = (end_x - start_x) / (count + 1)
    return tuple(
        Mirror(id=i, position=Vec2(start_x + spacing * (i + 1), h - 50))
        for i in range(count)
    )


def init_level(
    level: int,
    viewport: Viewport,
    *,
    score: int = 0,
    levels: Sequence[LevelConfig] = LEVEL_CONFIGS,
) -> Snapshot:
    """Build a fresh, idle snapshot for ``level``."""

    level = max(int(level), 1)
    config = level_config(level, levels)
    state = GameState(score=score, max_energy=config.target, level=level)
    return Snapshot(
        state=state,
        mirrors=place_mirrors(config.mirrors, viewport),
        tower=Tower.for_viewport(viewport),
        sun=sun_position(0.0, viewport),
        viewport=viewport,
    )


def start(snapshot: Snapshot) -> Snapshot:
    if snapshot.state.phase is not Phase.IDLE:
        return snapshot
    return replace(snapshot, state=replace(snapshot.state, is_playing=True))


def add_energy(state: GameState, amount: float) -> GameState:
    """Accrue ``amount`` while running, capped just above the level target."""

    if not state.running or amount <= 0:
        return state
    energy = min(state.energy + amount, state.max_energy * ENERGY_HEADROOM)
    return replace(state, energy=energy)


def advance_day(
    state: GameState,
    sun: Vec2,
    dt: float,
    config: LevelConfig,
    viewport: Viewport,
) -> Tuple[GameState, Vec2]:
    if not state.running:
        return state, sun

    time_of_day = state.time_of_day + (1 / DAY_DURATION_SECONDS) * config.time_scale * dt
    if time_of_day >= 1.0:
        return replace(state, time_of_day=1.0, game_over=True, is_playing=False), sun

    sun = sun_position(time_of_day, viewport)
    if state.energy >= state.max_energy:
        won = replace(
            state,
            time_of_day=time_of_day,
            victory=True,
            is_playing=False,
            score=state.score + int(math.floor(state.energy)),
        )
        return won, sun
    return replace(state, time_of_day=time_of_day), sun


def step(
    snapshot: Snapshot,
    dt: float,
    levels: Sequence[LevelConfig] = LEVEL_CONFIGS,
) -> Snapshot:
    """Advance the world by one frame of ``dt`` seconds.

    Optics are evaluated against the current sun, the resulting energy is
    banked, and only then does the clock move and the sun follow it. Frames
    outside the running phase leave the snapshot untouched.
    """

    if dt < 0:
        raise ValueError(f"Frame delta must be non-negative, got {dt}")
    if not snapshot.state.running:
        return snapshot

    report = evaluate_field(snapshot.sun, Receiver.from_tower(snapshot.tower), snapshot.mirrors)
    mirrors = apply_efficiency(snapshot.mirrors, report)
    state = add_energy(snapshot.state, report.total_energy)
    state, sun = advance_day(
        state, snapshot.sun, dt, level_config(state.level, levels), snapshot.viewport
    )
    return replace(snapshot, state=state, mirrors=mirrors, sun=sun, report=report)


class HeliostatGame:
    """Stateful front for the pure simulation functions.

    Holds the current :class:`Snapshot` and swaps it for a new one on every
    tick or input event.
    """

    def __init__(
        self,
        viewport: Viewport,
        *,
        level: int = 1,
        levels: Sequence[LevelConfig] = LEVEL_CONFIGS,
    ) -> None:
        if not levels:
            raise ValueError("At least one level configuration is required.")
        self.levels: Tuple[LevelConfig, ...] = tuple(levels)
        self.snapshot = init_level(level, viewport, levels=self.levels)
        logger.info("Initialised level %d", self.snapshot.state.level)

    # ------------------------------------------------------------------
    # Accessors
    @property
    def state(self) -> GameState:
        return self.snapshot.state

    @property
    def mirrors(self) -> Tuple[Mirror, ...]:
        return self.snapshot.mirrors

    @property
    def sun(self) -> Vec2:
        return self.snapshot.sun

    @property
    def tower(self) -> Tower:
        return self.snapshot.tower

    @property
    def viewport(self) -> Viewport:
        return self.snapshot.viewport

    @property
    def report(self) -> Optional[FieldReport]:
        return self.snapshot.report

    @property
    def config(self) -> LevelConfig:
        return level_config(self.state.level, self.levels)

    # ------------------------------------------------------------------
    # Level lifecycle
    def init_level(self, level: int) -> None:
        self.snapshot = init_level(
            level, self.snapshot.viewport, score=self.state.score, levels=self.levels
        )
        logger.info(
            "Initialised level %d (%d mirrors, target %.0f)",
            self.state.level,
            len(self.mirrors),
            self.state.max_energy,
        )

    def start(self) -> None:
        if self.state.phase is not Phase.IDLE:
            return
        self.snapshot = start(self.snapshot)
        logger.info("Level %d started", self.state.level)

    def restart(self) -> None:
        if self.state.phase is Phase.IDLE:
            return
        self.init_level(self.state.level)
        self.start()

    def next_level(self) -> None:
        # Only a cleared level advances, however many requests were queued.
        if self.state.phase is not Phase.VICTORY:
            return
        self.init_level(self.state.level + 1)
        self.start()

    def resize(self, viewport: Viewport) -> None:
        # Tower and mirrors keep their placement until the next level init.
        self.snapshot = replace(self.snapshot, viewport=viewport)

    def tick(self, dt: float) -> Snapshot:
        before = self.state.phase
        self.snapshot = step(self.snapshot, dt, self.levels)
        after = self.state.phase
        if before is not after:
            if after is Phase.VICTORY:
                logger.info(
                    "Level %d cleared with %.1f energy at t=%.3f",
                    self.state.level,
                    self.state.energy,
                    self.state.time_of_day,
                )
            elif after is Phase.DEFEAT:
                logger.info(
                    "Level %d failed: %.1f/%.0f energy by dusk",
                    self.state.level,
                    self.state.energy,
                    self.state.max_energy,
                )
        return self.snapshot

    # ------------------------------------------------------------------
    # Input
    def pointer_down(self, position: Tuple[float, float]) -> None:
        mirrors, interaction = pointer_down(
            self.mirrors,
            self.snapshot.interaction,
            Vec2(float(position[0]), float(position[1])),
            running=self.state.running,
        )
        self.snapshot = replace(self.snapshot, mirrors=mirrors, interaction=interaction)

    def pointer_move(self, position: Tuple[float, float]) -> None:
        mirrors, interaction = pointer_move(
            self.mirrors,
            self.snapshot.interaction,
            Vec2(float(position[0]), float(position[1])),
            running=self.state.running,
        )
        self.snapshot = replace(self.snapshot, mirrors=mirrors, interaction=interaction)

    def pointer_up(self) -> None:
        mirrors, interaction = pointer_up(
            self.mirrors, self.snapshot.interaction, running=self.state.running
        )
        self.snapshot = replace(self.snapshot, mirrors=mirrors, interaction=interaction)

    # ------------------------------------------------------------------
    # Reporting
    def summary(self) -> Dict[str, object]:
        state = self.state
        summary: Dict[str, object] = {
            "level": state.level,
            "phase": state.phase.value,
            "score": state.score,
            "energy": state.energy,
            "max_energy": state.max_energy,
            "time_of_day": state.time_of_day,
            "sun": list(self.sun.as_tuple()),
            "receiver": list(self.tower.receiver_center.as_tuple()),
            "mirrors": [mirror.payload() for mirror in self.mirrors],
        }
        if self.report is not None:
            summary["frame_energy"] = self.report.total_energy
            summary["rays"] = [reading.payload() for reading in self.report.readings]
        return summary

