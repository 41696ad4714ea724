"""Simple command line demo that plays a level with an autopilot."""

from __future__ import annotations

from typing import Dict, Optional

from .config import AppConfig, resolve_config
from .entities import Viewport
from .game import HeliostatGame, Phase
from .optics import aim_angle
from .scheduler import FrameLoop, fixed_clock
from .vector import from_angle

# Distance from the anchor at which the autopilot "holds" the pointer.
GRIP_DISTANCE = 30.0


def steer_towards_receiver(game: HeliostatGame) -> None:
    """Drag every mirror so its reflection lands on the receiver center."""

    target = game.tower.receiver_center
    for mirror in game.mirrors:
        angle = aim_angle(mirror.position, game.sun, target)
        grip = mirror.position + from_angle(angle) * GRIP_DISTANCE
        game.pointer_down(mirror.position.as_tuple())
        game.pointer_move(grip.as_tuple())
        game.pointer_up()


def play_level(
    level: int,
    viewport: Viewport,
    *,
    fps: int = 60,
    autopilot: bool = True,
    max_frames: Optional[int] = None,
) -> Dict[str, object]:
    game = HeliostatGame(viewport, level=level)
    game.start()

    def tick(dt: float) -> bool:
        if autopilot:
            steer_towards_receiver(game)
        game.tick(dt)
        return game.state.running

    loop = FrameLoop(tick, fixed_clock(1.0 / fps))
    frames = loop.run(max_frames=max_frames)

    summary = game.summary()
    summary["frames"] = frames
    summary["elapsed"] = frames / fps
    return summary


def main(config: Optional[AppConfig] = None) -> Dict[str, object]:
    config = config or resolve_config()
    results = play_level(
        config.start_level, Viewport.from_size(config.window_size), fps=config.fps
    )

    outcome = "Victory" if results["phase"] == Phase.VICTORY.value else "Defeat"
    print("=== Heliostat Demo ===")
    print(f"Level: {results['level']}  Outcome: {outcome}")
    print(f"Energy: {results['energy']:.1f}/{results['max_energy']:.0f}")
    print(f"Simulated: {results['frames']} frames ({results['elapsed']:.2f} s)")
    print(f"Time of day: {results['time_of_day']:.3f}")
    return results


if __name__ == "__main__":
    main()
