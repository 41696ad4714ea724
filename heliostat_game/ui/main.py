"""Interactive pygame window and command line entry point."""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from functools import partial
from typing import List, Optional, Sequence

import pygame

from ..config import AppConfig, resolve_config
from ..entities import Viewport
from ..game import LEVEL_CONFIGS, HeliostatGame, Phase
from ..logging_config import setup_logging
from ..scheduler import FrameLoop
from .toolkit import HeliostatUI

logger = logging.getLogger(__name__)

POINTER_EVENTS = (
    pygame.MOUSEBUTTONDOWN,
    pygame.MOUSEBUTTONUP,
    pygame.MOUSEMOTION,
    pygame.FINGERDOWN,
    pygame.FINGERMOTION,
    pygame.FINGERUP,
)


class HeliostatApp:
    """Pygame driven application around :class:`HeliostatGame`."""

    def __init__(self, config: Optional[AppConfig] = None) -> None:
        self.config = config or resolve_config()
        pygame.init()
        pygame.display.set_caption("Heliostat")
        self.screen = pygame.display.set_mode(self.config.window_size, pygame.RESIZABLE)
        self.clock = pygame.time.Clock()

        self.game = HeliostatGame(
            Viewport.from_size(self.config.window_size), level=self.config.start_level
        )
        self.ui = HeliostatUI(self.game, surface=self.screen)
        self.loop = FrameLoop(self.tick, self.frame_delta, poll=self.poll)

    def frame_delta(self) -> float:
        return self.clock.tick(self.config.fps) / 1000.0

    # ------------------------------------------------------------------
    # Input
    def poll(self) -> None:
        for event in pygame.event.get():
            self.handle_event(event)

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.loop.stop()
        elif event.type == pygame.KEYDOWN:
            self._handle_key(event.key)
        elif event.type == pygame.VIDEORESIZE:
            self.loop.post(partial(self._handle_resize, event.size))
        elif event.type in POINTER_EVENTS or event.type == getattr(pygame, "WINDOWLEAVE", None):
            self.loop.post(partial(self.ui.handle_event, event))

    def _handle_key(self, key: int) -> None:
        phase = self.game.state.phase
        if key == pygame.K_ESCAPE:
            self.loop.stop()
        elif key == pygame.K_SPACE and phase is Phase.IDLE:
            self.loop.post(self.game.start)
        elif key == pygame.K_r and phase is not Phase.IDLE:
            self.loop.post(self.game.restart)
        elif key == pygame.K_n and phase is Phase.VICTORY:
            self.loop.post(self.game.next_level)

    def _handle_resize(self, size) -> None:
        self.screen = pygame.display.set_mode(size, pygame.RESIZABLE)
        self.ui.surface = self.screen
        self.game.resize(Viewport.from_size(size))

    # ------------------------------------------------------------------
    # Main loop
    def tick(self, dt: float) -> bool:
        self.game.tick(dt)
        self.ui.render()
        pygame.display.flip()
        return True

    def run(self) -> None:
        logger.info("Starting heliostat window at %sx%s", *self.config.window_size)
        try:
            self.loop.run()
        finally:
            pygame.quit()


def run(config: Optional[AppConfig] = None) -> None:
    """Entry point helper that instantiates and runs the UI."""

    app = HeliostatApp(config)
    app.run()


def bootstrap_config(config: Optional[AppConfig] = None) -> AppConfig:
    """Return the resolved configuration and print it."""

    config = config or resolve_config()
    print(config.describe())
    print("Set the HELIOSTAT_* environment variables to override these values.")
    return config


def level_table_lines() -> List[str]:
    lines = ["Available levels:"]
    for number, level in enumerate(LEVEL_CONFIGS, start=1):
        lines.append(
            f"  {number}: {level.mirrors} mirror(s), target {level.target:.0f}, "
            f"time scale {level.time_scale:g}"
        )
    return lines


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Heliostat launcher")
    parser.add_argument(
        "--info",
        action="store_true",
        help="Print the resolved configuration and exit without launching the UI.",
    )
    parser.add_argument("--list-levels", action="store_true", help="Print the level table and exit.")
    parser.add_argument("--level", type=int, help="Level to start on (overrides HELIOSTAT_START_LEVEL).")
    parser.add_argument("--demo", action="store_true", help="Play the level headless with the autopilot.")
    parser.add_argument("--log-file", help="Also write log output to this file.")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list_levels:
        print("\n".join(level_table_lines()))
        return 0

    config = resolve_config()
    if args.level is not None:
        if args.level < 1:
            parser.error("--level must be at least 1")
        config = replace(config, start_level=args.level)

    if args.info:
        bootstrap_config(config)
        return 0

    setup_logging(config.log_level, args.log_file)
    if args.demo:
        from ..demo import main as demo_main

        results = demo_main(config)
        return 0 if results["phase"] == Phase.VICTORY.value else 1

    run(config)
    return 0


if __name__ == "__main__":  # pragma: no cover - manual invocation entry point
    raise SystemExit(main())
