"""Cooperative single-threaded frame loop."""

from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, Optional

logger = logging.getLogger(__name__)

TickCallback = Callable[[float], Optional[bool]]
Clock = Callable[[], float]


def fixed_clock(dt: float) -> Clock:
    """Clock reporting the same delta every frame, for headless runs."""

    if dt < 0:
        raise ValueError(f"Frame delta must be non-negative, got {dt}")
    return lambda: dt


class FrameLoop:
    """Run one tick per frame until stopped.

    Input actions posted between frames are applied in order right before
    the next tick, so a tick always sees the latest pointer state and never
    a half-applied one. ``stop`` only prevents further frames from being
    scheduled; the tick in progress always completes.
    """

    def __init__(
        self,
        tick: TickCallback,
        clock: Clock,
        *,
        poll: Optional[Callable[[], None]] = None,
    ) -> None:
        self.tick = tick
        self.clock = clock
        self.poll = poll
        self.frames = 0
        self._running = False
        self._pending: Deque[Callable[[], None]] = deque()

    @property
    def running(self) -> bool:
        return self._running

    def post(self, action: Callable[[], None]) -> None:
        self._pending.append(action)

    def stop(self) -> None:
        self._running = False

    def drain_input(self) -> int:
        applied = 0
        while self._pending:
            self._pending.popleft()()
            applied += 1
        return applied

    def run_frame(self) -> bool:
        """Run a single frame; return False when the tick asked to stop."""

        dt = self.clock()
        if self.poll is not None:
            self.poll()
        self.drain_input()
        result = self.tick(dt)
        self.frames += 1
        return result is not False

    def run(self, max_frames: Optional[int] = None) -> int:
        self._running = True
        ran = 0
        while self._running:
            if max_frames is not None and ran >= max_frames:
                break
            if not self.run_frame():
                self._running = False
            ran += 1
        self._running = False
        logger.debug("Frame loop stopped after %d frames", ran)
        return ran
