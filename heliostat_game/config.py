"""Runtime configuration read from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Tuple

WINDOW_SIZE_ENV_VAR = "HELIOSTAT_WINDOW_SIZE"
START_LEVEL_ENV_VAR = "HELIOSTAT_START_LEVEL"
FPS_ENV_VAR = "HELIOSTAT_FPS"
LOG_LEVEL_ENV_VAR = "HELIOSTAT_LOG_LEVEL"

DEFAULT_WINDOW_SIZE: Tuple[int, int] = (1280, 720)
DEFAULT_START_LEVEL = 1
DEFAULT_FPS = 60
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class AppConfig:
    """Resolved settings for the app and the headless demo."""

    window_size: Tuple[int, int] = DEFAULT_WINDOW_SIZE
    start_level: int = DEFAULT_START_LEVEL
    fps: int = DEFAULT_FPS
    log_level: str = DEFAULT_LOG_LEVEL

    def describe(self) -> str:
        width, height = self.window_size
        return (
            "Heliostat configuration\n"
            f"  window: {width}x{height}\n"
            f"  start level: {self.start_level}\n"
            f"  fps: {self.fps}\n"
            f"  log level: {self.log_level}"
        )


def _read(env_var: str) -> Optional[str]:
    value = os.environ.get(env_var)
    if value is None or not value.strip():
        return None
    return value.strip()


def parse_window_size(value: str) -> Tuple[int, int]:
    """Parse ``WIDTHxHEIGHT`` into a pair of positive integers."""

    parts = value.lower().split("x")
    if len(parts) != 2:
        raise ValueError(f"Window size must look like 1280x720, got {value!r}")
    try:
        width, height = (int(part) for part in parts)
    except ValueError as exc:
        raise ValueError(f"Window size must look like 1280x720, got {value!r}") from exc
    if width <= 0 or height <= 0:
        raise ValueError(f"Window size must be positive, got {value!r}")
    return width, height


def _read_positive_int(env_var: str, fallback: int) -> int:
    value = _read(env_var)
    if value is None:
        return fallback
    try:
        number = int(value)
    except ValueError as exc:
        raise ValueError(f"{env_var} must be an integer, got {value!r}") from exc
    if number <= 0:
        raise ValueError(f"{env_var} must be positive, got {value!r}")
    return number


def resolve_config() -> AppConfig:
    """Resolve configuration using environment variables over the defaults."""

    size_value = _read(WINDOW_SIZE_ENV_VAR)
    try:
        window_size = parse_window_size(size_value) if size_value else DEFAULT_WINDOW_SIZE
    except ValueError as exc:
        raise ValueError(f"{WINDOW_SIZE_ENV_VAR}: {exc}") from exc

    return AppConfig(
        window_size=window_size,
        start_level=_read_positive_int(START_LEVEL_ENV_VAR, DEFAULT_START_LEVEL),
        fps=_read_positive_int(FPS_ENV_VAR, DEFAULT_FPS),
        log_level=(_read(LOG_LEVEL_ENV_VAR) or DEFAULT_LOG_LEVEL).upper(),
    )
