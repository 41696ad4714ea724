"""Heliostat game package."""

from .game import GameState, HeliostatGame, LevelConfig, Phase, Snapshot, step
from .optics import FieldReport, evaluate_field
from .ui import HeliostatUI

__all__ = [
    "FieldReport",
    "GameState",
    "HeliostatGame",
    "HeliostatUI",
    "LevelConfig",
    "Phase",
    "Snapshot",
    "evaluate_field",
    "step",
]
