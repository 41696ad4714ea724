"""User interface package for the heliostat game."""

from .main import (
    HeliostatApp,
    bootstrap_config,
    main,
    run,
)
from .toolkit import HeliostatUI

__all__ = [
    "HeliostatApp",
    "HeliostatUI",
    "bootstrap_config",
    "main",
    "run",
]
