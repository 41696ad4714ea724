"""Interactive viewer for the heliostat game."""

from __future__ import annotations

from heliostat_game.ui.main import main


if __name__ == "__main__":
    raise SystemExit(main())
