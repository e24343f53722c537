"""Unit — a piece on the tactical map."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from tactigrid.world.tile import Position

DEFAULT_MOVE_POINTS = 5


@dataclass
class Unit:
    """A unit standing on the grid.

    Attributes:
        position: ``(x, y)`` grid coordinates.
        move_points: Movement budget per activation.  Never negative;
            any negative value written is stored as 0.
    """

    position: Position = (0, 0)
    move_points: int = DEFAULT_MOVE_POINTS

    def __setattr__(self, name: str, value: Any) -> None:
        """Store attributes, clamping ``move_points`` to zero or more."""
        if name == "move_points":
            value = max(0, int(value))
        super().__setattr__(name, value)
