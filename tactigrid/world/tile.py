"""Tile — a single cell of the tactical map.

A tile pairs a terrain type with the movement cost a unit pays to enter
it.  The cost is always derived from the terrain through ``MOVE_COSTS`` so
that generators and hand-authored maps agree on what each terrain means.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

Position = tuple[int, int]

BLOCKED = -1


class TerrainType(IntEnum):
    """Terrain categories.

    Values are integers so whole maps can be stored as NumPy arrays.
    """

    GRASS = 0
    WATER = 1
    MOUNTAIN = 2
    FOREST = 3
    DESERT = 4
    ROAD = 5
    WALL = 6

    @classmethod
    def from_name(cls, name: str) -> TerrainType:
        """Look up a terrain type by case-insensitive name."""
        return cls[name.upper()]


MOVE_COSTS: dict[TerrainType, int] = {
    TerrainType.GRASS: 1,
    TerrainType.ROAD: 1,
    TerrainType.FOREST: 2,
    TerrainType.DESERT: 2,
    TerrainType.WATER: BLOCKED,
    TerrainType.MOUNTAIN: BLOCKED,
    TerrainType.WALL: BLOCKED,
}


def move_cost_for(terrain: TerrainType) -> int:
    """Return the movement cost of ``terrain`` (``BLOCKED`` if impassable)."""
    return MOVE_COSTS[TerrainType(terrain)]


@dataclass
class Tile:
    """A single grid cell.

    Attributes:
        position: ``(x, y)`` coordinates within the owning grid.
        terrain: Terrain type of the cell.
        move_cost: Points spent to enter the cell.  Negative means the
            cell cannot be entered and the value is never used in
            arithmetic.
    """

    position: Position = (0, 0)
    terrain: TerrainType = TerrainType.GRASS
    move_cost: int = 1

    @classmethod
    def of(cls, position: Position, terrain: TerrainType) -> Tile:
        """Build a tile whose cost comes from the canonical cost table."""
        terrain = TerrainType(terrain)
        return cls(position=position, terrain=terrain, move_cost=move_cost_for(terrain))

    @property
    def is_walkable(self) -> bool:
        """Return True if a unit may enter this tile."""
        return self.move_cost >= 0
