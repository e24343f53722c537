"""Grid — the dense 2D tile container behind every map.

Tiles are kept in a flat row-major list (``index = y * width + x``).
``is_valid_position`` is the only bounds check; every other component in
the package goes through it rather than comparing coordinates itself.
Out-of-range access never raises: reads return ``None`` and writes are
dropped, both with a warning.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field, replace

import numpy as np
import structlog
from numpy.typing import NDArray

from tactigrid.world.tile import Position, TerrainType, Tile

logger = structlog.get_logger()

_CARDINAL = ((-1, 0), (1, 0), (0, -1), (0, 1))
_DIAGONAL = ((-1, -1), (-1, 1), (1, -1), (1, 1))

GLYPHS: dict[TerrainType, str] = {
    TerrainType.GRASS: ".",
    TerrainType.WATER: "~",
    TerrainType.MOUNTAIN: "^",
    TerrainType.FOREST: "T",
    TerrainType.DESERT: ":",
    TerrainType.ROAD: "=",
    TerrainType.WALL: "#",
}


@dataclass
class Grid:
    """A ``width`` x ``height`` map of tiles.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        tiles: Flat row-major tile storage, always ``width * height`` long.
    """

    width: int = 0
    height: int = 0
    tiles: list[Tile] = field(init=False, repr=False, default_factory=list)

    def __post_init__(self) -> None:
        """Fill every cell with the default tile."""
        width, height = self.width, self.height
        self.width = self.height = 0
        self.resize(width, height)

    @classmethod
    def from_terrain(cls, terrain: NDArray[np.integer]) -> Grid:
        """Build a grid from a ``(height, width)`` array of terrain values.

        Move costs come from the canonical cost table.
        """
        height, width = terrain.shape
        grid = cls(width=width, height=height)
        for y in range(height):
            for x in range(width):
                terrain_type = TerrainType(int(terrain[y, x]))
                grid.tiles[y * width + x] = Tile.of((x, y), terrain_type)
        return grid

    def resize(self, width: int, height: int) -> None:
        """Reallocate the grid and reset every cell to default Grass.

        Negative dimensions are rejected and leave the grid untouched.
        """
        if width < 0 or height < 0:
            logger.warning("Rejected negative grid size", width=width, height=height)
            return
        self.width = width
        self.height = height
        self.tiles = [
            Tile(position=(x, y)) for y in range(height) for x in range(width)
        ]
        logger.debug("Grid initialised", width=width, height=height)

    def is_valid_position(self, position: Position) -> bool:
        """Return True if ``position`` lies inside ``[0, width) x [0, height)``."""
        x, y = position
        return 0 <= x < self.width and 0 <= y < self.height

    def index_of(self, position: Position) -> int:
        """Row-major index of an in-bounds ``position``."""
        x, y = position
        return y * self.width + x

    def get_tile(self, position: Position) -> Tile | None:
        """Return the tile at ``position``, or ``None`` when out of bounds.

        The returned tile is the stored object, so edits to it are edits
        to the grid.
        """
        if not self.is_valid_position(position):
            logger.warning("Tile lookup out of bounds", x=position[0], y=position[1])
            return None
        return self.tiles[self.index_of(position)]

    def set_tile(self, position: Position, tile: Tile) -> None:
        """Store a copy of ``tile`` at ``position``.

        The stored tile's ``position`` is forced to ``position``.  Writes
        outside the grid are ignored.
        """
        if not self.is_valid_position(position):
            logger.warning("Tile write out of bounds", x=position[0], y=position[1])
            return
        self.tiles[self.index_of(position)] = replace(tile, position=tuple(position))

    def positions(self) -> Iterator[Position]:
        """Yield every position in row-major order."""
        for y in range(self.height):
            for x in range(self.width):
                yield (x, y)

    def neighbours(
        self,
        position: Position,
        *,
        include_diagonals: bool = False,
    ) -> list[Position]:
        """Return in-bounds positions adjacent to ``position``.

        Args:
            position: Centre cell.
            include_diagonals: If True, return up to 8 neighbours; otherwise 4.
        """
        offsets = _CARDINAL + _DIAGONAL if include_diagonals else _CARDINAL
        x, y = position
        result: list[Position] = []
        for dx, dy in offsets:
            neighbour = (x + dx, y + dy)
            if self.is_valid_position(neighbour):
                result.append(neighbour)
        return result

    def walkable_count(self) -> int:
        """Number of tiles a unit may enter."""
        return sum(1 for tile in self.tiles if tile.is_walkable)

    def terrain_array(self) -> NDArray[np.int8]:
        """Terrain types as a ``(height, width)`` array."""
        values = [int(tile.terrain) for tile in self.tiles]
        return np.array(values, dtype=np.int8).reshape(self.height, self.width)

    def cost_array(self) -> NDArray[np.int8]:
        """Move costs as a ``(height, width)`` array."""
        values = [tile.move_cost for tile in self.tiles]
        return np.array(values, dtype=np.int8).reshape(self.height, self.width)

    def render_ascii(self, overlay: Mapping[Position, str] | None = None) -> str:
        """Draw the grid one character per tile.

        Args:
            overlay: Optional glyphs that replace the terrain glyph at
                specific positions (units, highlighted tiles).

        Returns:
            Rows joined by newlines, top row first.
        """
        overlay = overlay or {}
        rows = []
        for y in range(self.height):
            row = []
            for x in range(self.width):
                glyph = overlay.get((x, y))
                if glyph is None:
                    glyph = GLYPHS[self.tiles[y * self.width + x].terrain]
                row.append(glyph)
            rows.append("".join(row))
        return "\n".join(rows)
