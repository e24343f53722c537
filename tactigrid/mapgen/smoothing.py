"""Cellular-automata smoothing of a terrain-type array.

Each pass reads a frozen snapshot of the map and writes a new one, so a
cell's update never sees another cell's update from the same pass.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from tactigrid.world.tile import TerrainType

MAJORITY = 5

# First satisfied wins when a cell qualifies for several types.
PRIORITY = (
    TerrainType.WATER,
    TerrainType.MOUNTAIN,
    TerrainType.FOREST,
    TerrainType.GRASS,
    TerrainType.DESERT,
)


def count_neighbours(
    terrain: NDArray[np.integer],
    ttype: TerrainType,
) -> NDArray[np.int8]:
    """Count, for every cell, how many of its 8 neighbours are ``ttype``.

    Cells beyond the map edge count as non-matching.

    Args:
        terrain: ``(height, width)`` array of terrain values.
        ttype: Terrain type to count.

    Returns:
        ``(height, width)`` array of counts in ``0..8``.
    """
    height, width = terrain.shape
    padded = np.zeros((height + 2, width + 2), dtype=np.int8)
    padded[1:-1, 1:-1] = terrain == ttype

    counts = np.zeros((height, width), dtype=np.int8)
    for dy in (-1, 0, 1):
        for dx in (-1, 0, 1):
            if dx == 0 and dy == 0:
                continue
            counts += padded[1 + dy : 1 + dy + height, 1 + dx : 1 + dx + width]
    return counts


def smooth_once(terrain: NDArray[np.integer]) -> NDArray[np.integer]:
    """Run one majority-vote pass and return the new array.

    A cell takes a neighbouring type when at least ``MAJORITY`` of its
    eight neighbours share it, checked in ``PRIORITY`` order.  Roads and
    walls are never counted.  Cells with no majority keep their type.
    """
    conditions = [count_neighbours(terrain, ttype) >= MAJORITY for ttype in PRIORITY]
    choices = [np.full_like(terrain, int(ttype)) for ttype in PRIORITY]
    return np.select(conditions, choices, default=terrain)


def smooth(terrain: NDArray[np.integer], iterations: int) -> NDArray[np.integer]:
    """Apply ``iterations`` smoothing passes; the input is left untouched."""
    result = terrain.copy()
    for _ in range(iterations):
        result = smooth_once(result)
    return result
