"""TerrainGenerator — seed and parameters in, playable tactical map out.

The pipeline runs in four stages:

1. **Heightmap**: fractal value noise, normalised to ``[0, 1]``.
2. **Classification**: heights are bucketed by the config thresholds.
   The band just under ``mountain_threshold`` is split between mountain
   and desert by a second noise sample taken at shifted coordinates.
3. **Smoothing**: cellular-automata majority vote removes speckle.
4. **Tactical post-processing**: isolated walkable regions are patched
   together, then a sprinkle of grass tiles becomes road.

The same config always yields the same grid.  Road placement draws from
a NumPy ``Generator`` seeded from ``config.seed`` unless the caller passes
one in, so nothing depends on global random state.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

import numpy as np
import structlog
from numpy.random import Generator
from numpy.typing import NDArray

from tactigrid.mapgen.config import GeneratorConfig
from tactigrid.mapgen.noise import fractal_heightmap, value_noise
from tactigrid.mapgen.smoothing import smooth
from tactigrid.world.grid import Grid
from tactigrid.world.tile import Position, TerrainType, Tile

logger = structlog.get_logger()

# -- Constants ---------------------------------------------------------------

_SELECTOR_SCALE = 2.0
_SELECTOR_OFFSET_X = 17.0
_SELECTOR_OFFSET_Y = 31.0
_SELECTOR_THRESHOLD = 0.5
_PATCH_NEIGHBOUR_THRESHOLD = 3  # walkable cardinal neighbours to open a cell
ROAD_DENSITY = 0.03
MIN_ROADS = 1


def flood_fill(grid: Grid, start: Position) -> set[Position]:
    """Return every walkable position 4-connected to ``start``.

    ``start`` itself is always included, walkable or not.
    """
    visited = {start}
    frontier = deque([start])
    while frontier:
        current = frontier.popleft()
        for neighbour in grid.neighbours(current):
            if neighbour in visited:
                continue
            if grid.tiles[grid.index_of(neighbour)].is_walkable:
                visited.add(neighbour)
                frontier.append(neighbour)
    return visited


def flood_fill_count(grid: Grid, start: Position) -> int:
    """Size of the walkable region containing ``start``."""
    return len(flood_fill(grid, start))


def walkable_positions(grid: Grid) -> list[Position]:
    """Walkable positions in row-major order."""
    return [tile.position for tile in grid.tiles if tile.is_walkable]


def label_regions(grid: Grid) -> tuple[list[int], list[list[Position]]]:
    """Label the 4-connected walkable regions of ``grid``.

    Regions are numbered in row-major order of their first tile, so
    region 0 holds the first walkable tile.

    Returns:
        A flat row-major label list (-1 on impassable tiles) and the
        positions of each region.
    """
    labels = [-1] * len(grid.tiles)
    regions: list[list[Position]] = []
    for start in walkable_positions(grid):
        if labels[grid.index_of(start)] >= 0:
            continue
        members = list(flood_fill(grid, start))
        for position in members:
            labels[grid.index_of(position)] = len(regions)
        regions.append(members)
    return labels, regions


def _region_edge(
    grid: Grid, region: set[Position], candidates: set[Position]
) -> set[Position]:
    """Cells of ``candidates`` with at least one neighbour outside ``region``."""
    return {
        position
        for position in candidates
        if any(n not in region for n in grid.neighbours(position))
    }


def _shortest_corridor(
    grid: Grid, region: set[Position], edge: set[Position]
) -> tuple[list[Position], Position | None]:
    """Find the cheapest chain of cells linking ``region`` to another region.

    Breadth-first search starts from every edge cell of ``region`` at
    once (ordered by row, then column) and walks through any tile outside
    the region.  The first walkable cell found ends the search.

    Returns:
        The impassable cells between the two regions, nearest to
        ``region`` first, and the walkable cell that was reached.  The
        cell is None if no other walkable cell exists.
    """
    sources = sorted(edge, key=lambda pos: (pos[1], pos[0]))
    parents: dict[Position, Position | None] = dict.fromkeys(sources)
    frontier = deque(sources)
    while frontier:
        current = frontier.popleft()
        for neighbour in grid.neighbours(current):
            if neighbour in parents or neighbour in region:
                continue
            parents[neighbour] = current
            if grid.tiles[grid.index_of(neighbour)].is_walkable:
                path: list[Position] = []
                step = current
                while step not in region:
                    path.append(step)
                    step = parents[step]
                path.reverse()
                return path, neighbour
            frontier.append(neighbour)
    return [], None


@dataclass
class TerrainGenerator:
    """Builds a Grid from a GeneratorConfig.

    Attributes:
        config: Generation parameters.
    """

    config: GeneratorConfig

    def generate(self, rng: Generator | None = None) -> Grid:
        """Run the full pipeline.

        Args:
            rng: Random source for road placement.  Defaults to a fresh
                generator seeded from ``config.seed``.

        Returns:
            The generated grid.  A config with a non-positive width or
            height gives an empty 0x0 grid.
        """
        cfg = self.config
        if cfg.width <= 0 or cfg.height <= 0:
            logger.warning(
                "Degenerate map size, returning empty grid",
                width=cfg.width,
                height=cfg.height,
            )
            return Grid()

        logger.info(
            "Generating map",
            width=cfg.width,
            height=cfg.height,
            seed=cfg.seed,
        )
        if not cfg.has_ascending_thresholds:
            logger.warning(
                "Terrain thresholds are not ascending", thresholds=cfg.thresholds
            )

        if rng is None:
            rng = np.random.default_rng(cfg.seed & 0xFFFFFFFF)

        # 1. Heightmap
        heights = self.heightmap()

        # 2. Classification
        terrain = self.classify(heights)

        # 3. Smoothing
        terrain = smooth(terrain, cfg.ca_iterations)

        grid = Grid.from_terrain(terrain)

        # 4. Tactical features
        self.add_tactical_features(grid, rng)

        logger.info("Map generation complete", walkable=grid.walkable_count())
        return grid

    def heightmap(self) -> NDArray[np.float64]:
        """Stage 1: normalised ``(height, width)`` heightmap."""
        cfg = self.config
        return fractal_heightmap(
            cfg.width,
            cfg.height,
            seed=cfg.seed,
            scale=cfg.noise_scale,
            octaves=cfg.noise_octaves,
        )

    def classify(self, heights: NDArray[np.float64]) -> NDArray[np.int8]:
        """Stage 2: map heights to terrain types.

        Thresholds are checked in ascending order and the first one the
        height falls below decides the terrain.
        """
        cfg = self.config
        rows, cols = heights.shape
        ys, xs = np.mgrid[0:rows, 0:cols].astype(np.float64)
        selector = value_noise(
            xs * _SELECTOR_SCALE + _SELECTOR_OFFSET_X,
            ys * _SELECTOR_SCALE + _SELECTOR_OFFSET_Y,
            cfg.seed,
        )

        def fill(ttype: TerrainType) -> NDArray[np.int8]:
            return np.full(heights.shape, int(ttype), dtype=np.int8)

        highland = np.where(
            selector > _SELECTOR_THRESHOLD,
            fill(TerrainType.MOUNTAIN),
            fill(TerrainType.DESERT),
        )
        conditions = [
            heights < cfg.water_threshold,
            heights < cfg.grass_threshold,
            heights < cfg.forest_threshold,
            heights < cfg.mountain_threshold,
        ]
        choices = [
            fill(TerrainType.WATER),
            fill(TerrainType.GRASS),
            fill(TerrainType.FOREST),
            highland,
        ]
        return np.select(conditions, choices, default=fill(TerrainType.MOUNTAIN))

    def add_tactical_features(self, grid: Grid, rng: Generator) -> None:
        """Stage 4: connect walkable regions, then lay roads."""
        self.ensure_connectivity(grid)
        self.place_roads(grid, rng)

    def ensure_connectivity(self, grid: Grid) -> None:
        """Open up impassable cells that wall off walkable regions.

        If the region around the first walkable tile does not hold every
        walkable tile, one pass over the interior (border excluded) turns
        any impassable cell with at least three walkable cardinal
        neighbours into grass.  The pass reads the grid as it is being
        patched.  With ``carve_corridors`` set, regions still isolated
        afterwards are joined by carved grass corridors.
        """
        walkable = walkable_positions(grid)
        if not walkable:
            logger.warning("No walkable tiles in generated map")
            return

        if flood_fill_count(grid, walkable[0]) >= len(walkable):
            return

        opened = 0
        for y in range(1, grid.height - 1):
            for x in range(1, grid.width - 1):
                position = (x, y)
                if grid.tiles[grid.index_of(position)].is_walkable:
                    continue
                walkable_neighbours = sum(
                    1
                    for neighbour in grid.neighbours(position)
                    if grid.tiles[grid.index_of(neighbour)].is_walkable
                )
                if walkable_neighbours >= _PATCH_NEIGHBOUR_THRESHOLD:
                    grid.set_tile(position, Tile.of(position, TerrainType.GRASS))
                    opened += 1
        logger.info("Connectivity patch applied", opened=opened)

        if self.config.carve_corridors:
            self.carve_corridors(grid)

    def carve_corridors(self, grid: Grid) -> int:
        """Join every isolated walkable region to the main one.

        The main region is the one holding the first walkable tile in
        row-major order.  Regions are labelled once up front.  Each round
        carves the shortest grass corridor from the main region to the
        nearest other region, then folds that region and the corridor
        into the main one, until one region remains.

        Returns:
            Number of tiles converted to grass.
        """
        labels, regions = label_regions(grid)
        if len(regions) <= 1:
            return 0

        region = set(regions[0])
        edge = _region_edge(grid, region, region)
        joined = 1
        carved = 0
        while joined < len(regions):
            corridor, reached = _shortest_corridor(grid, region, edge)
            if reached is None:
                break
            for position in corridor:
                grid.set_tile(position, Tile.of(position, TerrainType.GRASS))
            carved += len(corridor)
            added = corridor + regions[labels[grid.index_of(reached)]]
            region.update(added)
            edge = _region_edge(grid, region, edge.union(added))
            joined += 1

        if carved:
            logger.info(
                "Carved connecting corridors", tiles=carved, regions=len(regions)
            )
        return carved

    def place_roads(self, grid: Grid, rng: Generator) -> None:
        """Turn a random sample of grass tiles into road.

        About ``ROAD_DENSITY`` of the grass tiles (at least one) are drawn
        with replacement, so the same tile may be picked twice.
        """
        grass = [
            tile.position for tile in grid.tiles if tile.terrain == TerrainType.GRASS
        ]
        if not grass:
            return

        road_count = max(MIN_ROADS, round(ROAD_DENSITY * len(grass)))
        for pick in rng.integers(0, len(grass), size=road_count):
            position = grass[int(pick)]
            grid.set_tile(position, Tile.of(position, TerrainType.ROAD))


def generate(config: GeneratorConfig, rng: Generator | None = None) -> Grid:
    """Generate a map from ``config``; see ``TerrainGenerator.generate``."""
    return TerrainGenerator(config).generate(rng)
