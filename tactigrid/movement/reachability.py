"""Reachability — where can a unit go with the points it has left?

The search is a label-correcting breadth-first expansion.  A FIFO queue
holds ``(position, remaining)`` pairs and a tile is (re)queued whenever a
route arrives with more points left than the best one recorded so far.
The same tile may therefore be expanded more than once; with small
positive integer costs this settles on the same answer as Dijkstra and
is simpler.  Remaining points only ever shrink along a route, so the
search always terminates.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

import numpy as np
import structlog
from numpy.typing import NDArray

from tactigrid.world.grid import Grid
from tactigrid.world.tile import Position

logger = structlog.get_logger()

UNREACHED = -1


@dataclass
class ReachabilityMap:
    """Best remaining move points per tile for one unit.

    Attributes:
        width: Columns of the grid the map was computed on.
        height: Rows of the grid the map was computed on.
        remaining: Flat row-major array; ``UNREACHED`` where the unit
            cannot end its move.
    """

    width: int
    height: int
    remaining: NDArray[np.int64]

    def __len__(self) -> int:
        return len(self.remaining)

    def __getitem__(self, index: int) -> int:
        return int(self.remaining[index])

    def _index(self, position: Position) -> int | None:
        x, y = position
        if 0 <= x < self.width and 0 <= y < self.height:
            return y * self.width + x
        return None

    def remaining_at(self, position: Position) -> int:
        """Points left after moving to ``position`` (``UNREACHED`` if not)."""
        index = self._index(position)
        if index is None:
            return UNREACHED
        return int(self.remaining[index])

    def is_reachable(self, position: Position) -> bool:
        """Return True if the unit can end its move at ``position``."""
        return self.remaining_at(position) >= 0

    def reachable_positions(self) -> Iterator[Position]:
        """Yield every reachable position in row-major order."""
        for index in np.flatnonzero(self.remaining >= 0):
            y, x = divmod(int(index), self.width)
            yield (x, y)

    def as_grid(self) -> NDArray[np.int64]:
        """The map reshaped to ``(height, width)``."""
        return self.remaining.reshape(self.height, self.width)


class ReachabilityEngine:
    """Cost-bounded flood fill over a Grid.

    The engine holds no state; each call only reads the grid and builds
    a fresh map, so separate units can be evaluated concurrently over a
    shared grid.
    """

    def compute(
        self,
        grid: Grid,
        move_budget: int,
        start: Position,
        occupied: Iterable[Position] = (),
    ) -> ReachabilityMap:
        """Find every tile reachable from ``start`` within ``move_budget``.

        Args:
            grid: Map to search.
            move_budget: Points available; negative budgets count as 0.
            start: Where the unit stands.
            occupied: Tiles held by other units.  They can be neither
                entered nor crossed.  ``start`` is ignored if listed.

        Returns:
            A map with ``move_budget`` at ``start`` and ``UNREACHED``
            wherever the unit cannot go.  If ``start`` is off the grid,
            every entry is ``UNREACHED``.
        """
        budget = max(0, int(move_budget))
        remaining = np.full(grid.width * grid.height, UNREACHED, dtype=np.int64)
        result = ReachabilityMap(
            width=grid.width, height=grid.height, remaining=remaining
        )

        if not grid.is_valid_position(start):
            logger.warning("Reachability start outside grid", x=start[0], y=start[1])
            return result

        blocked = {
            grid.index_of(position)
            for position in occupied
            if position != start and grid.is_valid_position(position)
        }

        remaining[grid.index_of(start)] = budget
        frontier: deque[tuple[Position, int]] = deque([(start, budget)])
        while frontier:
            current, points = frontier.popleft()
            for neighbour in grid.neighbours(current):
                index = grid.index_of(neighbour)
                if index in blocked:
                    continue
                tile = grid.tiles[index]
                if not tile.is_walkable or tile.move_cost > points:
                    continue
                left = points - tile.move_cost
                if left > remaining[index]:
                    remaining[index] = left
                    frontier.append((neighbour, left))

        logger.debug(
            "Reachability computed",
            x=start[0],
            y=start[1],
            budget=budget,
            reachable=int(np.count_nonzero(remaining >= 0)),
        )
        return result


def compute_reachability(
    grid: Grid,
    move_budget: int,
    start: Position,
    occupied: Iterable[Position] = (),
) -> ReachabilityMap:
    """Module-level shortcut for ``ReachabilityEngine().compute``."""
    return ReachabilityEngine().compute(grid, move_budget, start, occupied)
