"""UnitController — the unit roster and its select/move cycle.

One activation at a time drives the controller: activate a unit to
select it and see where it can go, activate one of those tiles to move
there, or activate the unit again to put it down.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum, auto

import structlog

from tactigrid.movement.reachability import ReachabilityEngine, ReachabilityMap
from tactigrid.world.grid import Grid
from tactigrid.world.tile import Position
from tactigrid.world.unit import Unit

logger = structlog.get_logger()


class Action(Enum):
    """What an activation did."""

    IGNORED = auto()
    SELECTED = auto()
    DESELECTED = auto()
    MOVED = auto()


@dataclass
class UnitController:
    """Roster of units plus the current selection.

    Attributes:
        units: All units on the map.
        selected: Index into ``units`` of the selected unit, if any.
        reachability: Reachability of the selected unit, if any.
        engine: Search used to compute reachability.
    """

    units: list[Unit] = field(default_factory=list)
    selected: int | None = None
    reachability: ReachabilityMap | None = None
    engine: ReachabilityEngine = field(default_factory=ReachabilityEngine, repr=False)

    @property
    def selected_unit(self) -> Unit | None:
        """The selected unit, or None."""
        if self.selected is None:
            return None
        return self.units[self.selected]

    def reset_for_grid(self, grid: Grid, spawn: Position) -> None:
        """Replace the roster with a single default unit at ``spawn``."""
        self.units = [Unit(position=spawn)]
        self.clamp_units_to_grid(grid)
        self.clear_selection()

    def set_units(self, grid: Grid, units: Iterable[Unit]) -> None:
        """Install a roster (e.g. loaded from storage) on ``grid``."""
        self.units = list(units)
        self.clamp_units_to_grid(grid)
        self.clear_selection()

    def on_grid_changed(self, grid: Grid) -> None:
        """Pull units back inside a new or resized grid."""
        self.clamp_units_to_grid(grid)
        self.clear_selection()

    def clear_selection(self) -> None:
        """Drop the selection and its reachability."""
        self.selected = None
        self.reachability = None

    def clamp_units_to_grid(self, grid: Grid) -> None:
        """Move any unit outside ``grid`` to the nearest in-bounds tile."""
        if grid.width <= 0 or grid.height <= 0:
            return
        for unit in self.units:
            x, y = unit.position
            unit.position = (
                min(max(x, 0), grid.width - 1),
                min(max(y, 0), grid.height - 1),
            )

    def find_unit_at(self, position: Position) -> int | None:
        """Index of the first unit standing on ``position``."""
        for index, unit in enumerate(self.units):
            if unit.position == position:
                return index
        return None

    def occupied_positions(self, exclude: Position | None = None) -> set[Position]:
        """Positions held by units, minus ``exclude``."""
        return {unit.position for unit in self.units if unit.position != exclude}

    def is_tile_reachable(self, grid: Grid, position: Position) -> bool:
        """Return True if the selected unit can move to ``position``."""
        if self.reachability is None or not grid.is_valid_position(position):
            return False
        return self.reachability.is_reachable(position)

    def select(self, grid: Grid, index: int) -> None:
        """Select ``units[index]`` and compute where it can go."""
        unit = self.units[index]
        self.selected = index
        self.reachability = self.engine.compute(
            grid,
            unit.move_points,
            unit.position,
            self.occupied_positions(exclude=unit.position),
        )

    def activate(self, grid: Grid, position: Position) -> Action:
        """Act on ``position`` the way a confirm press on that tile would.

        Args:
            grid: The current map.
            position: The activated tile.

        Returns:
            The resulting action.
        """
        if self.selected is None:
            index = self.find_unit_at(position)
            if index is None:
                return Action.IGNORED
            self.select(grid, index)
            return Action.SELECTED

        unit = self.units[self.selected]
        if position == unit.position:
            self.clear_selection()
            return Action.DESELECTED

        if not self.is_tile_reachable(grid, position):
            return Action.IGNORED

        target = self.find_unit_at(position)
        if target is not None and target != self.selected:
            return Action.IGNORED

        logger.debug("Unit moved", origin=unit.position, destination=position)
        unit.position = position
        self.clear_selection()
        return Action.MOVED
