"""
Placement controller for placeable modifiers.

The cursor lives either on the field (addressing a grid cell) or on the
available pool (addressing a slot of a row-major layout whose last row may
be short). Confirming on the pool picks a modifier up; confirming on the
field places, exchanges or removes one.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .field import Field
from .state import Cell

logger = logging.getLogger(__name__)


class CursorRegion(Enum):
    FIELD = "field"
    POOL = "pool"


class PlacementOutcome(Enum):
    """Result of a confirm event."""

    NOTHING = "nothing"
    PICKED_UP = "picked_up"
    PLACED = "placed"
    EXCHANGED = "exchanged"
    REMOVED = "removed"
    REJECTED_DIGIT = "rejected_digit"
    REJECTED_REQUIREMENT = "rejected_requirement"
    REJECTED_LOCKED = "rejected_locked"

    @property
    def changed(self) -> bool:
        """Whether the field or the carried modifier changed."""
        return self in (
            PlacementOutcome.PICKED_UP,
            PlacementOutcome.PLACED,
            PlacementOutcome.EXCHANGED,
            PlacementOutcome.REMOVED,
        )


@dataclass
class Cursor:
    """
    Attributes:
        region: Which area the cursor addresses
        cell: Field cell (x, y)
        pool_cell: Pool slot as (column, row)
        carrying: Id of the picked-up modifier awaiting placement
    """

    region: CursorRegion = CursorRegion.FIELD
    cell: Cell = (0, 0)
    pool_cell: Cell = (0, 0)
    carrying: Optional[int] = None


class PlacementController:
    """
    Cursor state machine that moves modifiers between the pool and the grid.

    Attributes:
        pool_columns: Column count of the pool layout
        cursor: Current cursor state
    """

    def __init__(self, pool_columns: int = 8):
        self.pool_columns = pool_columns
        self.cursor = Cursor()

    @property
    def pool_index(self) -> int:
        """Pool slot addressed by the pool cursor."""
        col, row = self.cursor.pool_cell
        return col + row * self.pool_columns

    def pool_position(self, slot: int) -> Cell:
        """Layout (column, row) of a pool slot."""
        return (slot % self.pool_columns, slot // self.pool_columns)

    def toggle_region(self) -> None:
        """Swap between field and pool; any carried modifier is dropped."""
        if self.cursor.region is CursorRegion.FIELD:
            self.cursor.region = CursorRegion.POOL
        else:
            self.cursor.region = CursorRegion.FIELD
        self.cursor.carrying = None

    def move(self, field: Field, dx: int, dy: int) -> None:
        """
        Move the active cursor.

        The field cursor wraps around the grid. The pool cursor wraps inside
        the pool layout: the column wraps over the short last row when the
        cursor is on it, and the row wraps over the full rows only when the
        column lies beyond the short last row. Pool rows grow downward, so
        a positive dy moves to a lower row index.
        """
        if self.cursor.region is CursorRegion.FIELD:
            x, y = self.cursor.cell
            self.cursor.cell = ((x + dx) % field.grid.width, (y + dy) % field.grid.height)
            return

        count = len(field.pool)
        if count == 0:
            self.cursor.pool_cell = (0, 0)
            return

        cols = self.pool_columns
        last_col = (count - 1) % cols
        last_row = (count - 1) // cols
        col, row = self.cursor.pool_cell
        col += dx
        row -= dy

        if last_row == 0:
            self.cursor.pool_cell = (col % (last_col + 1), 0)
            return

        if row == last_row:
            col = col % (last_col + 1)
        else:
            col = col % cols

        if col <= last_col:
            row = row % (last_row + 1)
        else:
            row = row % last_row

        self.cursor.pool_cell = (col, row)

    def clamp_pool_cursor(self, field: Field) -> None:
        """Pull the pool cursor back onto an existing slot after the pool shrank."""
        count = len(field.pool)
        if count == 0:
            self.cursor.pool_cell = (0, 0)
        elif self.pool_index >= count:
            self.cursor.pool_cell = self.pool_position(count - 1)

    def reset(self, field: Field) -> None:
        """Drop any carried modifier; keep cursor positions."""
        self.cursor.carrying = None
        self.clamp_pool_cursor(field)

    def confirm(self, field: Field) -> PlacementOutcome:
        """Handle a confirm event in the current region."""
        if self.cursor.region is CursorRegion.POOL:
            outcome = self._pick_up(field)
        elif self.cursor.carrying is None:
            outcome = self._remove(field)
        else:
            outcome = self._place(field)

        if outcome.changed:
            self.clamp_pool_cursor(field)
        logger.debug("Confirm at %s/%s -> %s",
                     self.cursor.region.value, self.cursor.cell, outcome.value)
        return outcome

    def _pick_up(self, field: Field) -> PlacementOutcome:
        slot = self.pool_index
        if slot >= len(field.pool):
            return PlacementOutcome.NOTHING
        self.cursor.carrying = field.pool[slot]
        self.cursor.region = CursorRegion.FIELD
        return PlacementOutcome.PICKED_UP

    def _remove(self, field: Field) -> PlacementOutcome:
        modifier_id = field.grid.modifier_at(self.cursor.cell)
        if modifier_id is None:
            return PlacementOutcome.NOTHING
        if not field.store.modifiers[modifier_id].placeable:
            return PlacementOutcome.REJECTED_LOCKED
        field.return_to_pool(modifier_id)
        return PlacementOutcome.REMOVED

    def _place(self, field: Field) -> PlacementOutcome:
        cell = self.cursor.cell
        grid = field.grid

        if grid.digit_at(cell) is not None:
            return PlacementOutcome.REJECTED_DIGIT
        if grid.requirement_at(cell) is not None:
            return PlacementOutcome.REJECTED_REQUIREMENT

        outcome = PlacementOutcome.PLACED
        occupant = grid.modifier_at(cell)
        if occupant is not None:
            if not field.store.modifiers[occupant].placeable:
                return PlacementOutcome.REJECTED_LOCKED
            field.return_to_pool(occupant)
            outcome = PlacementOutcome.EXCHANGED

        field.place_from_pool(self.cursor.carrying, cell)
        self.cursor.carrying = None
        return outcome
