"""
Step engine for the Filtern automaton.

One tick moves every digit one cell in its direction, then applies the
modifier found at the digit's new cell. Digits never interact with each
other, only with the modifier layer, so the processing order (creation
order) only matters when two digits end on the same cell.
"""

import logging
import math

from .grid import GridIndex, Layer
from .state import Cell, Digit, Direction, EntityStore, Filter, Modifier, Operation, Shifter

logger = logging.getLogger(__name__)


def advance_cell(
    cell: Cell,
    direction: Direction,
    width: int,
    height: int,
    boundary_mode: str = "clamp",
) -> Cell:
    """
    Move a cell one unit in a direction and bring it back inside the field.

    Args:
        cell: Starting (x, y)
        direction: Direction of travel
        width: Field width
        height: Field height
        boundary_mode: "clamp" to stop at the edge, "wrap" for a torus

    Returns:
        The new (x, y)
    """
    dx, dy = direction.offset
    x, y = cell[0] + dx, cell[1] + dy

    if boundary_mode == "wrap":
        return (x % width, y % height)

    return (max(0, min(width - 1, x)), max(0, min(height - 1, y)))


def normalize_value(value: int) -> int:
    """Bring any integer into [0, 10); negatives wrap to the positive residue."""
    return value % 10


def apply_operation(value: int, operation: Operation, operand: int) -> int:
    """
    Apply a filter operation without normalization.

    Modulo and divide truncate toward zero.
    """
    if operation is Operation.ADD:
        return value + operand
    if operation is Operation.SUBTRACT:
        return value - operand
    if operation is Operation.MULTIPLY:
        return value * operand
    if operation is Operation.MODULO:
        return int(math.fmod(value, operand))
    if operation is Operation.DIVIDE:
        quotient = abs(value) // abs(operand)
        return quotient if (value >= 0) == (operand > 0) else -quotient
    raise ValueError(f"unknown operation {operation}")


def apply_filter(value: int, filter_: Filter) -> int:
    """Apply a filter to a digit value and normalize into [0, 10)."""
    return normalize_value(apply_operation(value, filter_.operation, filter_.value))


def perform_step(
    store: EntityStore,
    grid: GridIndex,
    boundary_mode: str = "clamp",
) -> None:
    """
    Advance every digit by exactly one cell.

    Per digit, in creation order:
        1. Remove the digit from its cell in the grid index
        2. Advance the cell in the digit's direction
        3. Clamp or wrap into the field
        4. Insert the digit at the new cell
        5. Look up a modifier at the new cell
        6. A shifter sets the direction used on the next tick
        7. A filter transforms and normalizes the value

    The digit layer only releases a cell still holding the moving digit, so
    when two digits share a cell the one processed last keeps the slot.

    Args:
        store: Live entities of the level
        grid: Grid index to keep in sync
        boundary_mode: "clamp" or "wrap"
    """
    for digit_id, digit in store.digits.items():
        grid.remove(Layer.DIGIT, digit.cell, digit_id)
        digit.cell = advance_cell(
            digit.cell, digit.direction, grid.width, grid.height, boundary_mode
        )
        grid.put(Layer.DIGIT, digit.cell, digit_id)

        modifier_id = grid.modifier_at(digit.cell)
        if modifier_id is None:
            continue
        _apply_modifier(digit, store.modifiers[modifier_id])
        logger.debug("Digit %d at %s -> value=%d direction=%s",
                     digit_id, digit.cell, digit.value, digit.direction.value)


def _apply_modifier(digit: Digit, modifier: Modifier) -> None:
    if isinstance(modifier, Shifter):
        digit.direction = modifier.direction
    elif isinstance(modifier, Filter):
        digit.value = apply_filter(digit.value, modifier)
