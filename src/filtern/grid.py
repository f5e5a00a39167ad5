"""
Grid index for the Filtern field.

Three parallel integer layers map a cell to the identifier of the digit,
modifier or requirement occupying it. Empty slots hold EMPTY. Layers are
indexed [x, y] so a cell tuple can be used directly.
"""

from enum import Enum
from typing import Optional

import numpy as np

from .state import Cell


EMPTY = -1


class InvariantError(RuntimeError):
    """Raised when the grid index disagrees with the entity store."""


class Layer(Enum):
    DIGIT = 0
    MODIFIER = 1
    REQUIREMENT = 2


class GridIndex:
    """
    Cell -> entity id lookup for each layer.

    Attributes:
        width: Number of columns
        height: Number of rows
        layers: Integer array of shape [3, width, height]
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.layers = np.full((len(Layer), width, height), EMPTY, dtype=np.int64)

    @property
    def shape(self) -> tuple[int, int]:
        """Grid dimensions (width, height)."""
        return (self.width, self.height)

    def get(self, layer: Layer, cell: Cell) -> Optional[int]:
        """Return the id stored at cell, or None if the slot is empty."""
        entity_id = int(self.layers[layer.value, cell[0], cell[1]])
        return None if entity_id == EMPTY else entity_id

    def put(self, layer: Layer, cell: Cell, entity_id: int) -> None:
        """Store entity_id at cell, overwriting any previous occupant."""
        self.layers[layer.value, cell[0], cell[1]] = entity_id

    def remove(self, layer: Layer, cell: Cell, entity_id: Optional[int] = None) -> bool:
        """
        Empty a slot.

        Args:
            layer: Layer to modify
            cell: Cell to empty
            entity_id: If given, only clear the slot when it holds this id

        Returns:
            True if the slot was cleared
        """
        current = self.get(layer, cell)
        if current is None:
            return False
        if entity_id is not None and current != entity_id:
            return False
        self.layers[layer.value, cell[0], cell[1]] = EMPTY
        return True

    def occupied(self, layer: Layer) -> dict[Cell, int]:
        """Return every non-empty slot of a layer as {cell: id}."""
        coords = np.argwhere(self.layers[layer.value] != EMPTY)
        return {
            (int(x), int(y)): int(self.layers[layer.value, x, y])
            for x, y in coords
        }

    # Convenience accessors used by the step engine and placement controller

    def digit_at(self, cell: Cell) -> Optional[int]:
        return self.get(Layer.DIGIT, cell)

    def modifier_at(self, cell: Cell) -> Optional[int]:
        return self.get(Layer.MODIFIER, cell)

    def requirement_at(self, cell: Cell) -> Optional[int]:
        return self.get(Layer.REQUIREMENT, cell)
