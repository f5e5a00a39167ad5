"""
Live field state of one level.

A Field bundles the entity store, the grid index and the ordered pool of
available modifiers. It is built fresh from a Level template whenever a
level is loaded or reset, and owns the primitives that move a modifier
between the pool and the grid so that a modifier is always in exactly one
of the two.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .grid import GridIndex, InvariantError, Layer
from .levels import Level
from .state import Cell, Digit, EntityStore, Filter, Requirement, Shifter

logger = logging.getLogger(__name__)


@dataclass
class Field:
    """
    Simulation context for the active level.

    Attributes:
        store: Arena of live entities
        grid: Cell -> id lookup layers
        pool: Ids of available (unplaced) modifiers, in slot order
        boundary_mode: Edge policy used by the step engine
    """

    store: EntityStore
    grid: GridIndex
    pool: list[int] = field(default_factory=list)
    boundary_mode: str = "clamp"

    @classmethod
    def from_level(
        cls,
        level: Level,
        width: int,
        height: int,
        boundary_mode: str = "clamp",
    ) -> "Field":
        """
        Instantiate a level template.

        Locked modifiers go to their start cell, placeable ones to the pool
        (filters first, then shifters, each in definition order).
        """
        result = cls(
            store=EntityStore(),
            grid=GridIndex(width, height),
            boundary_mode=level.boundary_mode or boundary_mode,
        )
        store, grid = result.store, result.grid

        for spec in level.digits:
            digit_id = store.add_digit(Digit(spec.cell, spec.value, spec.direction))
            grid.put(Layer.DIGIT, spec.cell, digit_id)

        for spec in level.requirements:
            requirement_id = store.add_requirement(Requirement(spec.cell, spec.value))
            grid.put(Layer.REQUIREMENT, spec.cell, requirement_id)

        modifiers = [
            Filter(f.operation, f.value, f.placeable, None if f.placeable else f.cell)
            for f in level.filters
        ] + [
            Shifter(s.direction, s.placeable, None if s.placeable else s.cell)
            for s in level.shifters
        ]
        for modifier in modifiers:
            modifier_id = store.add_modifier(modifier)
            if modifier.placeable:
                result.pool.append(modifier_id)
            else:
                modifier.cell = modifier.start_cell
                grid.put(Layer.MODIFIER, modifier.cell, modifier_id)

        return result

    def pool_slot(self, modifier_id: int) -> Optional[int]:
        """Slot of a modifier in the pool, or None if it is on the grid."""
        try:
            return self.pool.index(modifier_id)
        except ValueError:
            return None

    def return_to_pool(self, modifier_id: int) -> None:
        """Take a placed modifier off the grid and append it to the pool."""
        modifier = self.store.modifiers[modifier_id]
        if modifier.cell is None:
            raise InvariantError(f"modifier {modifier_id} is not on the grid")
        self.grid.remove(Layer.MODIFIER, modifier.cell, modifier_id)
        modifier.cell = None
        self.pool.append(modifier_id)

    def place_from_pool(self, modifier_id: int, cell: Cell) -> None:
        """Move an available modifier from the pool onto an empty modifier slot."""
        if self.grid.modifier_at(cell) is not None:
            raise InvariantError(f"modifier slot {cell} is already occupied")
        self.pool.remove(modifier_id)
        modifier = self.store.modifiers[modifier_id]
        modifier.cell = cell
        self.grid.put(Layer.MODIFIER, cell, modifier_id)

    def check_invariants(self) -> None:
        """
        Verify the grid index against the entity store.

        Raises:
            InvariantError: On the first inconsistency found
        """
        store, grid = self.store, self.grid

        for cell, digit_id in grid.occupied(Layer.DIGIT).items():
            digit = store.digits.get(digit_id)
            if digit is None or digit.cell != cell:
                raise InvariantError(f"digit layer at {cell} points at stale id {digit_id}")
        for digit_id, digit in store.digits.items():
            occupant = grid.digit_at(digit.cell)
            if occupant is None:
                raise InvariantError(f"digit {digit_id} at {digit.cell} missing from index")

        if len(set(self.pool)) != len(self.pool):
            raise InvariantError(f"duplicate ids in pool {self.pool}")
        for modifier_id, modifier in store.modifiers.items():
            in_pool = modifier_id in self.pool
            if in_pool == (modifier.cell is not None):
                raise InvariantError(
                    f"modifier {modifier_id} must be either pooled or placed"
                )
            if modifier.cell is not None and grid.modifier_at(modifier.cell) != modifier_id:
                raise InvariantError(f"modifier {modifier_id} missing from index")
        if len(grid.occupied(Layer.MODIFIER)) != len(store.modifiers) - len(self.pool):
            raise InvariantError("modifier layer holds stale ids")

        for requirement_id, requirement in store.requirements.items():
            if grid.requirement_at(requirement.cell) != requirement_id:
                raise InvariantError(f"requirement {requirement_id} missing from index")
            if grid.modifier_at(requirement.cell) is not None:
                raise InvariantError(f"modifier placed on requirement {requirement_id}")
