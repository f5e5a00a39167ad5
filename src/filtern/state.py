"""
Entity state for the Filtern automaton.

The live state of a level consists of:
- Digits, which move one cell per tick and carry a value in [0, 10)
- Modifiers (filters and shifters), either locked to a cell or placeable
- Requirements, the fixed cell/value targets of the puzzle

Entities live in an arena keyed by stable integer identifiers. The grid
index stores those identifiers, never the entities themselves.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


Cell = tuple[int, int]


class Direction(Enum):
    """Movement direction of a digit or shifter. Up is +y."""

    UP = "up"
    RIGHT = "right"
    DOWN = "down"
    LEFT = "left"

    @property
    def offset(self) -> Cell:
        """Unit (dx, dy) step for this direction."""
        return DIRECTION_OFFSETS[self]

    @property
    def arrow(self) -> str:
        """Single character arrow used by the presentation layer."""
        return DIRECTION_ARROWS[self]


DIRECTION_OFFSETS = {
    Direction.UP: (0, 1),
    Direction.RIGHT: (1, 0),
    Direction.DOWN: (0, -1),
    Direction.LEFT: (-1, 0),
}

DIRECTION_ARROWS = {
    Direction.UP: "^",
    Direction.RIGHT: ">",
    Direction.DOWN: "v",
    Direction.LEFT: "<",
}


class Operation(Enum):
    """Arithmetic applied by a filter."""

    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    MODULO = "modulo"
    DIVIDE = "divide"

    @property
    def symbol(self) -> str:
        return OPERATION_SYMBOLS[self]


OPERATION_SYMBOLS = {
    Operation.ADD: "+",
    Operation.SUBTRACT: "-",
    Operation.MULTIPLY: "*",
    Operation.MODULO: "%",
    Operation.DIVIDE: "/",
}


class RunState(Enum):
    """
    Lifecycle of the automaton within one level.

    PLACING is the only state in which modifiers may be moved. Once the
    automaton has been started it can only be paused, resumed or solved
    until a reset returns it to PLACING.
    """

    PLACING = "placing"
    RUNNING = "running"
    PAUSED = "paused"
    SOLVED = "solved"

    @property
    def symbol(self) -> str:
        """Run indicator text shown beside the field."""
        return RUN_STATE_SYMBOLS[self]


RUN_STATE_SYMBOLS = {
    RunState.PLACING: " =",
    RunState.RUNNING: "~>",
    RunState.PAUSED: "~=",
    RunState.SOLVED: "==",
}


@dataclass
class Digit:
    """A mobile value moving one cell per tick."""

    cell: Cell
    value: int
    direction: Direction


@dataclass
class Requirement:
    """A target cell that must hold a digit of the given value."""

    cell: Cell
    value: int


@dataclass
class Filter:
    """
    Modifier that transforms the value of a digit arriving on its cell.

    Attributes:
        operation: Arithmetic operation applied to the digit value
        value: Right-hand operand of the operation
        placeable: Whether the player may move this filter
        start_cell: Cell of a locked filter at level start (None if placeable)
        cell: Current cell on the field (None while in the available pool)
    """

    operation: Operation
    value: int
    placeable: bool = False
    start_cell: Optional[Cell] = None
    cell: Optional[Cell] = None

    @property
    def label(self) -> str:
        return f"{self.operation.symbol}{self.value}"


@dataclass
class Shifter:
    """Modifier that redirects a digit arriving on its cell."""

    direction: Direction
    placeable: bool = False
    start_cell: Optional[Cell] = None
    cell: Optional[Cell] = None

    @property
    def label(self) -> str:
        return self.direction.arrow


Modifier = Union[Filter, Shifter]


@dataclass
class EntityStore:
    """
    Arena holding every live entity of the active level.

    Identifiers are allocated from a single counter so a digit, modifier
    and requirement never share an id. Iteration over each kind follows
    creation order, which is the fixed processing order of the step engine.

    Attributes:
        digits: digit_id -> Digit
        modifiers: modifier_id -> Filter or Shifter
        requirements: requirement_id -> Requirement
    """

    digits: dict[int, Digit] = field(default_factory=dict)
    modifiers: dict[int, Modifier] = field(default_factory=dict)
    requirements: dict[int, Requirement] = field(default_factory=dict)
    _next_id: int = 0

    def _allocate(self) -> int:
        entity_id = self._next_id
        self._next_id += 1
        return entity_id

    def add_digit(self, digit: Digit) -> int:
        digit_id = self._allocate()
        self.digits[digit_id] = digit
        return digit_id

    def add_modifier(self, modifier: Modifier) -> int:
        modifier_id = self._allocate()
        self.modifiers[modifier_id] = modifier
        return modifier_id

    def add_requirement(self, requirement: Requirement) -> int:
        requirement_id = self._allocate()
        self.requirements[requirement_id] = requirement
        return requirement_id
