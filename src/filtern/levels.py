"""
Level definitions and the level catalog.

A Level is an immutable template. It is validated eagerly when a catalog is
built so that malformed data (a modulo by zero, a requirement sitting on a
locked modifier, a cell outside the field) is refused at load time instead
of surfacing during a tick.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Sequence

from .config import BOUNDARY_MODES, Config
from .state import Cell, Direction, Operation

logger = logging.getLogger(__name__)


class LevelError(ValueError):
    """Raised for malformed level data."""


@dataclass(frozen=True)
class DigitSpec:
    cell: Cell
    value: int
    direction: Direction


@dataclass(frozen=True)
class RequirementSpec:
    cell: Cell
    value: int


@dataclass(frozen=True)
class FilterSpec:
    """Filter template. Locked filters need a cell; placeable ones start in the pool."""

    operation: Operation
    value: int
    placeable: bool = False
    cell: Optional[Cell] = None


@dataclass(frozen=True)
class ShifterSpec:
    direction: Direction
    placeable: bool = False
    cell: Optional[Cell] = None


@dataclass(frozen=True)
class Level:
    """
    Immutable level template.

    Attributes:
        name: Display name
        digits: Starting digits, in processing order
        requirements: Target cells
        filters: Filter templates (locked and placeable)
        shifters: Shifter templates (locked and placeable)
        boundary_mode: Optional override of Config.boundary_mode
    """

    name: str
    digits: tuple[DigitSpec, ...] = ()
    requirements: tuple[RequirementSpec, ...] = ()
    filters: tuple[FilterSpec, ...] = ()
    shifters: tuple[ShifterSpec, ...] = ()
    boundary_mode: Optional[str] = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Level":
        """
        Build a level from plain data.

        Cells are two-element sequences, directions and operations are the
        lowercase enum values. A modifier without a cell is placeable unless
        "placeable" says otherwise.
        """
        try:
            digits = tuple(
                DigitSpec(_cell(item["cell"]), int(item["value"]), Direction(item["direction"]))
                for item in d.get("digits", ())
            )
            requirements = tuple(
                RequirementSpec(_cell(item["cell"]), int(item["value"]))
                for item in d.get("requirements", ())
            )
            filters = tuple(
                FilterSpec(
                    operation=Operation(item["operation"]),
                    value=int(item["value"]),
                    placeable=_placeable(item),
                    cell=_cell(item["cell"]) if item.get("cell") is not None else None,
                )
                for item in d.get("filters", ())
            )
            shifters = tuple(
                ShifterSpec(
                    direction=Direction(item["direction"]),
                    placeable=_placeable(item),
                    cell=_cell(item["cell"]) if item.get("cell") is not None else None,
                )
                for item in d.get("shifters", ())
            )
            return cls(
                name=str(d["name"]),
                digits=digits,
                requirements=requirements,
                filters=filters,
                shifters=shifters,
                boundary_mode=d.get("boundary_mode"),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise LevelError(f"invalid level data: {e}") from e


def _cell(raw: Sequence[int]) -> Cell:
    x, y = raw
    return (int(x), int(y))


def _placeable(item: dict[str, Any]) -> bool:
    placeable = item.get("placeable", item.get("cell") is None)
    if not isinstance(placeable, bool):
        raise ValueError(f"placeable must be a boolean, got {placeable!r}")
    return placeable


def validate_level(level: Level, config: Config) -> None:
    """
    Check a level against the field dimensions and the placement rules.

    Args:
        level: Level to validate
        config: Configuration providing the grid size

    Raises:
        LevelError: Describing the first problem found
    """
    width, height = config.grid_shape

    def check_cell(cell: Cell, what: str) -> None:
        x, y = cell
        if not (0 <= x < width and 0 <= y < height):
            raise LevelError(
                f"{level.name!r}: {what} cell {cell} outside {width}x{height} field"
            )

    def check_value(value: int, what: str) -> None:
        if not 0 <= value < 10:
            raise LevelError(f"{level.name!r}: {what} value {value} not in [0, 10)")

    if level.boundary_mode is not None and level.boundary_mode not in BOUNDARY_MODES:
        raise LevelError(
            f"{level.name!r}: boundary_mode must be one of {BOUNDARY_MODES}, "
            f"got {level.boundary_mode}"
        )

    digit_cells: set[Cell] = set()
    for digit in level.digits:
        check_cell(digit.cell, "digit")
        check_value(digit.value, "digit")
        if digit.cell in digit_cells:
            raise LevelError(f"{level.name!r}: two digits start on {digit.cell}")
        digit_cells.add(digit.cell)

    requirement_cells: set[Cell] = set()
    for requirement in level.requirements:
        check_cell(requirement.cell, "requirement")
        check_value(requirement.value, "requirement")
        if requirement.cell in requirement_cells:
            raise LevelError(f"{level.name!r}: two requirements on {requirement.cell}")
        requirement_cells.add(requirement.cell)

    for filter_spec in level.filters:
        if (
            filter_spec.operation in (Operation.MODULO, Operation.DIVIDE)
            and filter_spec.value == 0
        ):
            raise LevelError(
                f"{level.name!r}: {filter_spec.operation.value} filter with zero operand"
            )

    locked_cells: set[Cell] = set()
    for modifier in (*level.filters, *level.shifters):
        if modifier.placeable:
            continue
        if modifier.cell is None:
            raise LevelError(f"{level.name!r}: locked modifier without a cell")
        check_cell(modifier.cell, "modifier")
        if modifier.cell in locked_cells:
            raise LevelError(f"{level.name!r}: two locked modifiers on {modifier.cell}")
        if modifier.cell in requirement_cells:
            raise LevelError(
                f"{level.name!r}: locked modifier shares requirement cell {modifier.cell}"
            )
        locked_cells.add(modifier.cell)


class LevelCatalog:
    """
    Ordered, validated collection of levels.

    Attributes:
        levels: Level templates in play order
    """

    def __init__(self, levels: Sequence[Level], config: Config):
        if not levels:
            raise LevelError("a level catalog needs at least one level")
        for level in levels:
            validate_level(level, config)
        self.levels = tuple(levels)
        logger.debug("Catalog loaded with %d levels", len(self.levels))

    def __len__(self) -> int:
        return len(self.levels)

    def __getitem__(self, index: int) -> Level:
        return self.levels[index]

    def __iter__(self) -> Iterator[Level]:
        return iter(self.levels)

    def clamp_index(self, index: int) -> int:
        """Clamp a level index into [0, len - 1]."""
        return max(0, min(len(self.levels) - 1, index))

    def label(self, index: int) -> str:
        """Display label such as 'Level 1/9: Need Some Space'."""
        return f"Level {index + 1}/{len(self.levels)}: {self.levels[index].name}"


def default_levels() -> list[Level]:
    """The nine built-in levels, in play order."""
    up, right, down, left = Direction.UP, Direction.RIGHT, Direction.DOWN, Direction.LEFT
    add, sub, mul = Operation.ADD, Operation.SUBTRACT, Operation.MULTIPLY

    return [
        Level(
            name="Need Some Space",
            digits=(DigitSpec((5, 3), 2, up),),
            requirements=(RequirementSpec((5, 7), 4),),
            filters=(FilterSpec(add, 2, cell=(5, 5)),),
        ),
        Level(
            name="Operation Order",
            digits=(DigitSpec((2, 5), 1, right),),
            requirements=(RequirementSpec((8, 5), 9),),
            filters=(
                FilterSpec(mul, 3, cell=(5, 5)),
                FilterSpec(add, 6, placeable=True),
            ),
        ),
        Level(
            name="Get Shifty",
            digits=(DigitSpec((3, 8), 3, down),),
            requirements=(RequirementSpec((6, 3), 9),),
            filters=(FilterSpec(mul, 3, cell=(5, 3)),),
            shifters=(ShifterSpec(right, placeable=True),),
        ),
        Level(
            name="Get Back",
            digits=(DigitSpec((7, 6), 0, left),),
            requirements=(RequirementSpec((5, 6), 8),),
            filters=(FilterSpec(add, 4, placeable=True),),
            shifters=(ShifterSpec(right, placeable=True),),
        ),
        Level(
            name="ABC...",
            digits=(DigitSpec((6, 4), 1, up),),
            requirements=(RequirementSpec((6, 6), 7),),
            filters=(FilterSpec(add, 1, placeable=True),),
            shifters=(
                ShifterSpec(down, cell=(6, 7)),
                ShifterSpec(up, placeable=True),
            ),
        ),
        Level(
            name="Poor Timing?",
            digits=(
                DigitSpec((3, 7), 6, right),
                DigitSpec((6, 7), 6, left),
            ),
            requirements=(
                RequirementSpec((2, 1), 6),
                RequirementSpec((7, 5), 6),
            ),
            shifters=(
                ShifterSpec(down, cell=(2, 7)),
                ShifterSpec(down, placeable=True),
                ShifterSpec(up, placeable=True),
            ),
        ),
        Level(
            name="Together We Stand",
            digits=(
                DigitSpec((2, 7), 8, down),
                DigitSpec((7, 2), 8, up),
            ),
            requirements=(
                RequirementSpec((9, 3), 0),
                RequirementSpec((1, 7), 0),
            ),
            filters=(FilterSpec(sub, 8, placeable=True),),
            shifters=(
                ShifterSpec(left, placeable=True),
                ShifterSpec(right, placeable=True),
            ),
        ),
        Level(
            name="Stay In Line",
            digits=(
                DigitSpec((2, 2), 4, right),
                DigitSpec((7, 2), 5, left),
            ),
            requirements=(
                RequirementSpec((4, 7), 8),
                RequirementSpec((4, 6), 4),
            ),
            filters=(
                FilterSpec(mul, 2, cell=(4, 5)),
                FilterSpec(sub, 3, placeable=True),
            ),
            shifters=(ShifterSpec(up, placeable=True),),
        ),
        Level(
            name="Off By One",
            digits=(
                DigitSpec((5, 3), 0, up),
                DigitSpec((6, 5), 0, left),
                DigitSpec((4, 6), 0, down),
                DigitSpec((3, 4), 0, right),
            ),
            requirements=(
                RequirementSpec((4, 3), 4),
                RequirementSpec((6, 4), 4),
                RequirementSpec((5, 6), 5),
                RequirementSpec((3, 5), 5),
            ),
            filters=(
                FilterSpec(add, 1, cell=(5, 4)),
                FilterSpec(add, 1, cell=(5, 5)),
                FilterSpec(add, 1, placeable=True),
            ),
            shifters=(
                ShifterSpec(right, cell=(4, 2)),
                ShifterSpec(up, cell=(5, 2)),
                ShifterSpec(left, cell=(5, 7)),
                ShifterSpec(down, cell=(4, 7)),
                ShifterSpec(down, cell=(2, 5)),
                ShifterSpec(right, cell=(2, 4)),
                ShifterSpec(up, cell=(7, 4)),
                ShifterSpec(left, cell=(7, 5)),
            ),
        ),
    ]
