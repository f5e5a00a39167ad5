"""
Read-only snapshots for the presentation layer.

After every state change the simulation hands listeners a FrameSnapshot
describing each digit, modifier and requirement, the cursor and the run
state. Renderers own all graphics; the core only publishes data.
"""

from dataclasses import asdict, dataclass
from typing import Any, Optional

from .state import Cell, Filter, RunState


@dataclass(frozen=True)
class DigitView:
    digit_id: int
    cell: Cell
    value: int
    direction: str
    arrow: str


@dataclass(frozen=True)
class ModifierView:
    """
    Attributes:
        modifier_id: Stable id of the modifier
        kind: "filter" or "shifter"
        label: Operation label such as "+2" or an arrow such as ">"
        locked: True for modifiers fixed at level start
        cell: Field cell when placed, else None
        pool_slot: Pool slot when available, else None
    """

    modifier_id: int
    kind: str
    label: str
    locked: bool
    cell: Optional[Cell]
    pool_slot: Optional[int]


@dataclass(frozen=True)
class RequirementView:
    requirement_id: int
    cell: Cell
    value: int


@dataclass(frozen=True)
class CursorView:
    region: str
    cell: Cell
    pool_cell: Cell
    carrying: Optional[int]
    visible: bool


@dataclass(frozen=True)
class FrameSnapshot:
    """Complete presentation state of one frame."""

    level_index: int
    level_name: str
    level_label: str
    run_state: RunState
    tick: int
    grid_shape: tuple[int, int]
    pool_columns: int
    digits: tuple[DigitView, ...]
    modifiers: tuple[ModifierView, ...]
    requirements: tuple[RequirementView, ...]
    cursor: CursorView

    @property
    def run_symbol(self) -> str:
        return self.run_state.symbol

    def to_dict(self) -> dict[str, Any]:
        """Convert to plain data for serialization."""
        d = asdict(self)
        d["run_state"] = self.run_state.value
        d["run_symbol"] = self.run_state.symbol
        return d


def build_snapshot(simulation: "Simulation") -> FrameSnapshot:  # Forward reference
    """Capture the presentation state of a simulation."""
    field = simulation.field
    store = field.store
    cursor = simulation.placement.cursor

    digits = tuple(
        DigitView(
            digit_id=digit_id,
            cell=digit.cell,
            value=digit.value,
            direction=digit.direction.value,
            arrow=digit.direction.arrow,
        )
        for digit_id, digit in store.digits.items()
    )
    modifiers = tuple(
        ModifierView(
            modifier_id=modifier_id,
            kind="filter" if isinstance(modifier, Filter) else "shifter",
            label=modifier.label,
            locked=not modifier.placeable,
            cell=modifier.cell,
            pool_slot=field.pool_slot(modifier_id),
        )
        for modifier_id, modifier in store.modifiers.items()
    )
    requirements = tuple(
        RequirementView(requirement_id, requirement.cell, requirement.value)
        for requirement_id, requirement in store.requirements.items()
    )

    return FrameSnapshot(
        level_index=simulation.level_index,
        level_name=simulation.level.name,
        level_label=simulation.catalog.label(simulation.level_index),
        run_state=simulation.run_state,
        tick=simulation.step_count,
        grid_shape=field.grid.shape,
        pool_columns=simulation.placement.pool_columns,
        digits=digits,
        modifiers=modifiers,
        requirements=requirements,
        cursor=CursorView(
            region=cursor.region.value,
            cell=cursor.cell,
            pool_cell=cursor.pool_cell,
            carrying=cursor.carrying,
            visible=simulation.run_state is RunState.PLACING,
        ),
    )
