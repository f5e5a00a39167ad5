"""
Discrete input commands consumed by the simulation.

Commands are edge-triggered events; the input layer is responsible for
turning key presses into them.
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class MoveCursor:
    """Shift the active cursor by (dx, dy). Positive dy is up on the field."""

    dx: int = 0
    dy: int = 0


@dataclass(frozen=True)
class ToggleCursorRegion:
    """Swap the cursor between the field and the available pool."""


@dataclass(frozen=True)
class Confirm:
    """Pick up, place, exchange or remove a modifier under the cursor."""


@dataclass(frozen=True)
class ToggleRun:
    """Start, pause or resume the automaton."""


@dataclass(frozen=True)
class Reset:
    """Restore the current level to its starting state."""


@dataclass(frozen=True)
class NextLevel:
    pass


@dataclass(frozen=True)
class PreviousLevel:
    pass


Command = Union[
    MoveCursor,
    ToggleCursorRegion,
    Confirm,
    ToggleRun,
    Reset,
    NextLevel,
    PreviousLevel,
]
