"""
Win evaluation for the Filtern automaton.
"""

from typing import Optional

from .grid import GridIndex
from .state import EntityStore


def first_unsatisfied(store: EntityStore, grid: GridIndex) -> Optional[int]:
    """
    Return the id of the first requirement not met, or None if all are met.

    Requirements are checked in creation order and the check stops at the
    first cell that is empty or holds a digit of the wrong value.
    """
    for requirement_id, requirement in store.requirements.items():
        digit_id = grid.digit_at(requirement.cell)
        if digit_id is None:
            return requirement_id
        if store.digits[digit_id].value != requirement.value:
            return requirement_id
    return None


def check_requirements(store: EntityStore, grid: GridIndex) -> bool:
    """
    True when every requirement cell holds a digit of the matching value.

    A level without requirements has no win condition and is never satisfied.
    """
    if not store.requirements:
        return False
    return first_unsatisfied(store, grid) is None
