"""
Tests for the step engine.
"""

import pytest

from filtern.field import Field
from filtern.levels import DigitSpec, FilterSpec, Level, ShifterSpec
from filtern.state import Direction, Filter, Operation
from filtern.step import (
    advance_cell,
    apply_filter,
    apply_operation,
    normalize_value,
    perform_step,
)


def make_field(boundary_mode: str = "clamp", **kwargs) -> Field:
    return Field.from_level(Level(name="Step", **kwargs), 10, 10, boundary_mode)


class TestAdvanceCell:
    """Tests for movement and edge policies."""

    def test_directions(self):
        assert advance_cell((5, 5), Direction.UP, 10, 10) == (5, 6)
        assert advance_cell((5, 5), Direction.RIGHT, 10, 10) == (6, 5)
        assert advance_cell((5, 5), Direction.DOWN, 10, 10) == (5, 4)
        assert advance_cell((5, 5), Direction.LEFT, 10, 10) == (4, 5)

    def test_clamp_left_edge(self):
        """A digit moving left from x=0 stays put under clamp."""
        assert advance_cell((0, 4), Direction.LEFT, 10, 10, "clamp") == (0, 4)

    def test_clamp_top_edge(self):
        assert advance_cell((3, 9), Direction.UP, 10, 10, "clamp") == (3, 9)

    def test_wrap_left_edge(self):
        """Under wrap the digit reappears on the far column."""
        assert advance_cell((0, 4), Direction.LEFT, 10, 10, "wrap") == (9, 4)

    def test_wrap_top_edge(self):
        assert advance_cell((3, 9), Direction.UP, 10, 10, "wrap") == (3, 0)


class TestValueArithmetic:
    """Tests for filter arithmetic and normalization."""

    def test_normalize_negative(self):
        assert normalize_value(-3) == 7
        assert normalize_value(-10) == 0

    def test_normalize_large(self):
        assert normalize_value(14) == 4
        assert normalize_value(81) == 1

    def test_modulo_scenario(self):
        """8 mod 3 is 2 and stays 2 after normalization."""
        assert apply_filter(8, Filter(Operation.MODULO, 3)) == 2

    def test_subtract_wraps_positive(self):
        assert apply_filter(0, Filter(Operation.SUBTRACT, 8)) == 2

    def test_multiply(self):
        assert apply_filter(7, Filter(Operation.MULTIPLY, 3)) == 1

    def test_truncating_operations(self):
        """Divide and modulo truncate toward zero."""
        assert apply_operation(7, Operation.DIVIDE, 2) == 3
        assert apply_operation(-7, Operation.DIVIDE, 2) == -3
        assert apply_operation(7, Operation.DIVIDE, -2) == -3
        assert apply_operation(-7, Operation.MODULO, 3) == -1
        assert apply_operation(8, Operation.MODULO, -3) == 2

    @pytest.mark.parametrize("operation", list(Operation))
    def test_result_always_single_digit(self, operation):
        """Every filter result lies in [0, 10)."""
        for value in range(10):
            for operand in range(-12, 13):
                if operand == 0 and operation in (Operation.MODULO, Operation.DIVIDE):
                    continue
                result = apply_filter(value, Filter(operation, operand))
                assert 0 <= result < 10


class TestPerformStep:
    """Tests for one automaton tick."""

    def test_no_digits_is_noop(self):
        field = make_field()

        perform_step(field.store, field.grid)

        field.check_invariants()

    def test_digit_moves_and_index_follows(self):
        field = make_field(digits=(DigitSpec((5, 3), 2, Direction.UP),))

        perform_step(field.store, field.grid)

        digit = field.store.digits[0]
        assert digit.cell == (5, 4)
        assert field.grid.digit_at((5, 4)) == 0
        assert field.grid.digit_at((5, 3)) is None
        field.check_invariants()

    def test_filter_applies_on_arrival(self):
        field = make_field(
            digits=(DigitSpec((5, 4), 2, Direction.UP),),
            filters=(FilterSpec(Operation.ADD, 2, cell=(5, 5)),),
        )

        perform_step(field.store, field.grid)

        assert field.store.digits[0].value == 4

    def test_shifter_redirects_next_tick(self):
        """A shifter changes direction without re-routing the current move."""
        field = make_field(
            digits=(DigitSpec((3, 4), 1, Direction.DOWN),),
            shifters=(ShifterSpec(Direction.RIGHT, cell=(3, 3)),),
        )

        perform_step(field.store, field.grid)
        digit = field.store.digits[0]
        assert digit.cell == (3, 3)
        assert digit.direction is Direction.RIGHT

        perform_step(field.store, field.grid)
        assert digit.cell == (4, 3)

    def test_clamped_digit_reapplies_modifier(self):
        """A digit stuck at the edge hits the modifier under it every tick."""
        field = make_field(
            digits=(DigitSpec((0, 1), 1, Direction.LEFT),),
            filters=(FilterSpec(Operation.ADD, 1, cell=(0, 1)),),
        )

        perform_step(field.store, field.grid)
        perform_step(field.store, field.grid)

        digit = field.store.digits[0]
        assert digit.cell == (0, 1)
        assert digit.value == 3

    def test_wrap_boundary(self):
        field = make_field("wrap", digits=(DigitSpec((0, 2), 1, Direction.LEFT),))

        perform_step(field.store, field.grid, field.boundary_mode)

        assert field.store.digits[0].cell == (9, 2)
        assert field.grid.digit_at((9, 2)) == 0

    def test_collision_last_digit_wins(self):
        """Two digits meeting on a cell: the later one owns the index slot."""
        field = make_field(digits=(
            DigitSpec((2, 5), 1, Direction.RIGHT),
            DigitSpec((4, 5), 2, Direction.LEFT),
        ))

        perform_step(field.store, field.grid)

        assert field.store.digits[0].cell == (3, 5)
        assert field.store.digits[1].cell == (3, 5)
        assert field.grid.digit_at((3, 5)) == 1
        field.check_invariants()

        perform_step(field.store, field.grid)

        assert field.grid.digit_at((4, 5)) == 0
        assert field.grid.digit_at((2, 5)) == 1
        assert field.grid.digit_at((3, 5)) is None
        field.check_invariants()

    def test_index_consistent_over_many_ticks(self):
        """Each digit's own cell maps back to it while no cells are shared."""
        field = make_field(
            digits=(
                DigitSpec((0, 0), 1, Direction.UP),
                DigitSpec((9, 9), 2, Direction.DOWN),
            ),
            shifters=(
                ShifterSpec(Direction.RIGHT, cell=(0, 5)),
                ShifterSpec(Direction.LEFT, cell=(9, 4)),
            ),
            filters=(FilterSpec(Operation.MULTIPLY, 7, cell=(4, 5)),),
        )

        for _ in range(25):
            perform_step(field.store, field.grid)
            for digit_id, digit in field.store.digits.items():
                assert field.grid.digit_at(digit.cell) == digit_id
                assert 0 <= digit.value < 10
            field.check_invariants()
