"""
Tests for the grid index.
"""

from filtern.grid import EMPTY, GridIndex, Layer


class TestGridIndex:
    """Tests for the three-layer cell lookup."""

    def test_starts_empty(self):
        grid = GridIndex(10, 10)

        assert grid.shape == (10, 10)
        assert (grid.layers == EMPTY).all()
        assert grid.digit_at((3, 4)) is None
        assert grid.modifier_at((3, 4)) is None
        assert grid.requirement_at((3, 4)) is None

    def test_layers_are_independent(self):
        """A cell can hold one entity per layer."""
        grid = GridIndex(10, 10)

        grid.put(Layer.DIGIT, (2, 3), 0)
        grid.put(Layer.MODIFIER, (2, 3), 1)

        assert grid.digit_at((2, 3)) == 0
        assert grid.modifier_at((2, 3)) == 1
        assert grid.requirement_at((2, 3)) is None

    def test_indexing_is_x_then_y(self):
        """Cell (x, y) and (y, x) are distinct slots."""
        grid = GridIndex(10, 5)

        grid.put(Layer.DIGIT, (7, 2), 4)

        assert grid.digit_at((7, 2)) == 4
        assert grid.layers.shape == (3, 10, 5)

    def test_remove_checks_expected_id(self):
        """remove() leaves another occupant untouched."""
        grid = GridIndex(10, 10)
        grid.put(Layer.DIGIT, (1, 1), 5)

        assert grid.remove(Layer.DIGIT, (1, 1), 6) is False
        assert grid.digit_at((1, 1)) == 5
        assert grid.remove(Layer.DIGIT, (1, 1), 5) is True
        assert grid.digit_at((1, 1)) is None
        assert grid.remove(Layer.DIGIT, (1, 1)) is False

    def test_occupied(self):
        grid = GridIndex(10, 10)
        grid.put(Layer.REQUIREMENT, (0, 9), 2)
        grid.put(Layer.REQUIREMENT, (9, 0), 3)

        assert grid.occupied(Layer.REQUIREMENT) == {(0, 9): 2, (9, 0): 3}
        assert grid.occupied(Layer.DIGIT) == {}
