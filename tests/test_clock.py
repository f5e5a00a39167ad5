"""
Tests for the simulation clock.
"""

import pytest

from filtern.clock import SimulationClock


class TestSimulationClock:
    """Tests for floor-crossing ticks."""

    def test_initial_offset(self):
        clock = SimulationClock(start_offset=0.9)
        assert clock.time_passed == pytest.approx(0.9)

    def test_tick_on_floor_crossing(self):
        clock = SimulationClock(start_offset=0.9, speed_scale=1.0)

        assert clock.advance(0.05) == 0
        assert clock.advance(0.06) == 1
        assert clock.advance(0.5) == 0

    def test_speed_scale(self):
        clock = SimulationClock(start_offset=0.9, speed_scale=1.8)

        assert clock.advance(0.1) == 1
        assert clock.advance(0.1) == 0

    def test_long_frame_collapses(self):
        """Without catch-up a long frame still yields a single tick."""
        clock = SimulationClock(start_offset=0.9, speed_scale=1.0)
        assert clock.advance(2.5) == 1

    def test_long_frame_catch_up(self):
        clock = SimulationClock(start_offset=0.9, speed_scale=1.0, catch_up=True)
        assert clock.advance(2.5) == 3

    def test_zero_dt(self):
        clock = SimulationClock()
        assert clock.advance(0.0) == 0

    def test_negative_dt_raises(self):
        clock = SimulationClock()
        with pytest.raises(ValueError, match="dt"):
            clock.advance(-0.1)

    def test_pause_parks_before_next_unit(self):
        clock = SimulationClock(start_offset=0.9, speed_scale=1.0)
        clock.advance(2.5)

        clock.pause()

        assert clock.time_passed == pytest.approx(3.9)
        assert clock.advance(0.2) == 1

    def test_reset(self):
        clock = SimulationClock(start_offset=0.5, speed_scale=1.0)
        clock.advance(4.2)

        clock.reset()

        assert clock.time_passed == pytest.approx(0.5)
