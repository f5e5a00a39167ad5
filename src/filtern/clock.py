"""
Simulation clock for the Filtern automaton.

The clock accumulates scaled frame time and reports a tick whenever the
integer part of the accumulator changes. Seeding and pausing park the
accumulator just below the next whole unit so that the first tick after
(un)pausing arrives almost immediately.
"""

import math


class SimulationClock:
    """
    Floor-crossing tick generator.

    Attributes:
        start_offset: Fractional value used when seeding or pausing
        speed_scale: Clock units per second of real time
        catch_up: Fire one tick per whole unit crossed instead of at most one
        time_passed: Accumulated clock value
    """

    def __init__(
        self,
        start_offset: float = 0.9,
        speed_scale: float = 1.0,
        catch_up: bool = False,
    ):
        self.start_offset = start_offset
        self.speed_scale = speed_scale
        self.catch_up = catch_up
        self.time_passed = start_offset

    def advance(self, dt: float) -> int:
        """
        Add one frame of elapsed time.

        Args:
            dt: Real time elapsed since the previous frame, in seconds

        Returns:
            Number of ticks to execute for this frame. Without catch_up this
            is 0 or 1 even when a long frame crosses several units.
        """
        if dt < 0:
            raise ValueError(f"dt must be >= 0, got {dt}")

        previous_floor = math.floor(self.time_passed)
        self.time_passed += self.speed_scale * dt
        crossed = math.floor(self.time_passed) - previous_floor

        if crossed <= 0:
            return 0
        return crossed if self.catch_up else 1

    def pause(self) -> None:
        """Park the accumulator just before the next whole unit."""
        self.time_passed = math.floor(self.time_passed) + self.start_offset

    def reset(self) -> None:
        self.time_passed = self.start_offset
