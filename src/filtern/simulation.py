"""
Main simulation loop for Filtern.

Owns the live level state and ties together the step engine, the clock,
the placement controller and the win check.
"""

import logging
from typing import Callable, Optional, Sequence

from tqdm import tqdm

from .clock import SimulationClock
from .commands import (
    Command,
    Confirm,
    MoveCursor,
    NextLevel,
    PreviousLevel,
    Reset,
    ToggleCursorRegion,
    ToggleRun,
)
from .config import Config
from .field import Field
from .levels import Level, LevelCatalog, default_levels
from .placement import PlacementController, PlacementOutcome
from .presentation import FrameSnapshot, build_snapshot
from .requirements import check_requirements
from .state import RunState
from .step import perform_step

logger = logging.getLogger(__name__)

Listener = Callable[[FrameSnapshot], None]


class Simulation:
    """
    Filtern simulation manager.

    Handles level lifecycle and state evolution, and publishes snapshots to
    presentation listeners after every change.

    Attributes:
        config: Simulation configuration
        catalog: Validated levels
        level_index: Index of the active level
        field: Live state of the active level
        run_state: Placing, running, paused or solved
        clock: Tick generator for real-time play
        placement: Cursor and placement state machine
        step_count: Ticks executed since the level was (re)loaded
    """

    def __init__(
        self,
        config: Config,
        levels: Optional[Sequence[Level]] = None,
        level_index: int = 0,
    ):
        """
        Initialize simulation.

        Args:
            config: Simulation configuration
            levels: Level templates (defaults to the built-in catalog)
            level_index: Level to load first

        Raises:
            LevelError: If any level is malformed
        """
        self.config = config
        self.catalog = LevelCatalog(
            levels if levels is not None else default_levels(), config
        )
        self.clock = SimulationClock(
            start_offset=config.start_offset,
            speed_scale=config.speed_scale,
            catch_up=config.catch_up,
        )
        self.placement = PlacementController(config.pool_columns)
        self.listeners: list[Listener] = []
        self.load_level(self.catalog.clamp_index(level_index))

    @property
    def level(self) -> Level:
        return self.catalog[self.level_index]

    @property
    def solved(self) -> bool:
        return self.run_state is RunState.SOLVED

    # Level lifecycle

    def load_level(self, index: int) -> None:
        """
        Tear down the current level state and build a level from its template.

        Args:
            index: Catalog index of the level
        """
        self.level_index = index
        self.field = Field.from_level(
            self.level,
            self.config.grid_width,
            self.config.grid_height,
            self.config.boundary_mode,
        )
        self.run_state = RunState.PLACING
        self.step_count = 0
        self.clock.reset()
        self.placement.reset(self.field)
        if self.config.check_invariants:
            self.field.check_invariants()
        logger.info("Loaded %s", self.catalog.label(index))
        self._notify()

    def reset(self) -> None:
        """
        Restore the active level to its starting state.

        Digits return to their start cells, placeable modifiers to the pool,
        locked modifiers to their original cells, and the run state to placing.
        """
        logger.info("Resetting level %d", self.level_index + 1)
        self.load_level(self.level_index)

    def change_level(self, delta: int) -> bool:
        """
        Move through the catalog, clamped at both ends.

        Returns:
            True if a different level was loaded
        """
        index = self.catalog.clamp_index(self.level_index + delta)
        if index == self.level_index:
            return False
        self.load_level(index)
        return True

    # Automaton

    def step(self) -> None:
        """Advance every digit by one cell and apply modifiers."""
        perform_step(self.field.store, self.field.grid, self.field.boundary_mode)
        self.step_count += 1
        if self.config.check_invariants:
            self.field.check_invariants()

    def tick(self) -> None:
        """One clock tick: step, sync listeners, then check the win condition."""
        self.step()
        self._notify()
        self.check_requirements()

    def check_requirements(self) -> bool:
        """
        Evaluate the win condition and mark the level solved if it holds.

        Returns:
            True if every requirement is satisfied
        """
        if not check_requirements(self.field.store, self.field.grid):
            return False
        self.run_state = RunState.SOLVED
        self.clock.pause()
        logger.info("%s solved after %d ticks", self.catalog.label(self.level_index),
                    self.step_count)
        self._notify()
        return True

    def toggle_run(self) -> None:
        """Start, pause or resume the automaton. Ignored once solved."""
        if self.run_state is RunState.SOLVED:
            return

        if self.run_state is RunState.RUNNING:
            self.run_state = RunState.PAUSED
            self.clock.pause()
        else:
            self.run_state = RunState.RUNNING
            self.placement.cursor.carrying = None

        logger.info("Run state: %s", self.run_state.value)
        self._notify()

    def update(self, dt: float) -> int:
        """
        Per-frame update.

        Args:
            dt: Real time elapsed since the previous frame, in seconds

        Returns:
            Number of ticks executed during this frame
        """
        if self.run_state is not RunState.RUNNING:
            return 0

        executed = 0
        for _ in range(self.clock.advance(dt)):
            self.tick()
            executed += 1
            if self.solved:
                break
        return executed

    def run(
        self,
        ticks: int,
        callback: Optional[Callable[["Simulation"], None]] = None,
        callback_interval: int = 1,
        show_progress: bool = True,
    ) -> int:
        """
        Run the automaton headless for a number of ticks.

        Starts the automaton if it is still in placing mode and stops early
        once the level is solved.

        Args:
            ticks: Maximum number of ticks to run
            callback: Optional function called periodically
            callback_interval: How often to call callback
            show_progress: Whether to show progress bar

        Returns:
            Number of ticks executed
        """
        if self.solved:
            return 0
        if self.run_state is not RunState.RUNNING:
            self.toggle_run()

        iterator = range(ticks)
        if show_progress:
            iterator = tqdm(iterator, desc=self.level.name)

        executed = 0
        for i in iterator:
            self.tick()
            executed += 1

            if callback is not None and (i + 1) % callback_interval == 0:
                callback(self)
            if self.solved:
                break

        return executed

    # Input

    def handle(self, command: Command) -> Optional[PlacementOutcome]:
        """
        Dispatch one input command.

        Cursor and placement commands are only honoured while placing.

        Returns:
            The placement outcome for Confirm, otherwise None
        """
        if isinstance(command, NextLevel):
            self.change_level(1)
        elif isinstance(command, PreviousLevel):
            self.change_level(-1)
        elif isinstance(command, Reset):
            self.reset()
        elif isinstance(command, ToggleRun):
            self.toggle_run()
        elif not isinstance(command, (MoveCursor, ToggleCursorRegion, Confirm)):
            raise TypeError(f"unknown command {command!r}")
        elif self.run_state is not RunState.PLACING:
            logger.debug("Ignoring %s while %s", command, self.run_state.value)
        elif isinstance(command, MoveCursor):
            self.placement.move(self.field, command.dx, command.dy)
            self._notify()
        elif isinstance(command, ToggleCursorRegion):
            self.placement.toggle_region()
            self._notify()
        else:
            outcome = self.placement.confirm(self.field)
            if outcome.changed:
                if self.config.check_invariants:
                    self.field.check_invariants()
                self._notify()
            return outcome
        return None

    # Presentation

    def add_listener(self, listener: Listener) -> None:
        """Register a callable that receives a snapshot after every change."""
        self.listeners.append(listener)

    def snapshot(self) -> FrameSnapshot:
        return build_snapshot(self)

    def _notify(self) -> None:
        if not self.listeners:
            return
        snapshot = self.snapshot()
        for listener in self.listeners:
            listener(snapshot)

    def check_invariants(self) -> None:
        """Verify grid index consistency; raises InvariantError on a defect."""
        self.field.check_invariants()

    def get_state_dict(self) -> dict:
        """Get serializable state dictionary."""
        return {
            "step_count": self.step_count,
            "level_index": self.level_index,
            "config": self.config.to_dict(),
            "frame": self.snapshot().to_dict(),
        }
