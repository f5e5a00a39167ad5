"""
Command-line interface for Filtern.

Usage:
    python -m filtern.main --help
    python -m filtern.main --list-levels
    python -m filtern.main --level 2 --commands "swap,confirm,right*6,up*5,confirm" --ticks 20
    python -m filtern.main --play
"""

import argparse
import json
import logging
import sys
from typing import Optional, Sequence

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
from .config import BOUNDARY_MODES, Config
from .levels import default_levels
from .logging_config import setup_logging
from .placement import PlacementOutcome
from .simulation import Simulation

COMMAND_WORDS: dict[str, Command] = {
    "up": MoveCursor(0, 1),
    "down": MoveCursor(0, -1),
    "left": MoveCursor(-1, 0),
    "right": MoveCursor(1, 0),
    "swap": ToggleCursorRegion(),
    "confirm": Confirm(),
    "run": ToggleRun(),
    "reset": Reset(),
    "next": NextLevel(),
    "prev": PreviousLevel(),
}


def parse_commands(script: str) -> list[Command]:
    """
    Parse a comma-separated command script.

    Each word may carry a repeat count, e.g. "right*3".

    Raises:
        ValueError: For unknown words or bad repeat counts
    """
    commands: list[Command] = []
    for token in script.split(","):
        token = token.strip().lower()
        if not token:
            continue
        word, _, count = token.partition("*")
        if word not in COMMAND_WORDS:
            raise ValueError(f"unknown command {word!r}; expected one of {sorted(COMMAND_WORDS)}")
        repeat = int(count) if count else 1
        if repeat < 1:
            raise ValueError(f"repeat count must be >= 1, got {repeat}")
        commands.extend([COMMAND_WORDS[word]] * repeat)
    return commands


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with all options."""
    parser = argparse.ArgumentParser(
        description="Filtern - digit automaton puzzle",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # Level selection
    parser.add_argument(
        "--list-levels", action="store_true",
        help="List the built-in levels and exit"
    )
    parser.add_argument(
        "--level", type=int, default=1,
        help="Level number to load (1-based)"
    )

    # Headless run
    parser.add_argument(
        "--commands", type=str, default="",
        help="Comma-separated commands applied before running "
             "(up, down, left, right, swap, confirm, run, reset, next, prev; word*N repeats)"
    )
    parser.add_argument(
        "--ticks", type=int, default=30,
        help="Maximum number of ticks to run"
    )
    parser.add_argument(
        "--no-progress", action="store_true",
        help="Hide the progress bar"
    )

    # Interactive play
    parser.add_argument(
        "--play", action="store_true",
        help="Open the interactive window"
    )
    parser.add_argument(
        "--fps", type=int, default=30,
        help="Frames per second for the interactive window"
    )

    # Output
    parser.add_argument(
        "--save-frames", type=str, default=None,
        help="Directory to save a frame image after every change"
    )
    parser.add_argument(
        "--save-state", type=str, default=None,
        help="Save the final state to a JSON file"
    )
    parser.add_argument(
        "--log-level", type=str, default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    parser.add_argument("--log-file", type=str, default=None)

    # Config parameter overrides
    parser.add_argument(
        "--boundary", type=str, default=None, choices=list(BOUNDARY_MODES),
        dest="boundary_mode"
    )
    parser.add_argument("--speed-scale", type=float, default=None, dest="speed_scale")
    parser.add_argument("--pool-columns", type=int, default=None, dest="pool_columns")
    parser.add_argument(
        "--catch-up", action="store_true", default=None, dest="catch_up",
        help="Fire one tick per whole clock unit crossed in a frame"
    )

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(getattr(logging, args.log_level), args.log_file)

    try:
        config = Config.from_args(args)
        commands = parse_commands(args.commands)
        levels = default_levels()
        if not 1 <= args.level <= len(levels):
            raise ValueError(f"level must be in [1, {len(levels)}], got {args.level}")
        sim = Simulation(config, levels, level_index=args.level - 1)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    if args.list_levels:
        for index in range(len(sim.catalog)):
            print(sim.catalog.label(index))
        return 0

    if args.save_frames:
        from .visualization import FrameRecorder

        recorder = FrameRecorder(args.save_frames)
        sim.add_listener(recorder)
        recorder(sim.snapshot())

    if args.play:
        from .visualization import Visualizer

        Visualizer(sim, fps=args.fps).show_live()
        return 0

    print(sim.catalog.label(sim.level_index))
    for command in commands:
        outcome = sim.handle(command)
        if outcome is not None and not outcome.changed and outcome is not PlacementOutcome.NOTHING:
            print(f"  {type(command).__name__} at {sim.placement.cursor.cell}: {outcome.value}")

    executed = sim.run(args.ticks, show_progress=not args.no_progress)

    print()
    print(f"Ticks: {executed}  Run state: {sim.run_state.value} ({sim.run_state.symbol})")
    for digit_id, digit in sim.field.store.digits.items():
        print(f"  Digit {digit_id}: cell={digit.cell} value={digit.value} "
              f"direction={digit.direction.value}")

    if args.save_state:
        with open(args.save_state, "w") as f:
            json.dump(sim.get_state_dict(), f, indent=2)
        print(f"State saved to {args.save_state}")

    print("Solved!" if sim.solved else "Not solved.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
