#!/usr/bin/env python3
"""
Filtern solutions example.

This script demonstrates:
1. Loading built-in levels
2. Placing modifiers with cursor commands
3. Running the automaton headless until the level is solved
4. Saving a rendered frame of each solved level
"""

import sys

from filtern import Config, Simulation
from filtern.main import parse_commands
from filtern.placement import PlacementOutcome


# Level index -> command script that solves it
SOLUTIONS = {
    0: "",
    1: "swap,confirm,right*6,up*5,confirm",
    2: "swap,confirm,right*3,up*3,confirm",
    3: "swap,confirm,right*4,up*6,confirm,swap,confirm,left,confirm",
}


def main():
    print("=" * 60)
    print("Filtern - Digit Automaton Puzzle")
    print("Solutions Example")
    print("=" * 60)
    print()

    config = Config()
    sim = Simulation(config)

    save_frames = "--save" in sys.argv[1:]

    for index, script in SOLUTIONS.items():
        sim.load_level(index)
        print(sim.catalog.label(index))

        for command in parse_commands(script):
            outcome = sim.handle(command)
            if outcome is PlacementOutcome.PLACED:
                print(f"  Placed modifier at {sim.placement.cursor.cell}")

        ticks = sim.run(30, show_progress=False)
        status = "solved" if sim.solved else "not solved"
        print(f"  {status} after {ticks} ticks")

        if save_frames:
            from filtern.visualization import save_snapshot_image

            path = f"frames/level_{index + 1}.png"
            save_snapshot_image(sim.snapshot(), path)
            print(f"  Frame saved to {path}")
        print()

    print("To play interactively, run:")
    print("  python -m filtern.main --play")
    print()


if __name__ == "__main__":
    main()
