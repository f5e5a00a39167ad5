"""
Visualization utilities for Filtern.

Draws frame snapshots with matplotlib and provides an interactive window
that turns key presses into simulation commands.
"""

import math
import time
from pathlib import Path
from typing import Optional

import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.patches import Circle, Rectangle

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
from .presentation import FrameSnapshot


BACKGROUND = "#050505"
GRID_COLOR = "#2b2b2b"
MODIFIER_COLOR = "#d9d9d9"
REQUIREMENT_COLOR = "#2e7d32"
DIGIT_COLOR = "#1565c0"
CURSOR_COLOR = "#ffb300"

CONTROLS_TEXT = (
    "Space: Start/Stop Automata\n"
    "R: Reset Digits\n"
    "Arrow Keys: Move Cursor\n"
    "S: Swap Cursor\n"
    "D: Select/Place/Exchange/Remove\n"
    "B/N: Previous or Next Level\n"
    "== Means Success"
)

# Matplotlib key names -> commands
KEY_BINDINGS: dict[str, Command] = {
    "up": MoveCursor(0, 1),
    "down": MoveCursor(0, -1),
    "left": MoveCursor(-1, 0),
    "right": MoveCursor(1, 0),
    "s": ToggleCursorRegion(),
    "d": Confirm(),
    " ": ToggleRun(),
    "r": Reset(),
    "n": NextLevel(),
    "b": PreviousLevel(),
}


def pool_origin(snapshot: FrameSnapshot) -> tuple[float, float]:
    """Lower-left anchor of the first pool slot, right of the field."""
    width, height = snapshot.grid_shape
    return (width + 1.0, height - 2.2)


def pool_slot_center(snapshot: FrameSnapshot, slot: int) -> tuple[float, float]:
    ox, oy = pool_origin(snapshot)
    cols = snapshot.pool_columns
    return (ox + slot % cols, oy - slot // cols)


def draw_snapshot(ax: Axes, snapshot: FrameSnapshot) -> None:
    """
    Draw a full frame onto an axes.

    Cell (x, y) is centered on data coordinates (x, y), so the field spans
    [-0.5, width - 0.5] x [-0.5, height - 0.5].

    Args:
        ax: Target axes (cleared first)
        snapshot: Frame to draw
    """
    ax.clear()
    ax.set_facecolor(BACKGROUND)
    ax.set_aspect("equal")
    ax.set_axis_off()

    width, height = snapshot.grid_shape
    pooled = sum(1 for m in snapshot.modifiers if m.pool_slot is not None)
    pool_rows = max(1, math.ceil(pooled / snapshot.pool_columns))
    ax.set_xlim(-1.0, width + snapshot.pool_columns + 1.5)
    ax.set_ylim(-1.0, max(height, pool_rows + 1) + 0.5)

    for x in range(width):
        for y in range(height):
            ax.add_patch(Rectangle((x - 0.4, y - 0.4), 0.8, 0.8, color=GRID_COLOR))

    for requirement in snapshot.requirements:
        x, y = requirement.cell
        ax.add_patch(Rectangle((x - 0.3, y - 0.3), 0.6, 0.6, color=REQUIREMENT_COLOR))
        ax.text(x, y, str(requirement.value), color="white",
                ha="center", va="center", fontsize=9)

    for modifier in snapshot.modifiers:
        if modifier.cell is not None:
            cx, cy = modifier.cell
        elif modifier.pool_slot is not None:
            cx, cy = pool_slot_center(snapshot, modifier.pool_slot)
        else:
            continue
        ax.add_patch(Rectangle((cx - 0.35, cy - 0.35), 0.7, 0.7, color=MODIFIER_COLOR))
        ax.text(cx, cy, modifier.label, color="black",
                ha="center", va="center", fontsize=10, fontweight="bold")
        if modifier.locked:
            for sx, sy in ((1, 1), (1, -1), (-1, -1), (-1, 1)):
                ax.add_patch(Rectangle((cx + 0.4 * sx - 0.1, cy + 0.4 * sy - 0.1),
                                       0.2, 0.2, color=GRID_COLOR))

    for digit in snapshot.digits:
        x, y = digit.cell
        ax.add_patch(Circle((x, y), 0.3, color=DIGIT_COLOR))
        ax.text(x, y - 0.05, str(digit.value), color="white",
                ha="center", va="center", fontsize=9)
        ax.text(x + 0.25, y + 0.25, digit.arrow, color="white",
                ha="center", va="center", fontsize=7)

    cursor = snapshot.cursor
    if cursor.visible:
        if cursor.region == "field":
            cx, cy = cursor.cell
        else:
            ox, oy = pool_origin(snapshot)
            cx, cy = ox + cursor.pool_cell[0], oy - cursor.pool_cell[1]
        ax.add_patch(Rectangle((cx - 0.5, cy - 0.5), 1.0, 1.0,
                               fill=False, edgecolor=CURSOR_COLOR, linewidth=2))

    ox, oy = pool_origin(snapshot)
    ax.text(ox + 3.5, height - 1.0, snapshot.run_symbol, color="white",
            ha="center", va="center", fontsize=18, family="monospace")
    ax.text(ox, oy - pool_rows - 0.3, snapshot.level_label, color="white",
            ha="left", va="top", fontsize=9)
    ax.text(ox, oy - pool_rows - 1.2, CONTROLS_TEXT, color="white",
            ha="left", va="top", fontsize=7)


def render_snapshot(snapshot: FrameSnapshot, figsize: tuple[float, float] = (10, 5.5)) -> Figure:
    """
    Render a frame into a new figure.

    Args:
        snapshot: Frame to draw
        figsize: Figure size in inches

    Returns:
        The matplotlib figure (caller closes it)
    """
    fig, ax = plt.subplots(figsize=figsize)
    fig.patch.set_facecolor(BACKGROUND)
    draw_snapshot(ax, snapshot)
    return fig


def save_snapshot_image(snapshot: FrameSnapshot, path: str) -> None:
    """
    Save a frame as an image file.

    Args:
        snapshot: Frame to draw
        path: Output file path (format taken from the extension)
    """
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig = render_snapshot(snapshot)
    fig.savefig(output_path, facecolor=fig.get_facecolor())
    plt.close(fig)


class FrameRecorder:
    """
    Listener that writes every published snapshot to a directory.

    Attributes:
        output_dir: Directory receiving the frames
        prefix: Filename prefix
        count: Number of frames written
    """

    def __init__(self, output_dir: str, prefix: str = "frame"):
        self.output_dir = Path(output_dir)
        self.prefix = prefix
        self.count = 0

    def __call__(self, snapshot: FrameSnapshot) -> None:
        path = self.output_dir / f"{self.prefix}_{self.count:06d}_tick{snapshot.tick:04d}.png"
        save_snapshot_image(snapshot, str(path))
        self.count += 1


class Visualizer:
    """
    Interactive window for playing levels.

    Key presses become commands; a matplotlib animation drives the
    simulation clock once per frame.
    """

    def __init__(
        self,
        simulation: "Simulation",  # Forward reference
        fps: int = 30,
    ):
        """
        Initialize visualizer.

        Args:
            simulation: Simulation to play
            fps: Target frames per second
        """
        self.sim = simulation
        self.fps = fps

        # Free the game keys from matplotlib's default navigation shortcuts
        for name in [k for k in plt.rcParams if k.startswith("keymap.")]:
            plt.rcParams[name] = []

        self.fig, self.ax = plt.subplots(figsize=(10, 5.5))
        self.fig.patch.set_facecolor(BACKGROUND)
        self.fig.canvas.mpl_connect("key_press_event", self._on_key)
        self._dirty = True
        self._last_frame = time.perf_counter()
        self.sim.add_listener(self._on_change)
        self._redraw()

    def _on_change(self, snapshot: FrameSnapshot) -> None:
        self._dirty = True

    def _on_key(self, event) -> None:
        command = KEY_BINDINGS.get(event.key)
        if command is not None:
            self.sim.handle(command)

    def _redraw(self) -> None:
        draw_snapshot(self.ax, self.sim.snapshot())
        self._dirty = False

    def _animation_update(self, frame: int) -> list:
        """Advance the clock by the real time since the previous frame."""
        now = time.perf_counter()
        self.sim.update(now - self._last_frame)
        self._last_frame = now
        if self._dirty:
            self._redraw()
        return []

    def show_live(self, frames: Optional[int] = None) -> None:
        """
        Display the interactive window until it is closed.

        Args:
            frames: Number of frames to animate (None for unbounded)
        """
        interval = 1000 // self.fps
        self._last_frame = time.perf_counter()

        self.anim = FuncAnimation(
            self.fig,
            self._animation_update,
            frames=frames,
            interval=interval,
            blit=False,
            cache_frame_data=False,
        )

        plt.show()
