"""
Configuration dataclass for the Filtern automaton.

Defaults reproduce the classic tuning: a 10x10 clamped field,
a clock that ticks almost immediately after unpausing, and an eight column
available pool.
"""

from dataclasses import dataclass, asdict
from typing import Any


BOUNDARY_MODES = ("clamp", "wrap")


@dataclass
class Config:
    """
    Complete configuration for a Filtern simulation.

    Attributes:
        grid_width: Number of field columns
        grid_height: Number of field rows

        # Movement
        boundary_mode: Edge policy for digits ("clamp" stops at the edge,
            "wrap" is toroidal). Levels may override it.

        # Clock
        start_offset: Fractional clock value used when seeding or pausing,
            so the first tick after unpausing arrives almost immediately
        speed_scale: Clock units advanced per second of real time
        catch_up: If True, fire one tick per whole unit crossed in a frame
            instead of collapsing them into a single tick

        # Placement
        pool_columns: Column count of the available-pool layout

        # Diagnostics
        check_invariants: Verify grid index consistency after every tick
            and placement
    """

    # Grid
    grid_width: int = 10
    grid_height: int = 10

    # Movement
    boundary_mode: str = "clamp"

    # Clock
    start_offset: float = 0.9
    speed_scale: float = 1.8
    catch_up: bool = False

    # Placement
    pool_columns: int = 8

    # Diagnostics
    check_invariants: bool = True

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        self._validate()

    def _validate(self) -> None:
        """Check that all parameters are in valid ranges."""
        if self.grid_width < 1:
            raise ValueError(f"grid_width must be >= 1, got {self.grid_width}")

        if self.grid_height < 1:
            raise ValueError(f"grid_height must be >= 1, got {self.grid_height}")

        if self.boundary_mode not in BOUNDARY_MODES:
            raise ValueError(
                f"boundary_mode must be one of {BOUNDARY_MODES}, got {self.boundary_mode}"
            )

        if not 0 <= self.start_offset < 1:
            raise ValueError(f"start_offset must be in [0, 1), got {self.start_offset}")

        if self.speed_scale <= 0:
            raise ValueError(f"speed_scale must be > 0, got {self.speed_scale}")

        if self.pool_columns < 1:
            raise ValueError(f"pool_columns must be >= 1, got {self.pool_columns}")

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Config":
        """Create config from dictionary, ignoring unknown keys."""
        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        return cls(**{k: v for k, v in d.items() if k in known_fields})

    @classmethod
    def from_args(cls, args: Any) -> "Config":
        """Create config from argparse namespace."""
        # Extract only known fields
        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        config_dict = {k: v for k, v in vars(args).items() if k in known_fields and v is not None}
        return cls(**config_dict)

    @property
    def grid_shape(self) -> tuple[int, int]:
        """Field dimensions (width, height)."""
        return (self.grid_width, self.grid_height)

    def __repr__(self) -> str:
        return (
            f"Config(\n"
            f"  grid={self.grid_width}x{self.grid_height}, boundary_mode={self.boundary_mode},\n"
            f"  start_offset={self.start_offset}, speed_scale={self.speed_scale}, "
            f"catch_up={self.catch_up},\n"
            f"  pool_columns={self.pool_columns}, check_invariants={self.check_invariants}\n"
            f")"
        )
