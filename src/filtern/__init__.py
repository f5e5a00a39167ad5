"""
Filtern - a digit automaton puzzle.

Digits travel across a small grid, get redirected by shifters and
transformed by filters, and must reach requirement cells holding
matching values.
"""

__version__ = "0.1.0"

from .config import Config
from .levels import Level, LevelCatalog, LevelError, default_levels
from .simulation import Simulation
from .state import Direction, Operation, RunState

__all__ = [
    "Config",
    "Direction",
    "Level",
    "LevelCatalog",
    "LevelError",
    "Operation",
    "RunState",
    "Simulation",
    "default_levels",
    "__version__",
]
