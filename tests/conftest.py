"""
Pytest configuration and fixtures for Filtern tests.
"""

import matplotlib

matplotlib.use("Agg")

import pytest

from filtern.config import Config
from filtern.field import Field
from filtern.levels import DigitSpec, FilterSpec, Level, RequirementSpec, ShifterSpec
from filtern.placement import PlacementController
from filtern.simulation import Simulation
from filtern.state import Direction, Operation


@pytest.fixture
def default_config() -> Config:
    """Default configuration for tests."""
    return Config()


@pytest.fixture
def wrap_config() -> Config:
    """Toroidal field."""
    return Config(boundary_mode="wrap")


@pytest.fixture
def sandbox_level() -> Level:
    """
    Level exercising every placement rule.

    Ids after loading: digit 0, requirement 1, locked +1 filter 2,
    placeable +2 filter 3, placeable right shifter 4, placeable up shifter 5.
    """
    return Level(
        name="Sandbox",
        digits=(DigitSpec((1, 1), 0, Direction.UP),),
        requirements=(RequirementSpec((5, 5), 3),),
        filters=(
            FilterSpec(Operation.ADD, 1, cell=(3, 3)),
            FilterSpec(Operation.ADD, 2, placeable=True),
        ),
        shifters=(
            ShifterSpec(Direction.RIGHT, placeable=True),
            ShifterSpec(Direction.UP, placeable=True),
        ),
    )


@pytest.fixture
def sandbox_field(sandbox_level: Level) -> Field:
    return Field.from_level(sandbox_level, 10, 10)


@pytest.fixture
def controller() -> PlacementController:
    return PlacementController(pool_columns=8)


@pytest.fixture
def simulation(default_config: Config) -> Simulation:
    """Simulation on the built-in catalog, first level loaded."""
    return Simulation(default_config)
