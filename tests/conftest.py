import matplotlib

matplotlib.use("Agg")

import pytest

from barometer.model.environment import Environment
from barometer.model.geometry_primitives import Point
from barometer.model.liquids import LiquidKind, builtin_liquid
from barometer.model.tube import Tube, TubeShape


@pytest.fixture
def water_env() -> Environment:
    return Environment(liquid=builtin_liquid(LiquidKind.WATER))


@pytest.fixture
def mercury_env() -> Environment:
    return Environment()


@pytest.fixture
def plain_tube() -> Tube:
    """300 px tall tube standing on the canvas top edge, mouth up."""
    return Tube.from_shape(TubeShape.PLAIN, center=Point(50.0, 150.0))
