import matplotlib
import pytest

from acequia.system import AcequiaSystem
from acequia.testing import make_canal, make_region, make_source, make_system

matplotlib.use("Agg")


@pytest.fixture
def simple_system() -> AcequiaSystem:
    """North has 7 m³ to spare, South is 8 m³ short, one canal between them."""
    return make_system(
        make_region("north", initial_level=20.0, need=10.0, capacity=30.0),
        make_region("south", initial_level=2.0, need=10.0, capacity=20.0),
        make_source("river", initial_level=100.0),
        make_canal("c1", "north", "south", water_source="river"),
    )


@pytest.fixture
def low_source_system() -> AcequiaSystem:
    return make_system(
        make_region("north", initial_level=20.0, need=10.0, capacity=30.0),
        make_region("south", initial_level=2.0, need=10.0, capacity=20.0),
        make_source("river", initial_level=3.0),
        make_canal("c1", "north", "south", water_source="river"),
    )


@pytest.fixture
def satisfied_system() -> AcequiaSystem:
    return make_system(
        make_region("north", initial_level=20.0, need=10.0, capacity=30.0),
        make_region("south", initial_level=10.0, need=10.0, capacity=20.0),
        make_source("river", initial_level=100.0),
        make_canal("c1", "north", "south", water_source="river"),
    )
