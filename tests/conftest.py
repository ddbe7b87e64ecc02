import matplotlib
matplotlib.use("Agg")

import pytest

from config import Configuration


@pytest.fixture
def config():
    """Default gameplay configuration (unit = 50 points)."""
    return Configuration()


@pytest.fixture
def small_config():
    """Unit-scale configuration so areas read directly in tangram units."""
    return Configuration(unit=1.0, vertex_tolerance=0.1, min_vertex_separation=0.01,
                         overlap_area_tolerance=1e-6)
