import pytest

from gravsim.simulation import Simulation


@pytest.fixture
def empty_sim():
    return Simulation(preset="empty", prediction_horizon=8)


@pytest.fixture
def demo_sim():
    return Simulation(preset="demo", prediction_horizon=8)
