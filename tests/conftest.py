import numpy as np
import pytest

from convection import ConvectionParams, ConvectionSimulation


# Known-stable regime: small grids, dt = 0.02, rates well below 1e-2
STABLE = dict(size=16, dt=0.02, viscosity=0.0001, diffusivity=0.0001, seed=0)


@pytest.fixture
def make_params():
    def _make(**overrides):
        values = dict(STABLE)
        values.update(overrides)
        return ConvectionParams(**values)
    return _make


@pytest.fixture
def make_sim(make_params):
    def _make(**overrides):
        return ConvectionSimulation(make_params(**overrides))
    return _make


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
