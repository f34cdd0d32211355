import numpy as np
import pytest

from convection.boundary import BoundaryKind, enforce
from convection.diffuse import diffuse, relax


def test_zero_rate_returns_right_hand_side(rng):
    x0 = enforce(BoundaryKind.SCALAR, rng.random((10, 10)).astype(np.float32))
    x = x0.copy()
    diffuse(BoundaryKind.SCALAR, x, x0, rate=0.0, dt=0.02)
    assert np.array_equal(x[1:-1, 1:-1], x0[1:-1, 1:-1])


def test_uniform_field_stays_uniform():
    x0 = np.full((12, 12), 0.7, dtype=np.float32)
    x = x0.copy()
    diffuse(BoundaryKind.SCALAR, x, x0, rate=0.001, dt=0.02)
    assert np.allclose(x, 0.7, atol=1e-6)


def test_spike_spreads_to_neighbours():
    x0 = np.zeros((11, 11), dtype=np.float32)
    x0[5, 5] = 1.0
    x = x0.copy()
    diffuse(BoundaryKind.SCALAR, x, x0, rate=0.01, dt=0.02)
    assert x[5, 5] < 1.0
    assert x[4, 5] > 0.0 and x[6, 5] > 0.0 and x[5, 4] > 0.0 and x[5, 6] > 0.0
    assert x.max() <= 1.0


def _in_place_sweeps(x, x0, a, c, iterations, kind=BoundaryKind.SCALAR):
    x = x.copy()
    n = x.shape[0] - 2
    for _ in range(iterations):
        for j in range(1, n + 1):
            for i in range(1, n + 1):
                x[i, j] = (x0[i, j] + a * (x[i - 1, j] + x[i + 1, j] +
                                           x[i, j - 1] + x[i, j + 1])) / c
        enforce(kind, x)
    return x


@pytest.mark.parametrize("a, c, iterations", [
    (0.3, 1.0 + 4 * 0.3, 1),
    (0.0016, 1.0 + 4 * 0.0016, 4),
    (1.0, 4.0, 4),
])
def test_sweeps_match_in_place_loop(rng, a, c, iterations):
    x0 = enforce(BoundaryKind.SCALAR, rng.random((8, 8)).astype(np.float32))
    x = enforce(BoundaryKind.SCALAR, rng.random((8, 8)).astype(np.float32))
    expected = _in_place_sweeps(x, x0, a, c, iterations)
    relax(BoundaryKind.SCALAR, x, x0, a, c, iterations=iterations)
    assert np.allclose(x, expected, atol=1e-6)


def test_updated_neighbours_used_within_a_sweep():
    # One sweep from zero: cell (2,1) already sees the new value of (1,1)
    x0 = np.zeros((6, 6), dtype=np.float32)
    x0[1, 1] = 1.0
    x = np.zeros_like(x0)
    relax(BoundaryKind.SCALAR, x, x0, a=1.0, c=4.0, iterations=1)
    assert x[1, 1] == pytest.approx(0.25)
    assert x[2, 1] == pytest.approx(0.0625)
    assert x[1, 2] == pytest.approx(0.0625)


def test_boundary_enforced_after_solve(rng):
    x0 = rng.random((9, 9)).astype(np.float32)
    x = x0.copy()
    diffuse(BoundaryKind.NORMAL_X, x, x0, rate=0.001, dt=0.02)
    assert np.array_equal(x[0, 1:-1], -x[1, 1:-1])
