import numpy as np
import pytest

from convection.advect import advect, bilinear_sample
from convection.boundary import BoundaryKind


def test_zero_velocity_is_identity(rng):
    d0 = rng.random((10, 10)).astype(np.float32)
    zero = np.zeros_like(d0)
    d = np.zeros_like(d0)
    advect(BoundaryKind.SCALAR, d, d0, zero, zero, dt=0.02)
    assert np.array_equal(d[1:-1, 1:-1], d0[1:-1, 1:-1])


def test_uniform_velocity_shifts_one_cell(rng):
    N, dt = 8, 0.5
    d0 = rng.random((N + 2, N + 2)).astype(np.float32)
    u = np.full_like(d0, 1.0 / (dt * N))   # backtrace of exactly one cell
    v = np.zeros_like(d0)
    d = np.zeros_like(d0)
    advect(BoundaryKind.SCALAR, d, d0, u, v, dt)
    assert np.allclose(d[2:-1, 1:-1], d0[1:-2, 1:-1])


def test_backtrace_clamped_to_half_cell(rng):
    N = 8
    d0 = rng.random((N + 2, N + 2)).astype(np.float32)
    u = np.full_like(d0, 1000.0)
    v = np.zeros_like(d0)
    d = np.zeros_like(d0)
    advect(BoundaryKind.SCALAR, d, d0, u, v, dt=0.02)
    expected = 0.5 * (d0[0, 1:-1] + d0[1, 1:-1])
    for i in range(1, N + 1):
        assert np.allclose(d[i, 1:-1], expected)


def test_bilinear_sample_midpoint():
    field = np.zeros((4, 4), dtype=np.float32)
    field[1, 1], field[2, 1], field[1, 2], field[2, 2] = 1.0, 2.0, 3.0, 4.0
    value = bilinear_sample(field, np.array([1.5]), np.array([1.5]))
    assert value[0] == pytest.approx(2.5)


def test_result_has_halo_applied(rng):
    d0 = rng.random((10, 10)).astype(np.float32)
    u = rng.standard_normal((10, 10)).astype(np.float32) * 0.1
    v = rng.standard_normal((10, 10)).astype(np.float32) * 0.1
    d = np.zeros_like(d0)
    advect(BoundaryKind.NORMAL_Y, d, d0, u, v, dt=0.02)
    assert np.array_equal(d[1:-1, 0], -d[1:-1, 1])
