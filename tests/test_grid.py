import numpy as np
import pytest

from convection.grid import GridState


def test_fields_allocated_with_halo():
    g = GridState(N=8, ambient=0.5)
    for arr in (g.u, g.v, g.density, g.u_prev, g.v_prev, g.density_prev,
                g.u0, g.v0, g.density0, g.pressure, g.divergence):
        assert arr.shape == (10, 10)
    assert np.all(g.density == 0.5)
    assert not g.u.any() and not g.v.any()


def test_index_matches_flattened_layout():
    g = GridState(N=4)
    g.density[:] = np.arange(36, dtype=np.float32).reshape(6, 6)
    flat = g.flat(g.density)
    for i, j in [(0, 0), (1, 2), (5, 0), (3, 5), (5, 5)]:
        assert g.index(i, j) == i + j * 6
        assert flat[g.index(i, j)] == g.density[i, j]


def test_index_outside_halo_raises():
    g = GridState(N=4)
    with pytest.raises(IndexError):
        g.index(6, 0)
    with pytest.raises(IndexError):
        g.index(0, -1)


def test_reset_restores_ambient_and_zero_velocity():
    g = GridState(N=6, ambient=0.3)
    g.u[:] = 1.0
    g.density[:] = 0.9
    g.pressure[:] = 2.0
    g.reset()
    assert np.all(g.density == np.float32(0.3))
    assert not g.u.any() and not g.pressure.any()


def test_reallocate_changes_size():
    g = GridState(N=6, ambient=0.5)
    g.reallocate(12)
    assert g.N == 12 and g.size == 14
    assert g.density.shape == (14, 14)
    assert np.all(g.density == 0.5)


def test_snapshot_is_interior_copy():
    g = GridState(N=5)
    snap = g.snapshot()
    assert snap.shape == (5, 5)
    snap[:] = 7.0
    assert not np.any(g.density == 7.0)
