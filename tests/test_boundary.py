import numpy as np
import pytest

from convection.boundary import BoundaryKind, enforce


@pytest.fixture
def field(rng):
    return rng.standard_normal((10, 10)).astype(np.float32)


def test_scalar_copies_adjacent_interior(field):
    enforce(BoundaryKind.SCALAR, field)
    assert np.array_equal(field[0, 1:-1], field[1, 1:-1])
    assert np.array_equal(field[-1, 1:-1], field[-2, 1:-1])
    assert np.array_equal(field[1:-1, 0], field[1:-1, 1])
    assert np.array_equal(field[1:-1, -1], field[1:-1, -2])


def test_normal_x_reflects_left_right_copies_top_bottom(field):
    enforce(BoundaryKind.NORMAL_X, field)
    assert np.array_equal(field[0, 1:-1], -field[1, 1:-1])
    assert np.array_equal(field[-1, 1:-1], -field[-2, 1:-1])
    assert np.array_equal(field[1:-1, 0], field[1:-1, 1])
    assert np.array_equal(field[1:-1, -1], field[1:-1, -2])


def test_normal_y_reflects_top_bottom_copies_left_right(field):
    enforce(BoundaryKind.NORMAL_Y, field)
    assert np.array_equal(field[1:-1, 0], -field[1:-1, 1])
    assert np.array_equal(field[1:-1, -1], -field[1:-1, -2])
    assert np.array_equal(field[0, 1:-1], field[1, 1:-1])
    assert np.array_equal(field[-1, 1:-1], field[-2, 1:-1])


def test_corners_average_their_neighbours(field):
    enforce(BoundaryKind.NORMAL_X, field)
    assert field[0, 0] == pytest.approx(0.5 * (field[1, 0] + field[0, 1]))
    assert field[0, -1] == pytest.approx(0.5 * (field[1, -1] + field[0, -2]))
    assert field[-1, 0] == pytest.approx(0.5 * (field[-2, 0] + field[-1, 1]))
    assert field[-1, -1] == pytest.approx(0.5 * (field[-2, -1] + field[-1, -2]))


@pytest.mark.parametrize("kind", list(BoundaryKind))
def test_enforce_is_idempotent(field, kind):
    once = enforce(kind, field.copy())
    twice = enforce(kind, enforce(kind, field.copy()))
    assert np.array_equal(once, twice)


def test_interior_untouched(field):
    before = field[1:-1, 1:-1].copy()
    enforce(BoundaryKind.NORMAL_Y, field)
    assert np.array_equal(field[1:-1, 1:-1], before)
