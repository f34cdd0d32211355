"""
diffuse.py — Implicit Diffusion via Fixed Gauss-Seidel Relaxation
==================================================================
Diffusion makes the fields spread out over time.
  - Viscosity   → velocity smears out (thick vs. thin fluid)
  - Diffusivity → heat spreads to neighbouring cells

The math: we solve the implicit heat equation
  (I - a·∇²) x_new = x_old

where a = dt * rate * N²

Implicit is unconditionally stable, so a large dt never blows up the
diffusion step on its own.

We do NOT iterate to convergence. The solver runs a fixed number of
in-place Gauss-Seidel sweeps (4 by default). That count shapes the look of the flow,
so changing it changes the dynamics, not just the accuracy.

The same relaxation also solves the pressure Poisson equation in
solver.py (a = 1, c = 4).
"""

import numpy as np

from .boundary import BoundaryKind, enforce

DEFAULT_ITERATIONS = 4


def _row_propagator(N: int, k: float):
    """
    Lower-triangular T with T[r, m] = k**(r - m), and h[r] = k**(r + 1).

    Solves the in-row recurrence x[r] = b[r] + k * x[r - 1] for a whole row
    at once: x = T @ b + h * x_halo.
    """
    r = np.arange(N)
    lag = r[:, None] - r[None, :]
    T = np.where(lag >= 0, float(k) ** np.maximum(lag, 0), 0.0)
    h = float(k) ** (r + 1)
    return T, h


def relax(
    kind: BoundaryKind,
    x: np.ndarray,
    x0: np.ndarray,
    a: float,
    c: float,
    iterations: int = DEFAULT_ITERATIONS,
) -> np.ndarray:
    """
    In-place (Gauss-Seidel) relaxation for:
      x[i,j] = (x0[i,j] + a * sum_of_4_neighbors) / c

    Sweeps rows j = 1..N, and within a row i = 1..N, so every cell already
    sees this sweep's new x[i-1,j] and x[i,j-1]. The halo is only refreshed
    between sweeps.

    Each row is one vectorized step: the i-1 dependency is a first-order
    recurrence, solved with a precomputed triangular propagator.

    Args:
        kind       : Boundary rule applied after every sweep
        x          : Field being solved for, refined in place
        x0         : Right-hand side
        a          : Neighbour coupling
        c          : Normalization (1 + 4a for diffusion, 4 for pressure)
        iterations : Number of sweeps (fixed, not convergence-checked)

    Returns:
        x (same array)
    """
    N = x.shape[0] - 2
    c_inv = 1.0 / c
    T, h = _row_propagator(N, a * c_inv)
    for _ in range(iterations):
        for j in range(1, N + 1):
            b = (x0[1:-1, j] + a * (
                x[2:, j] +       # i+1, this sweep's old value
                x[1:-1, j - 1] + # j-1, already updated
                x[1:-1, j + 1]   # j+1, old value
            )) * c_inv
            x[1:-1, j] = T @ b + h * x[0, j]
        enforce(kind, x)
    return x


def diffuse(
    kind: BoundaryKind,
    x: np.ndarray,
    x0: np.ndarray,
    rate: float,
    dt: float,
    iterations: int = DEFAULT_ITERATIONS,
) -> np.ndarray:
    """
    Diffuse ``x0`` into ``x`` with the given rate (viscosity or diffusivity).

    Used identically for u, v and the scalar field; only ``kind`` differs.

    Modifies: x (in-place)
    """
    N = x.shape[0] - 2
    a = dt * rate * N * N
    return relax(kind, x, x0, a, 1.0 + 4.0 * a, iterations)
