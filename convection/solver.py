"""
solver.py — Pressure Projection
================================
The pressure projection step enforces (approximate) INCOMPRESSIBILITY:
  div(v) ≈ 0 everywhere

After diffusion, buoyancy and advection the velocity field is generally
NOT divergence-free (fluid "piles up" in some cells). We fix this by:
  1. Computing the divergence of the current velocity field
  2. Solving the Poisson equation for pressure: ∇²p = div(v)
  3. Subtracting the pressure gradient from velocity: v = v - ∇p

This is the Helmholtz-Hodge decomposition: any vector field splits into
a divergence-free part plus a gradient. We keep the divergence-free part.

The Poisson solve reuses the fixed-sweep relaxation from diffuse.py, so
the result is only approximately divergence-free. That is intended.

Projection runs twice per tick: once before advection and once after.
"""

import time

import numpy as np

from .boundary import BoundaryKind, enforce
from .diffuse import DEFAULT_ITERATIONS, relax


def compute_divergence(u: np.ndarray, v: np.ndarray, out: np.ndarray = None) -> np.ndarray:
    """
    Central-difference divergence, pre-scaled for the Poisson solve:

      div[i,j] = -0.5/N * ((u[i+1,j] - u[i-1,j]) + (v[i,j+1] - v[i,j-1]))

    Writes interior cells of ``out`` (allocated if missing) and enforces
    the SCALAR halo on it.
    """
    N = u.shape[0] - 2
    if out is None:
        out = np.zeros_like(u)
    out[1:-1, 1:-1] = -0.5 / N * (
        (u[2:, 1:-1] - u[:-2, 1:-1]) +
        (v[1:-1, 2:] - v[1:-1, :-2])
    )
    return enforce(BoundaryKind.SCALAR, out)


def project(
    u: np.ndarray,
    v: np.ndarray,
    pressure: np.ndarray,
    divergence: np.ndarray,
    iterations: int = DEFAULT_ITERATIONS,
) -> dict:
    """
    Pressure projection: make the velocity field (approximately) divergence-free.

    Args:
        u, v       : Velocity components, modified in place
        pressure   : Scratch for the pressure solve (overwritten)
        divergence : Scratch for the divergence (overwritten)
        iterations : Relaxation sweeps for the Poisson solve

    Returns:
        dict with timing and divergence metrics (for benchmarking)
    """
    t_start = time.perf_counter()
    div_before = max_divergence(u, v)

    # Step 1: divergence, pressure starts from zero
    compute_divergence(u, v, out=divergence)
    pressure[:] = 0.0
    enforce(BoundaryKind.SCALAR, pressure)

    # Step 2: Poisson solve
    relax(BoundaryKind.SCALAR, pressure, divergence, 1.0, 4.0, iterations)

    # Step 3: subtract the pressure gradient
    _subtract_pressure_gradient(u, v, pressure)

    t_end = time.perf_counter()

    return {
        "time_ms"               : (t_end - t_start) * 1000,
        "iterations"            : iterations,
        "divergence_before_max" : div_before,
        "divergence_after_max"  : max_divergence(u, v),
    }


def _subtract_pressure_gradient(u: np.ndarray, v: np.ndarray, pressure: np.ndarray):
    """
    v_new = v_old - ∇p, central differences scaled by 0.5·N.

    Re-applies the wall rules: u reflects at left/right, v at top/bottom.
    """
    N = u.shape[0] - 2
    half_n = 0.5 * N
    u[1:-1, 1:-1] -= half_n * (pressure[2:, 1:-1] - pressure[:-2, 1:-1])
    v[1:-1, 1:-1] -= half_n * (pressure[1:-1, 2:] - pressure[1:-1, :-2])
    enforce(BoundaryKind.NORMAL_X, u)
    enforce(BoundaryKind.NORMAL_Y, v)


def max_divergence(u: np.ndarray, v: np.ndarray) -> float:
    """Largest |∂u/∂x + ∂v/∂y| over the interior, in grid units (h = 1/N)."""
    N = u.shape[0] - 2
    div = 0.5 * N * (
        (u[2:, 1:-1] - u[:-2, 1:-1]) +
        (v[1:-1, 2:] - v[1:-1, :-2])
    )
    return float(np.abs(div).max())
