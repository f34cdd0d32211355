"""
forces.py — Buoyancy, Heat Injection and Edge Cooling
======================================================
Everything that puts energy into (or takes it out of) the system.

Buoyancy is what drives convection: a cell warmer than the domain
average gets pushed up, a cooler one sinks.

  F_buoyancy = κ * (T - T_avg_previous_tick)

The baseline is the average from the PREVIOUS tick, not the one just
measured. That one-tick lag is part of the model and must be kept.

Heat enters through the pointer (Gaussian brush) and leaves through the
top rows of the box, which cool a little every tick.
"""

from typing import Optional

import numpy as np

from .params import InteractionMode


def apply_buoyancy(v_source: np.ndarray, density: np.ndarray,
                   previous_average: float, coefficient: float) -> float:
    """
    Add ``coefficient * (density - previous_average)`` to the vertical
    velocity source of every interior cell.

    Args:
        v_source         : Pending v source buffer, modified in place
        density          : Current scalar field (before this tick's sources)
        previous_average : Interior average measured on the previous tick
        coefficient      : Buoyancy strength κ

    Returns:
        The interior average of ``density`` measured now, to be stored as
        the baseline for the next tick.
    """
    inner = density[1:-1, 1:-1]
    current_average = float(inner.mean(dtype=np.float64))
    v_source[1:-1, 1:-1] += coefficient * (inner - previous_average)
    return current_average


def inject_heat(density_source: np.ndarray, grid_x: int, grid_y: int,
                radius: int, amplitude: float,
                mode: InteractionMode = InteractionMode.HEAT) -> int:
    """
    Gaussian brush: add (HEAT) or subtract (COOL) ``amplitude * w`` around
    interior cell (grid_x, grid_y), with

      w = exp(-(di² + dj²) / (2 R²))   for di² + dj² ≤ R²

    Brush cells falling outside the interior are skipped.

    Returns:
        Number of cells touched.
    """
    N = density_source.shape[0] - 2
    grid_x, grid_y = int(grid_x), int(grid_y)
    offsets = np.arange(-radius, radius + 1)
    di, dj = np.meshgrid(offsets, offsets, indexing="ij")
    d2 = di * di + dj * dj

    ii = grid_x + di
    jj = grid_y + dj
    mask = (d2 <= radius * radius) & (ii >= 1) & (ii <= N) & (jj >= 1) & (jj <= N)
    if not mask.any():
        return 0

    weight = np.exp(-d2[mask] / (2.0 * radius * radius))
    sign = 1.0 if mode == InteractionMode.HEAT else -1.0
    np.add.at(density_source, (ii[mask], jj[mask]), sign * amplitude * weight)
    return int(mask.sum())


def apply_cooling(density: np.ndarray, cooling_rate: float, rows: int = 3,
                  jitter: float = 0.1,
                  rng: Optional[np.random.Generator] = None):
    """
    Exponential decay along the top edge of the box.

    For the ``rows`` rows nearest the top (distance k = 0, 1, 2 …):
      value *= 1 - (cooling_rate / 100) * gradient * noise
      gradient = 1 / (k + 1),  noise ∈ [1 - jitter, 1 + jitter]

    Results are clamped to be non-negative.

    Args:
        density      : Scalar field, modified in place
        cooling_rate : Percent removed per tick at the edge row (0–100)
        rows         : How many rows below the top wall cool
        jitter       : Half-width of the uniform noise (0 = deterministic)
        rng          : numpy Generator for the noise
    """
    N = density.shape[0] - 2
    base = cooling_rate / 100.0
    if rng is None:
        rng = np.random.default_rng()

    for k in range(min(rows, N)):
        j = N - k
        gradient = 1.0 / (k + 1)
        if jitter > 0:
            noise = 1.0 + rng.uniform(-jitter, jitter, size=N)
        else:
            noise = 1.0
        row = density[1:-1, j] * (1.0 - base * gradient * noise)
        density[1:-1, j] = np.maximum(row, 0.0)
