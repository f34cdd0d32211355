"""
grid.py — Collocated Grid with a One-Cell Halo
===============================================
The foundation of the entire simulation.

Every field lives at CELL CENTERS on an (N+2) × (N+2) array:

    i = 0 and i = N+1  → left / right halo
    j = 0 and j = N+1  → bottom / top halo
    1 ≤ i, j ≤ N       → interior (the physical domain)

Arrays are indexed ``field[i, j]`` (x first, y up). The flattened
row-major layout used by renderers puts row j contiguously, so the linear
index of (i, j) is ``i + j * (N + 2)``.

The halo ring lets every operator loop over the interior only; the
boundary enforcer fills the ring afterwards.
"""

import numpy as np

DTYPE = np.float32


class GridState:
    """
    N×N grid storing all simulation state.
    This is the single source of truth passed between all physics steps.
    """

    def __init__(self, N: int = 64, ambient: float = 0.5):
        """
        Args:
            N       : Interior resolution (64 means 64×64 cells + halo)
            ambient : Baseline scalar value the density field starts at
        """
        self.ambient = ambient
        self.reallocate(N)

    def reallocate(self, N: int):
        """Throw away every field and allocate fresh ones for side length N."""
        self.N = N
        self.size = N + 2
        shape = (self.size, self.size)

        # ── Live fields ────────────────────────────────────────────────────
        self.u       = np.zeros(shape, dtype=DTYPE)
        self.v       = np.zeros(shape, dtype=DTYPE)
        self.density = np.full(shape, self.ambient, dtype=DTYPE)

        # ── Source buffers (zeroed every tick, consumed once) ─────────────
        self.u_prev       = np.zeros(shape, dtype=DTYPE)
        self.v_prev       = np.zeros(shape, dtype=DTYPE)
        self.density_prev = np.zeros(shape, dtype=DTYPE)

        # ── Pre-update snapshots (right-hand sides / advection sources) ───
        self.u0       = np.zeros(shape, dtype=DTYPE)
        self.v0       = np.zeros(shape, dtype=DTYPE)
        self.density0 = np.full(shape, self.ambient, dtype=DTYPE)

        # ── Projection scratch ────────────────────────────────────────────
        self.pressure   = np.zeros(shape, dtype=DTYPE)
        self.divergence = np.zeros(shape, dtype=DTYPE)

    def reset(self):
        """Scalar back to ambient, everything else to zero. Keeps N."""
        for arr in [self.u, self.v, self.u_prev, self.v_prev, self.density_prev,
                    self.u0, self.v0, self.pressure, self.divergence]:
            arr[:] = 0.0
        self.density[:] = self.ambient
        self.density0[:] = self.ambient

    def clear_sources(self):
        self.u_prev[:] = 0.0
        self.v_prev[:] = 0.0
        self.density_prev[:] = 0.0

    # ── Indexing ──────────────────────────────────────────────────────────

    def index(self, i: int, j: int) -> int:
        """Linear index of cell (i, j) in the row-major flattened layout."""
        if not (0 <= i <= self.N + 1 and 0 <= j <= self.N + 1):
            raise IndexError(f"cell ({i}, {j}) outside 0..{self.N + 1}")
        return i + j * self.size

    def flat(self, field: np.ndarray) -> np.ndarray:
        """Flatten ``field`` so that ``flat(field)[index(i, j)] == field[i, j]``."""
        return field.T.reshape(-1)

    @staticmethod
    def interior(field: np.ndarray) -> np.ndarray:
        """N×N view of the physical domain (no halo)."""
        return field[1:-1, 1:-1]

    # ── Outputs ───────────────────────────────────────────────────────────

    def interior_average(self) -> float:
        return float(self.interior(self.density).mean(dtype=np.float64))

    def snapshot(self) -> np.ndarray:
        """Copy of the interior scalar field, shape (N, N), indexed [i, j]."""
        return self.interior(self.density).copy()

    def __repr__(self):
        inner = self.interior(self.density)
        max_vel = max(np.abs(self.u).max(), np.abs(self.v).max())
        return (
            f"GridState(N={self.N}, ambient={self.ambient})\n"
            f"  density  : min={inner.min():.4f}, max={inner.max():.4f}, "
            f"mean={self.interior_average():.4f}\n"
            f"  velocity : max_component={max_vel:.4f}"
        )
