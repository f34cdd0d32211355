"""
boundary.py — Halo Boundary Conditions
=======================================
Fills the one-cell halo ring from the interior after every pass that
mutated a field. Without this, values near the walls read garbage and
the box leaks.

Three kinds of field:
  - SCALAR   : density, pressure, divergence → copy nearest interior cell
               (zero-gradient / Neumann condition)
  - NORMAL_X : u velocity → negated at the left/right walls so the flow
               cannot pass through them, copied at top/bottom
  - NORMAL_Y : v velocity → negated at the top/bottom walls, copied at
               left/right

Corners get the average of their two non-corner neighbours.
"""

from enum import IntEnum

import numpy as np


class BoundaryKind(IntEnum):
    SCALAR = 0
    NORMAL_X = 1
    NORMAL_Y = 2


def enforce(kind: BoundaryKind, field: np.ndarray) -> np.ndarray:
    """
    Apply the halo rule for ``kind`` to ``field`` in place.

    Only reads interior cells (and, for corners, the freshly written edge
    halo), so applying it twice is the same as applying it once.

    Returns the same array for convenience.
    """
    sx = -1.0 if kind == BoundaryKind.NORMAL_X else 1.0
    sy = -1.0 if kind == BoundaryKind.NORMAL_Y else 1.0

    # Left / right walls (i = 0, i = N+1)
    field[0,  1:-1] = sx * field[1,  1:-1]
    field[-1, 1:-1] = sx * field[-2, 1:-1]

    # Bottom / top walls (j = 0, j = N+1)
    field[1:-1, 0]  = sy * field[1:-1, 1]
    field[1:-1, -1] = sy * field[1:-1, -2]

    field[0,  0]  = 0.5 * (field[1,  0]  + field[0,  1])
    field[0,  -1] = 0.5 * (field[1,  -1] + field[0,  -2])
    field[-1, 0]  = 0.5 * (field[-2, 0]  + field[-1, 1])
    field[-1, -1] = 0.5 * (field[-2, -1] + field[-1, -2])
    return field
