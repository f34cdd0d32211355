"""
params.py — Tunable Constants & Interaction State
==================================================
Everything the host application is allowed to change lives here.

  - ConvectionParams : physical constants, brush settings, clock settings
  - InteractionState : what the pointer is doing right now (heat / cool)

Both are plain dataclasses. The simulation never reads them mid-tick:
updates are validated immediately and become active at the next tick.
"""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

# Grid sizes offered to hosts (resolution picker)
AVAILABLE_GRID_SIZES = (48, 64, 96, 128)


class ConfigurationError(ValueError):
    """Raised when a parameter set would be invalid or unstable."""


class InteractionMode(Enum):
    HEAT = "heat"
    COOL = "cool"


@dataclass
class InteractionState:
    """Pending pointer interaction, sampled once at the start of a tick.

    ``grid_x`` / ``grid_y`` are interior cell coordinates in ``[1, N]``,
    with ``grid_y`` increasing upward.
    """
    active: bool = False
    mode: InteractionMode = InteractionMode.HEAT
    grid_x: Optional[int] = None
    grid_y: Optional[int] = None

    @property
    def has_target(self) -> bool:
        return self.grid_x is not None and self.grid_y is not None


@dataclass
class ConvectionParams:
    """All tuneable simulation constants.

    Defaults reproduce the classroom convection demo at 64×64.
    """
    # Grid
    size: int = 64                  # N, interior cells per side
    dt: float = 0.02                # physics step (seconds)

    # Transport
    viscosity: float = 0.0001
    diffusivity: float = 0.0001
    relaxation_iterations: int = 4

    # Thermal
    ambient: float = 0.5            # baseline scalar value
    buoyancy_coefficient: float = 0.02

    # Brush
    heat_radius: int = 5
    heat_amplitude: float = 0.0125  # per-tick increment at the brush centre

    # Cooling at the top edge
    cooling_rate: float = 0.5       # percent, 0–100
    cooling_rows: int = 3
    cooling_jitter: float = 0.1     # 0 disables the noise

    # Clock
    tick_duration: float = 1.0 / 60.0
    time_scale: float = 2.5
    max_ticks_per_frame: int = 16
    max_frame_delta: float = 0.1

    seed: Optional[int] = None

    def validate(self) -> "ConvectionParams":
        """Raise ConfigurationError on the first invalid field; return self."""
        _require_int(self.size, "size", minimum=1)
        _require_int(self.heat_radius, "heat_radius", minimum=1)
        _require_int(self.relaxation_iterations, "relaxation_iterations", minimum=1)
        _require_int(self.cooling_rows, "cooling_rows", minimum=0)
        _require_int(self.max_ticks_per_frame, "max_ticks_per_frame", minimum=1)

        for name in ("dt", "tick_duration", "max_frame_delta"):
            value = getattr(self, name)
            if not _finite(value) or value <= 0:
                raise ConfigurationError(f"{name} must be > 0, got {value!r}")

        for name in ("viscosity", "diffusivity", "buoyancy_coefficient",
                     "heat_amplitude", "time_scale", "cooling_jitter"):
            value = getattr(self, name)
            if not _finite(value) or value < 0:
                raise ConfigurationError(f"{name} must be >= 0, got {value!r}")

        if not _finite(self.ambient):
            raise ConfigurationError(f"ambient must be finite, got {self.ambient!r}")
        if not _finite(self.cooling_rate) or not 0 <= self.cooling_rate <= 100:
            raise ConfigurationError(
                f"cooling_rate must be within 0–100, got {self.cooling_rate!r}")
        if self.cooling_jitter > 1:
            raise ConfigurationError(
                f"cooling_jitter must be <= 1, got {self.cooling_jitter!r}")
        return self

    def replace(self, **changes) -> "ConvectionParams":
        """Return a validated copy with ``changes`` applied."""
        unknown = set(changes) - {f.name for f in dataclasses.fields(self)}
        if unknown:
            raise ConfigurationError(f"Unknown parameter(s): {', '.join(sorted(unknown))}")
        return dataclasses.replace(self, **changes).validate()


def _finite(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _require_int(value, name: str, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise ConfigurationError(f"{name} must be an integer >= {minimum}, got {value!r}")
