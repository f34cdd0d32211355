"""
simulation.py — Master Physics Loop
====================================
The complete convection tick that ties everything together.
One call to `step()` advances the fluid by one fixed tick.

Physics pipeline per tick (fixed, never branches on earlier results):
   1. Zero the source buffers
   2. Heat brush writes the scalar source (if the pointer is held)
   3. Buoyancy writes the v source from the lagged anomaly
   4. Add sources into u, v
   5. Diffuse u, then v (viscosity)
   6. Project (pass 1)
   7. Advect u, v from their pre-advection snapshot
   8. Project (pass 2)
   9. Add the scalar source into density, clamp to [0, 1]
  10. Diffuse density
  11. Advect density through the projected velocity
  12. Cool the top rows
  13. Enforce the SCALAR halo on density

This follows the "Stable Fluids" paper by Jos Stam, plus buoyancy.

The simulation owns its GridState exclusively. Hosts talk to it only
through small pending channels (interaction state, parameter updates)
that are read at the start of the next tick.
"""

import logging
import time
from typing import Optional

import numpy as np

from .advect import advect
from .boundary import BoundaryKind, enforce
from .clock import FrameClock
from .diffuse import diffuse
from .forces import apply_buoyancy, apply_cooling, inject_heat
from .grid import GridState
from .params import (ConfigurationError, ConvectionParams, InteractionMode,
                     InteractionState)
from .solver import project

logger = logging.getLogger(__name__)


class ConvectionSimulation:
    """
    Buoyancy-driven 2D convection in a closed box.

    Usage:
        sim = ConvectionSimulation(ConvectionParams(size=64))
        sim.set_interaction(32, 4)              # hold the heat brush near the floor
        for frame in range(100):
            sim.step()
            field = sim.snapshot()              # hand to a renderer
    """

    def __init__(self, params: Optional[ConvectionParams] = None):
        """
        Args:
            params : Simulation constants (defaults if omitted). Validated
                     here; raises ConfigurationError when invalid.
        """
        self.params = (params or ConvectionParams()).validate()
        self.rng = np.random.default_rng(self.params.seed)
        self.grid = GridState(N=self.params.size, ambient=self.params.ambient)
        self.clock = FrameClock(
            tick_duration=self.params.tick_duration,
            time_scale=self.params.time_scale,
            max_ticks_per_frame=self.params.max_ticks_per_frame,
            max_frame_delta=self.params.max_frame_delta,
        )
        self.interaction = InteractionState()
        self._pending_params: Optional[ConvectionParams] = None
        self.average_density = self.params.ambient
        self.previous_average_density = self.params.ambient
        self.frame = 0
        self.perf_log = []   # per-tick metrics
        logger.info("Convection simulation created: N=%d, dt=%.4f",
                    self.params.size, self.params.dt)

    @property
    def N(self) -> int:
        return self.grid.N

    # ── Host-facing channels ──────────────────────────────────────────────

    def set_interaction(self, grid_x: Optional[int], grid_y: Optional[int],
                        mode: InteractionMode = InteractionMode.HEAT,
                        active: bool = True):
        """
        Record where the pointer is held. Read at the start of the next tick.

        Coordinates are converted to whole cells here; anything that is not
        a finite number raises ConfigurationError, never inside a tick.
        """
        self.interaction = InteractionState(active=active, mode=InteractionMode(mode),
                                            grid_x=_cell_coordinate(grid_x, "grid_x"),
                                            grid_y=_cell_coordinate(grid_y, "grid_y"))

    def release_interaction(self):
        self.interaction.active = False

    def update_params(self, **changes) -> ConvectionParams:
        """
        Queue new parameters for the next tick boundary.

        Validation happens now, so a bad value raises ConfigurationError
        here and never inside a tick. Grid size changes go through resize().
        """
        if "size" in changes and changes["size"] != self.grid.N:
            raise ConfigurationError("Use resize() to change the grid size")
        base = self._pending_params or self.params
        self._pending_params = base.replace(**changes)
        return self._pending_params

    def _apply_pending_params(self):
        if self._pending_params is None:
            return
        new = self._pending_params
        self._pending_params = None
        if new.seed != self.params.seed:
            self.rng = np.random.default_rng(new.seed)
        self.params = new
        self.grid.ambient = new.ambient
        self.clock.tick_duration = new.tick_duration
        self.clock.time_scale = new.time_scale
        self.clock.max_ticks_per_frame = new.max_ticks_per_frame
        self.clock.max_frame_delta = new.max_frame_delta
        logger.debug("Applied parameter update: %s", new)

    # ── Lifecycle ─────────────────────────────────────────────────────────

    def reset(self):
        """Scalar back to ambient, velocity and accumulators to zero."""
        self.grid.reset()
        self.average_density = self.params.ambient
        self.previous_average_density = self.params.ambient
        self.interaction = InteractionState()
        self.clock.reset()
        logger.info("Convection simulation reset (N=%d)", self.grid.N)

    def resize(self, N) -> bool:
        """
        Reallocate every field at side length N and reset.

        A non-positive or non-integer N is ignored (logged), since hosts
        call this unconditionally. Returns True when the grid was rebuilt.
        """
        if isinstance(N, bool) or not isinstance(N, (int, np.integer)) or N <= 0:
            logger.warning("Ignoring resize to invalid size %r", N)
            return False

        old_N = self.grid.N
        held = self.interaction
        self.params = self.params.replace(size=int(N))
        if self._pending_params is not None:
            self._pending_params = self._pending_params.replace(size=int(N))
        self.grid.reallocate(int(N))
        self.reset()

        # Keep a held pointer over the same relative spot
        if held.active and held.has_target:
            self.interaction = InteractionState(
                active=True, mode=held.mode,
                grid_x=_remap(held.grid_x, old_N, int(N)),
                grid_y=_remap(held.grid_y, old_N, int(N)),
            )
        logger.info("Resized grid %d → %d", old_N, N)
        return True

    # ── The tick ──────────────────────────────────────────────────────────

    def step(self) -> dict:
        """
        Advance the simulation by one tick.

        Returns performance metrics dict for benchmarking.
        """
        self._apply_pending_params()
        p = self.params
        g = self.grid
        iters = p.relaxation_iterations
        interaction = InteractionState(**vars(self.interaction))
        t_total_start = time.perf_counter()

        # ── Steps 1–3: sources ─────────────────────────────────────────────
        t0 = time.perf_counter()
        g.clear_sources()
        if interaction.active and interaction.has_target:
            inject_heat(g.density_prev, interaction.grid_x, interaction.grid_y,
                        p.heat_radius, p.heat_amplitude, interaction.mode)

        baseline = self.average_density
        current = apply_buoyancy(g.v_prev, g.density, baseline, p.buoyancy_coefficient)
        self.previous_average_density = baseline
        self.average_density = current
        t_forces = (time.perf_counter() - t0) * 1000

        # ── Steps 4–5: velocity sources + viscosity ────────────────────────
        t0 = time.perf_counter()
        g.u += g.u_prev
        g.v += g.v_prev
        np.copyto(g.u0, g.u)
        diffuse(BoundaryKind.NORMAL_X, g.u, g.u0, p.viscosity, p.dt, iters)
        np.copyto(g.v0, g.v)
        diffuse(BoundaryKind.NORMAL_Y, g.v, g.v0, p.viscosity, p.dt, iters)
        t_diffuse_vel = (time.perf_counter() - t0) * 1000

        # ── Step 6: projection, pass 1 ─────────────────────────────────────
        proj1 = project(g.u, g.v, g.pressure, g.divergence, iters)

        # ── Step 7: self-advection from the snapshot ───────────────────────
        t0 = time.perf_counter()
        np.copyto(g.u0, g.u)
        np.copyto(g.v0, g.v)
        advect(BoundaryKind.NORMAL_X, g.u, g.u0, g.u0, g.v0, p.dt)
        advect(BoundaryKind.NORMAL_Y, g.v, g.v0, g.u0, g.v0, p.dt)
        t_advect_vel = (time.perf_counter() - t0) * 1000

        # ── Step 8: projection, pass 2 ─────────────────────────────────────
        proj2 = project(g.u, g.v, g.pressure, g.divergence, iters)

        # ── Steps 9–10: scalar source + diffusion ──────────────────────────
        t0 = time.perf_counter()
        g.density += g.density_prev
        np.clip(g.density, 0.0, 1.0, out=g.density)
        np.copyto(g.density0, g.density)
        diffuse(BoundaryKind.SCALAR, g.density, g.density0, p.diffusivity, p.dt, iters)
        t_diffuse_den = (time.perf_counter() - t0) * 1000

        # ── Step 11: scalar advection through the projected velocity ──────
        t0 = time.perf_counter()
        np.copyto(g.density0, g.density)
        advect(BoundaryKind.SCALAR, g.density, g.density0, g.u, g.v, p.dt)
        t_advect_den = (time.perf_counter() - t0) * 1000

        # ── Steps 12–13: cooling + halo ────────────────────────────────────
        t0 = time.perf_counter()
        apply_cooling(g.density, p.cooling_rate, p.cooling_rows,
                      p.cooling_jitter, self.rng)
        enforce(BoundaryKind.SCALAR, g.density)
        t_cooling = (time.perf_counter() - t0) * 1000

        # ── Tick bookkeeping ───────────────────────────────────────────────
        self.frame += 1
        t_total = (time.perf_counter() - t_total_start) * 1000

        metrics = {
            "frame"            : self.frame,
            "total_ms"         : t_total,
            "fps"              : 1000.0 / t_total if t_total > 0 else 0,
            "forces_ms"        : t_forces,
            "diffuse_vel_ms"   : t_diffuse_vel,
            "project1_ms"      : proj1["time_ms"],
            "advect_vel_ms"    : t_advect_vel,
            "project2_ms"      : proj2["time_ms"],
            "diffuse_den_ms"   : t_diffuse_den,
            "advect_den_ms"    : t_advect_den,
            "cooling_ms"       : t_cooling,
            "divergence_max"   : proj2["divergence_after_max"],
            "density_total"    : float(g.interior(g.density).sum(dtype=np.float64)),
            "average_density"  : self.average_density,
        }
        self.perf_log.append(metrics)
        logger.debug("Tick %d: %.2fms, avg=%.4f", self.frame, t_total, self.average_density)
        return metrics

    def advance(self, elapsed: float) -> int:
        """
        Host entry point, called once per display refresh with the real
        seconds since the previous call. Runs the ticks the frame clock
        grants and returns how many ran.
        """
        self._apply_pending_params()
        ticks = self.clock.advance(elapsed)
        for _ in range(ticks):
            self.step()
        return ticks

    # ── Outputs ───────────────────────────────────────────────────────────

    def snapshot(self) -> np.ndarray:
        """Interior scalar field (N×N, indexed [i, j]) for external rendering."""
        return self.grid.snapshot()

    def status(self) -> dict:
        g = self.grid
        inner = g.interior(g.density)
        return {
            "frame"           : self.frame,
            "N"               : g.N,
            "average_density" : self.average_density,
            "density_min"     : float(inner.min()),
            "density_max"     : float(inner.max()),
            "max_u"           : float(np.abs(g.u).max()),
            "max_v"           : float(np.abs(g.v).max()),
        }

    def log_status(self):
        """Log a one-line summary of the current state."""
        s = self.status()
        logger.info(
            "Frame %d | N=%d | avg=%.4f | density=[%.4f, %.4f] | max_u=%.4f max_v=%.4f",
            s["frame"], s["N"], s["average_density"], s["density_min"],
            s["density_max"], s["max_u"], s["max_v"],
        )
        if self.perf_log:
            last = self.perf_log[-1]
            logger.info("Perf: %.1fms/tick (%.1f ticks/s)", last["total_ms"], last["fps"])


def _cell_coordinate(value, name: str) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float, np.integer, np.floating)):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    if not np.isfinite(value):
        raise ConfigurationError(f"{name} must be finite, got {value!r}")
    return int(np.floor(value))


def _remap(coord: int, old_N: int, new_N: int) -> int:
    """Scale an interior coordinate in [1, old_N] onto [1, new_N]."""
    scaled = int(round((coord - 0.5) * new_N / old_N + 0.5))
    return min(max(scaled, 1), new_N)


def pointer_to_grid(px: float, py: float, width: float, height: float, N: int):
    """
    Map host pixel coordinates (origin top-left, y down) to an interior
    cell (i, j) with j increasing upward. Returns None when the target
    surface has no area.
    """
    if width <= 0 or height <= 0:
        return None
    cell_w = width / N
    cell_h = height / N
    i = int(np.floor(px / cell_w)) + 1
    j = N - int(np.floor(py / cell_h))
    return min(max(i, 1), N), min(max(j, 1), N)
