"""
visualizer.py — Live Temperature Viewer
========================================
Renders the scalar field of a running ConvectionSimulation and turns
mouse input into heat/cool interactions.

  - Left button held   → heat brush
  - Right button held  → cool brush
  - r                  → reset
  - 1 / 2 / 3 / 4      → grid size 48 / 64 / 96 / 128

Uses matplotlib FuncAnimation as the display-refresh loop. The physics
rate is decoupled from it by the simulation's frame clock.
"""

import logging
import time

import matplotlib.animation as animation
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import ListedColormap, hsv_to_rgb

from convection import AVAILABLE_GRID_SIZES, InteractionMode, pointer_to_grid

logger = logging.getLogger(__name__)


def _thermal_cmap(n: int = 256) -> ListedColormap:
    """Blue (cold, hue 240°) → red (hot, hue 0°) at full saturation."""
    t = np.linspace(0.0, 1.0, n)
    hsv = np.stack([(1.0 - t) * (240.0 / 360.0), np.ones(n), np.ones(n)], axis=-1)
    return ListedColormap(hsv_to_rgb(hsv), name="thermal")


thermal_cmap = _thermal_cmap()


class ConvectionVisualizer:
    """
    Real-time viewer of the convection simulation.

    Usage (standalone):
        from convection import ConvectionSimulation
        from visualizer import ConvectionVisualizer

        sim = ConvectionSimulation()
        viz = ConvectionVisualizer(sim)
        viz.run()  # Opens live window
    """

    def __init__(self, simulation):
        self.sim = simulation
        self._last_time = None
        self._setup_figure()

    def _setup_figure(self):
        self.fig, self.ax = plt.subplots(figsize=(6, 6.4))
        self.fig.patch.set_facecolor('#0a0a0a')
        self.ax.set_xticks([])
        self.ax.set_yticks([])
        for spine in self.ax.spines.values():
            spine.set_edgecolor('#333333')

        N = self.sim.N
        self.img = self.ax.imshow(
            self.sim.snapshot().T, cmap=thermal_cmap,
            vmin=0.0, vmax=1.0,
            interpolation='nearest',
            origin='lower',
            extent=(0.5, N + 0.5, 0.5, N + 0.5),
        )
        self.title_text = self.ax.set_title(
            "", color='#cccccc', fontsize=10, fontfamily='monospace'
        )

        canvas = self.fig.canvas
        canvas.mpl_connect('button_press_event', self._on_press)
        canvas.mpl_connect('button_release_event', self._on_release)
        canvas.mpl_connect('motion_notify_event', self._on_motion)
        canvas.mpl_connect('figure_leave_event', self._on_leave)
        canvas.mpl_connect('key_press_event', self._on_key)

    # ── Input ─────────────────────────────────────────────────────────────

    def _cell(self, event):
        if event.inaxes is not self.ax:
            return None
        # Display coords have y up; pointer_to_grid wants y down from the top
        box = self.ax.bbox
        return pointer_to_grid(event.x - box.x0, box.y1 - event.y,
                               box.width, box.height, self.sim.N)

    def _on_press(self, event):
        cell = self._cell(event)
        if cell is None:
            return
        if event.button == 1:
            self.sim.set_interaction(*cell, mode=InteractionMode.HEAT)
        elif event.button == 3:
            self.sim.set_interaction(*cell, mode=InteractionMode.COOL)

    def _on_motion(self, event):
        if not self.sim.interaction.active:
            return
        cell = self._cell(event)
        if cell is not None:
            self.sim.set_interaction(*cell, mode=self.sim.interaction.mode)

    def _on_release(self, event):
        self.sim.release_interaction()

    def _on_leave(self, event):
        self.sim.release_interaction()

    def _on_key(self, event):
        if event.key == 'r':
            self.sim.reset()
        elif event.key in ('1', '2', '3', '4'):
            N = AVAILABLE_GRID_SIZES[int(event.key) - 1]
            if self.sim.resize(N):
                self.img.set_extent((0.5, N + 0.5, 0.5, N + 0.5))

    # ── Frame loop ────────────────────────────────────────────────────────

    def update(self, frame_num):
        """Called by FuncAnimation each display refresh."""
        now = time.perf_counter()
        elapsed = 0.0 if self._last_time is None else now - self._last_time
        self._last_time = now

        ticks = self.sim.advance(elapsed)

        self.img.set_data(self.sim.snapshot().T)
        self.title_text.set_text(
            f"N={self.sim.N} | tick {self.sim.frame} (+{ticks}) | "
            f"avg {self.sim.average_density * 100:.1f}%"
        )
        return [self.img, self.title_text]

    def run(self, fps: int = 30, frames: int = None):
        """
        Start the live animation window.

        Args:
            fps    : Target display refresh rate
            frames : Total frames to render (None = infinite)
        """
        self.anim = animation.FuncAnimation(
            self.fig,
            self.update,
            frames=frames,
            interval=1000 // fps,
            blit=False,
            cache_frame_data=False,
        )
        plt.show()
