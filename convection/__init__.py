"""
convection/ — Buoyancy-Driven Convection Package
=================================================
Exports the main interfaces hosts use.

Renderers import: ConvectionSimulation → snapshot(), average_density
Input handlers import: ConvectionSimulation → set_interaction(), pointer_to_grid()
Frame loops import: ConvectionSimulation → advance()
"""

from .boundary import BoundaryKind
from .clock import FrameClock
from .grid import GridState
from .params import (AVAILABLE_GRID_SIZES, ConfigurationError, ConvectionParams,
                     InteractionMode, InteractionState)
from .simulation import ConvectionSimulation, pointer_to_grid

__all__ = [
    "AVAILABLE_GRID_SIZES",
    "BoundaryKind",
    "ConfigurationError",
    "ConvectionParams",
    "ConvectionSimulation",
    "FrameClock",
    "GridState",
    "InteractionMode",
    "InteractionState",
    "pointer_to_grid",
]
