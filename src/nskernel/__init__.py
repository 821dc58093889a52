"""Staggered-grid Navier-Stokes / Boussinesq discretization kernel.

Package layout:
-----------------
core/       obstacle mask, directions, argument checks
fd/         finite difference operations (F/G, RS, dt, U/V, T)
datastructures  Parameters, SimulationFields, StepReport
stepper     ProjectionStep (one time step, external pressure solver)
metrics     divergence, kinetic energy, norms
"""

from .core.flags import Axis, CellFlag, Direction, ObstacleMask
from .datastructures import Parameters, SimulationFields, StepReport
from .errors import (
    FlagConsistencyError,
    GridShapeError,
    KernelError,
    ParameterError,
    SimulationDivergedError,
)
from .fd import calculate_dt, calculate_fg, calculate_rs, calculate_T, calculate_uv
from .stepper import ProjectionStep, check_finite

__all__ = [
    # Kernel operations
    "calculate_dt",
    "calculate_fg",
    "calculate_rs",
    "calculate_uv",
    "calculate_T",
    # Grid metadata
    "Axis",
    "CellFlag",
    "Direction",
    "ObstacleMask",
    # Data structures
    "Parameters",
    "SimulationFields",
    "StepReport",
    # Step orchestration
    "ProjectionStep",
    "check_finite",
    # Errors
    "KernelError",
    "ParameterError",
    "GridShapeError",
    "FlagConsistencyError",
    "SimulationDivergedError",
]
