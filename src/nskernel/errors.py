"""Exceptions raised by the discretization kernel.

Numeric sweeps never raise. Everything here is raised at the Python
boundary of a kernel call (argument validation) or by the step
orchestration when a field stops being finite.
"""


class KernelError(Exception):
    """Base class for all kernel errors."""


class ParameterError(KernelError, ValueError):
    """A physical or discretization parameter is out of range."""


class GridShapeError(KernelError, ValueError):
    """An array does not match the (imax + 2, jmax + 2) staggered grid."""


class FlagConsistencyError(KernelError, ValueError):
    """Neighbour bits of an obstacle code disagree with the neighbour cell."""


class SimulationDivergedError(KernelError, FloatingPointError):
    """A non-finite value appeared in one of the solution fields."""

    def __init__(self, fields):
        self.fields = tuple(fields)
        super().__init__(f"Non-finite values in field(s): {', '.join(self.fields)}")
