"""One projection time step over a set of staggered-grid fields.

The driver owns the time loop and the pressure solver. ``ProjectionStep``
only sequences the kernel operations of a single step:

    dt -> boundary values -> F, G -> RS -> pressure solve -> U, V -> T

and checks that the solution is still finite afterwards.
"""

import logging
import time

import mlflow
import numpy as np

from .core.flags import as_obstacle_mask
from .datastructures import SimulationFields, StepReport
from .errors import GridShapeError, SimulationDivergedError
from .fd import calculate_dt, calculate_fg, calculate_rs, calculate_T, calculate_uv
from .fd.timestep import max_velocities
from .metrics import kinetic_energy, max_divergence

log = logging.getLogger(__name__)


def check_finite(fields, names=("U", "V", "P", "T")):
    """Raise ``SimulationDivergedError`` if any of the named fields is not finite."""
    bad = [name for name in names if not np.all(np.isfinite(getattr(fields, name)))]
    if bad:
        raise SimulationDivergedError(bad)


class ProjectionStep:
    """Advance fields by one step of the explicit projection method.

    Parameters
    ----------
    params : Parameters
        Physical and discretization parameters (validated on construction).
    pressure_solver : callable
        ``pressure_solver(P, RS, flags, params)``. Must update ``P`` in place
        or return the new pressure array.
    fields : SimulationFields, optional
        Arrays to advance. Allocated (zeros) if not given.
    flags : ObstacleMask or array_like, optional
        Obstacle mask; ``None`` means no obstacles.
    apply_boundary : callable, optional
        ``apply_boundary(fields, flags, params)``, called before the momentum
        predictor to set ghost-layer and obstacle boundary values.
    """

    def __init__(self, params, pressure_solver, fields=None, flags=None, apply_boundary=None):
        self.params = params.validate()
        if fields is None:
            fields = SimulationFields.allocate(params.imax, params.jmax)
        elif (fields.imax, fields.jmax) != (params.imax, params.jmax):
            raise GridShapeError(
                f"Fields are {fields.imax}x{fields.jmax} cells, parameters say {params.imax}x{params.jmax}"
            )
        self.fields = fields
        self.flags = as_obstacle_mask(flags, fields.U.shape)
        self.pressure_solver = pressure_solver
        self.apply_boundary = apply_boundary
        self.n_steps = 0

        log.info(
            f"Projection step on {params.imax}x{params.jmax} grid "
            f"({self.flags.n_fluid} fluid cells), Re={params.Re}, Pr={params.Pr}"
        )

    def compute_timestep(self) -> float:
        """Adaptive step from the current velocities, or the fixed ``params.dt``."""
        p, f = self.params, self.fields
        if not p.adaptive_dt:
            return p.dt
        return calculate_dt(p.Re, p.Pr, p.tau, p.dx, p.dy, p.imax, p.jmax, f.U, f.V)

    def step(self) -> StepReport:
        """Perform one time step.

        Returns
        -------
        StepReport
            Step size and diagnostics of the new velocity field.

        Raises
        ------
        SimulationDivergedError
            If U, V, P or T contain non-finite values after the step.
        """
        p, f, flags = self.params, self.fields, self.flags
        time_start = time.time()

        dt = self.compute_timestep()

        if self.apply_boundary is not None:
            self.apply_boundary(f, flags, p)

        calculate_fg(p.Re, p.GX, p.GY, p.alpha, p.beta, dt, p.dx, p.dy, p.imax, p.jmax,
                     f.U, f.V, f.F, f.G, f.T, flags)
        calculate_rs(dt, p.dx, p.dy, p.imax, p.jmax, f.F, f.G, f.RS, flags)

        P_new = self.pressure_solver(f.P, f.RS, flags, p)
        if P_new is not None and P_new is not f.P:
            f.P[...] = P_new

        calculate_uv(dt, p.dx, p.dy, p.imax, p.jmax, f.U, f.V, f.F, f.G, f.P, flags)
        calculate_T(p.Re, p.Pr, dt, p.dx, p.dy, p.alpha, p.imax, p.jmax, f.T, f.U, f.V)

        check_finite(f)

        u_max, v_max = max_velocities(p.imax, p.jmax, f.U, f.V)
        report = StepReport(
            step=self.n_steps,
            dt=dt,
            u_max=u_max,
            v_max=v_max,
            max_divergence=max_divergence(f.U, f.V, p.dx, p.dy, flags),
            kinetic_energy=kinetic_energy(f.U, f.V, p.dx, p.dy),
            wall_time_seconds=time.time() - time_start,
        )

        if self.n_steps % 50 == 0:
            log.info(f"Step {self.n_steps}: dt={dt:.4e}, u_max={u_max:.4e}, div={report.max_divergence:.3e}")

        if mlflow.active_run():
            mlflow.log_metrics(report.to_mlflow(), step=self.n_steps)

        self.n_steps += 1
        return report
