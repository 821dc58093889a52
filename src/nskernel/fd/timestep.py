"""Stability-limited time step selection.

    dt = tau * min( Re Pr / (2 (1/dx^2 + 1/dy^2)),  dx / |u|_max,  dy / |v|_max )

The first term is the explicit diffusion bound, the other two the CFL
bounds of the two velocity components. A component that is zero
everywhere imposes no advective constraint and is left out of the minimum.
"""

import logging

import numpy as np

from ..core.validation import check_grid, check_reynolds, check_spacing
from ..errors import ParameterError

log = logging.getLogger(__name__)


def diffusive_limit(Re, dx, dy, Pr=1.0):
    """Explicit diffusion bound ``Re Pr / (2 (1/dx^2 + 1/dy^2))``."""
    return Re * Pr / (2.0 * (1.0 / dx**2 + 1.0 / dy**2))


def max_velocities(imax, jmax, U, V):
    """Largest |U| and |V| over i = 0..imax, j = 0..jmax."""
    u_max = float(np.max(np.abs(U[:imax + 1, :jmax + 1])))
    v_max = float(np.max(np.abs(V[:imax + 1, :jmax + 1])))
    return u_max, v_max


def calculate_dt(Re, Pr, tau, dx, dy, imax, jmax, U, V, include_momentum_bound=False):
    """Largest stable time step, scaled by the safety factor ``tau``.

    Parameters
    ----------
    Re, Pr : float
        Reynolds and Prandtl numbers.
    tau : float
        Safety factor, normally in (0, 1].
    dx, dy : float
        Grid spacing.
    imax, jmax : int
        Number of interior cells.
    U, V : np.ndarray
        Velocity components, shape (imax + 2, jmax + 2).
    include_momentum_bound : bool, optional
        Also apply the pure momentum diffusion bound ``Re / (2 (1/dx^2 + 1/dy^2))``.
        Only stricter than the default bound when Pr > 1.

    Returns
    -------
    float
        The time step.
    """
    check_grid(imax, jmax, U=U, V=V)
    check_reynolds(Re)
    check_spacing(dx, dy)
    if not tau > 0:
        raise ParameterError(f"Safety factor tau must be positive, got tau={tau}")
    if tau > 1:
        log.warning(f"Safety factor tau={tau} > 1, stability is not guaranteed")
    if not Pr > 0:
        raise ParameterError(f"Prandtl number must be positive, got Pr={Pr}")

    u_max, v_max = max_velocities(imax, jmax, U, V)

    limits = [abs(diffusive_limit(Re, dx, dy, Pr))]
    if include_momentum_bound:
        limits.append(abs(diffusive_limit(Re, dx, dy)))
    if u_max > 0:
        limits.append(dx / u_max)
    if v_max > 0:
        limits.append(dy / v_max)

    dt = tau * min(limits)
    log.debug(f"calculate_dt: u_max={u_max:.4e}, v_max={v_max:.4e}, dt={dt:.4e}")
    return dt
