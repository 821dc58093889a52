"""Temperature transport (explicit Euler).

    T_new = T + dt ( - [uT]_x - [vT]_y + 1/(Re Pr) (T_xx + T_yy) )

Convective fluxes use face velocities and face-averaged temperatures, with
the same ``alpha`` donor-cell blending weight as the momentum equations.
Every cell reads the temperature of the previous step; the update is
computed from a private copy of the old field.
"""

import logging

import numpy as np
from numba import njit, prange

from ..core.flags import as_obstacle_mask
from ..core.validation import check_grid, check_reynolds, check_spacing, check_timestep
from ..errors import ParameterError
from .derivatives import second_derivative_dx, second_derivative_dy

log = logging.getLogger(__name__)


@njit(inline="always", cache=True, nogil=True)
def convective_flux_dx(U, T, i, j, h, alpha):
    """Blended [uT]_x at cell (i, j)."""
    t_east = (T[i, j] + T[i + 1, j]) / 2.0
    t_west = (T[i - 1, j] + T[i, j]) / 2.0
    central = (U[i, j] * t_east - U[i - 1, j] * t_west) / h
    upwind = (abs(U[i, j]) * t_east - abs(U[i - 1, j]) * t_west) / h
    return central + alpha * upwind


@njit(inline="always", cache=True, nogil=True)
def convective_flux_dy(V, T, i, j, h, alpha):
    """Blended [vT]_y at cell (i, j)."""
    t_north = (T[i, j] + T[i, j + 1]) / 2.0
    t_south = (T[i, j - 1] + T[i, j]) / 2.0
    central = (V[i, j] * t_north - V[i, j - 1] * t_south) / h
    upwind = (abs(V[i, j]) * t_north - abs(V[i, j - 1]) * t_south) / h
    return central + alpha * upwind


@njit(parallel=True, cache=True, nogil=True)
def _temperature_sweep(Re, Pr, dt, dx, dy, alpha, imax, jmax, T_old, T, U, V, active):
    conductivity = 1.0 / (Re * Pr)
    for i in prange(1, imax + 1):
        for j in range(1, jmax + 1):
            if not active[i, j]:
                continue
            convection = convective_flux_dx(U, T_old, i, j, dx, alpha) + convective_flux_dy(V, T_old, i, j, dy, alpha)
            diffusion = second_derivative_dx(T_old, i, j, dx) + second_derivative_dy(T_old, i, j, dy)
            T[i, j] = T_old[i, j] + dt * (conductivity * diffusion - convection)


def calculate_T(Re, Pr, dt, dx, dy, alpha, imax, jmax, T, U, V, Flags=None):
    """Advance the temperature one time step, in place.

    The update covers the interior cells i = 1..imax, j = 1..jmax; the ghost
    layer holds boundary values owned by the caller. Without ``Flags`` every
    interior cell is advanced, obstacle or not. With ``Flags`` only fluid
    cells are.

    Returns
    -------
    T : np.ndarray
        The temperature array.
    """
    shape = check_grid(imax, jmax, T=T, U=U, V=V)
    check_reynolds(Re)
    check_spacing(dx, dy)
    check_timestep(dt, strict=False)
    if Pr == 0:
        raise ParameterError(f"Prandtl number must be non-zero, got Pr={Pr}")

    if Flags is None:
        active = np.ones(shape, dtype=np.bool_)
    else:
        active = as_obstacle_mask(Flags, shape).fluid

    T_old = T.copy()
    _temperature_sweep(
        float(Re), float(Pr), float(dt), float(dx), float(dy), float(alpha),
        int(imax), int(jmax), T_old, T, U, V, active,
    )
    log.debug(f"calculate_T: imax={imax}, jmax={jmax}, dt={dt:.4e}")
    return T
