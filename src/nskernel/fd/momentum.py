"""Momentum predictor: tentative velocities F and G.

    F = U + dt (1/Re (U_xx + U_yy) - (U^2)_x - (UV)_y + (1 - beta T) g_x)
    G = V + dt (1/Re (V_xx + V_yy) - (UV)_x - (V^2)_y + (1 - beta T) g_y)

F is evaluated for i = 1..imax-1, j = 1..jmax and G for i = 1..imax,
j = 1..jmax-1, only on faces between two fluid cells. On any other face the
tentative velocity is the velocity itself.
"""

import logging

from numba import njit, prange

from ..core.flags import Axis, as_obstacle_mask
from ..core.validation import check_grid, check_reynolds, check_spacing, check_timestep
from .derivatives import (
    product_derivative_dx,
    product_derivative_dy,
    second_derivative_dx,
    second_derivative_dy,
    square_derivative_dx,
    square_derivative_dy,
)

log = logging.getLogger(__name__)


@njit(inline="always", cache=True, nogil=True)
def compute_f(Re, GX, alpha, beta, dt, dx, dy, U, V, T, i, j):
    """Tentative horizontal velocity at the face right of cell (i, j)."""
    diffusion = (second_derivative_dx(U, i, j, dx) + second_derivative_dy(U, i, j, dy)) / Re
    convection = square_derivative_dx(U, i, j, dx, alpha) + product_derivative_dy(U, V, i, j, dy, alpha)
    buoyancy = (1.0 - beta * T[i, j]) * GX
    return U[i, j] + dt * (diffusion - convection + buoyancy)


@njit(inline="always", cache=True, nogil=True)
def compute_g(Re, GY, alpha, beta, dt, dx, dy, U, V, T, i, j):
    """Tentative vertical velocity at the face above cell (i, j)."""
    diffusion = (second_derivative_dx(V, i, j, dx) + second_derivative_dy(V, i, j, dy)) / Re
    convection = product_derivative_dx(U, V, i, j, dx, alpha) + square_derivative_dy(V, i, j, dy, alpha)
    buoyancy = (1.0 - beta * T[i, j]) * GY
    return V[i, j] + dt * (diffusion - convection + buoyancy)


@njit(parallel=True, cache=True, nogil=True)
def _momentum_sweep(Re, GX, GY, alpha, beta, dt, dx, dy, imax, jmax, U, V, F, G, T, u_faces, v_faces):
    for i in prange(1, imax):
        for j in range(1, jmax + 1):
            if u_faces[i, j]:
                F[i, j] = compute_f(Re, GX, alpha, beta, dt, dx, dy, U, V, T, i, j)
            else:
                F[i, j] = U[i, j]

    for i in prange(1, imax + 1):
        for j in range(1, jmax):
            if v_faces[i, j]:
                G[i, j] = compute_g(Re, GY, alpha, beta, dt, dx, dy, U, V, T, i, j)
            else:
                G[i, j] = V[i, j]


def calculate_fg(Re, GX, GY, alpha, beta, dt, dx, dy, imax, jmax, U, V, F, G, T, Flags=None):
    """Compute the tentative velocities F and G in place.

    Parameters
    ----------
    Re : float
        Reynolds number.
    GX, GY : float
        Body force (gravity) components.
    alpha : float
        Donor-cell blending factor in [0, 1].
    beta : float
        Thermal expansion coefficient of the Boussinesq term.
    dt, dx, dy : float
        Time step and grid spacing.
    imax, jmax : int
        Number of interior cells in x and y.
    U, V, T : np.ndarray
        Velocity components and temperature, shape (imax + 2, jmax + 2).
    F, G : np.ndarray
        Output arrays, same shape, overwritten on their index ranges.
    Flags : ObstacleMask or array_like, optional
        Obstacle mask; ``None`` means no obstacles.

    Returns
    -------
    F, G : np.ndarray
        The output arrays.
    """
    shape = check_grid(imax, jmax, U=U, V=V, F=F, G=G, T=T)
    check_reynolds(Re)
    check_spacing(dx, dy)
    check_timestep(dt, strict=False)
    mask = as_obstacle_mask(Flags, shape)

    # Zero pressure gradient normal to the outer boundary: F = U, G = V there
    G[1:imax + 1, 0] = V[1:imax + 1, 0]
    G[1:imax + 1, jmax] = V[1:imax + 1, jmax]
    F[0, 1:jmax + 1] = U[0, 1:jmax + 1]
    F[imax, 1:jmax + 1] = U[imax, 1:jmax + 1]

    _momentum_sweep(
        float(Re), float(GX), float(GY), float(alpha), float(beta),
        float(dt), float(dx), float(dy), int(imax), int(jmax),
        U, V, F, G, T,
        mask.fluid_interfaces(Axis.X), mask.fluid_interfaces(Axis.Y),
    )
    log.debug(f"calculate_fg: imax={imax}, jmax={jmax}, dt={dt:.4e}")
    return F, G
