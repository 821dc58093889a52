"""Pressure coupling: Poisson right-hand side and velocity correction.

The pressure equation itself is solved by the caller. This module produces
its right-hand side from the tentative velocities and projects F, G back
onto an (approximately) divergence-free velocity once P is known.
"""

import logging

from numba import njit, prange

from ..core.flags import Axis, as_obstacle_mask
from ..core.validation import check_grid, check_spacing, check_timestep

log = logging.getLogger(__name__)


@njit(parallel=True, cache=True, nogil=True)
def _divergence_sweep(dt, dx, dy, imax, jmax, F, G, RS, fluid):
    for i in prange(1, imax + 1):
        for j in range(1, jmax + 1):
            if fluid[i, j]:
                RS[i, j] = ((F[i, j] - F[i - 1, j]) / dx + (G[i, j] - G[i, j - 1]) / dy) / dt


@njit(parallel=True, cache=True, nogil=True)
def _correction_sweep(dt, dx, dy, imax, jmax, U, V, F, G, P, u_faces, v_faces):
    for i in prange(1, imax):
        for j in range(1, jmax + 1):
            if u_faces[i, j]:
                U[i, j] = F[i, j] - dt / dx * (P[i + 1, j] - P[i, j])

    for i in prange(1, imax + 1):
        for j in range(1, jmax):
            if v_faces[i, j]:
                V[i, j] = G[i, j] - dt / dy * (P[i, j + 1] - P[i, j])


def calculate_rs(dt, dx, dy, imax, jmax, F, G, RS, Flags=None):
    """Right-hand side of the pressure Poisson equation, in place.

    ``RS = (dF/dx + dG/dy) / dt`` on every fluid cell of the interior;
    obstacle cells keep whatever value RS held before.
    """
    shape = check_grid(imax, jmax, F=F, G=G, RS=RS)
    check_spacing(dx, dy)
    check_timestep(dt)
    mask = as_obstacle_mask(Flags, shape)

    _divergence_sweep(float(dt), float(dx), float(dy), int(imax), int(jmax), F, G, RS, mask.fluid)
    log.debug(f"calculate_rs: {mask.n_fluid} fluid cells")
    return RS


def calculate_uv(dt, dx, dy, imax, jmax, U, V, F, G, P, Flags=None):
    """Project the tentative velocities with the pressure gradient, in place.

    ``U = F - dt/dx (P[i+1, j] - P[i, j])`` on faces whose cell and RIGHT
    neighbour are fluid, ``V = G - dt/dy (P[i, j+1] - P[i, j])`` on faces
    whose cell and TOP neighbour are fluid. All other faces are left alone.
    """
    shape = check_grid(imax, jmax, U=U, V=V, F=F, G=G, P=P)
    check_spacing(dx, dy)
    check_timestep(dt, strict=False)
    mask = as_obstacle_mask(Flags, shape)

    _correction_sweep(
        float(dt), float(dx), float(dy), int(imax), int(jmax),
        U, V, F, G, P,
        mask.fluid_interfaces(Axis.X), mask.fluid_interfaces(Axis.Y),
    )
    log.debug(f"calculate_uv: imax={imax}, jmax={jmax}, dt={dt:.4e}")
    return U, V
