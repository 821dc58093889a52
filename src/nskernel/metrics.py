"""Diagnostics on staggered-grid fields."""

from __future__ import annotations

import numpy as np

from .core.flags import as_obstacle_mask


# -----------------------------------------------------------------------------
# Norms
# -----------------------------------------------------------------------------


def discrete_l2_norm(values: np.ndarray, h: float) -> float:
    """Approximate L2 norm using composite trapezoidal rule."""
    return float(np.sqrt(h * np.sum(np.abs(values) ** 2)))


def discrete_linf_error(f_exact: np.ndarray, f_num: np.ndarray) -> float:
    """Compute discrete L-infinity (maximum) error."""
    return float(np.max(np.abs(f_num - f_exact)))


# -----------------------------------------------------------------------------
# Flow quantities
# -----------------------------------------------------------------------------


def divergence(U: np.ndarray, V: np.ndarray, dx: float, dy: float, flags=None) -> np.ndarray:
    """Discrete divergence (U_x + V_y) at every interior cell.

    Returns an (imax, jmax) array; obstacle cells are zero.
    """
    div = (U[1:-1, 1:-1] - U[:-2, 1:-1]) / dx + (V[1:-1, 1:-1] - V[1:-1, :-2]) / dy
    if flags is not None:
        fluid = as_obstacle_mask(flags, U.shape).fluid[1:-1, 1:-1]
        div = np.where(fluid, div, 0.0)
    return div


def max_divergence(U: np.ndarray, V: np.ndarray, dx: float, dy: float, flags=None) -> float:
    """Largest |div u| over the fluid cells."""
    return float(np.max(np.abs(divergence(U, V, dx, dy, flags))))


def kinetic_energy(U: np.ndarray, V: np.ndarray, dx: float, dy: float) -> float:
    """Kinetic energy 0.5 * sum(u^2 + v^2) dA with velocities averaged to cell centres."""
    u_c = 0.5 * (U[1:-1, 1:-1] + U[:-2, 1:-1])
    v_c = 0.5 * (V[1:-1, 1:-1] + V[1:-1, :-2])
    return 0.5 * float(np.sum(u_c * u_c + v_c * v_c) * dx * dy)
