"""Finite difference primitives on the staggered grid.

All functions are point-wise stencils evaluated at (i, j). They are
compiled with numba so the sweeps in ``momentum``/``pressure``/``energy``
inline them, and remain callable from plain Python.

Convective terms blend central differencing with donor-cell upwinding::

    alpha = 0  -> central differences (second order, may oscillate)
    alpha = 1  -> full donor-cell (first order, stable)

Argument order of the product derivatives matters: ``A`` is the field
stored on vertical faces (U) and ``B`` the one on horizontal faces (V).
The x variant gives d(uv)/dx at a V point and the y variant gives d(uv)/dy
at a U point; swapping the arguments silently breaks the staggering.
"""

from numba import njit

from ..core.flags import Axis


# ----------------------------------------------------------------------------
# Diffusion
# ----------------------------------------------------------------------------


@njit(inline="always", cache=True, nogil=True)
def second_derivative_dx(A, i, j, h):
    """Central second difference along x."""
    return (A[i - 1, j] - 2.0 * A[i, j] + A[i + 1, j]) / (h * h)


@njit(inline="always", cache=True, nogil=True)
def second_derivative_dy(A, i, j, h):
    """Central second difference along y."""
    return (A[i, j - 1] - 2.0 * A[i, j] + A[i, j + 1]) / (h * h)


# ----------------------------------------------------------------------------
# Cross convection d(AB)
# ----------------------------------------------------------------------------


@njit(inline="always", cache=True, nogil=True)
def product_derivative_dx(A, B, i, j, h, alpha):
    """d(AB)/dx at (i, j); A averaged along y, B along x."""
    a_east = (A[i, j] + A[i, j + 1]) / 2.0
    a_west = (A[i - 1, j] + A[i - 1, j + 1]) / 2.0

    central = a_east * (B[i, j] + B[i + 1, j]) / 2.0 - a_west * (B[i - 1, j] + B[i, j]) / 2.0
    upwind = abs(a_east) * (B[i, j] - B[i + 1, j]) / 2.0 - abs(a_west) * (B[i - 1, j] - B[i, j]) / 2.0
    return central / h + alpha * upwind / h


@njit(inline="always", cache=True, nogil=True)
def product_derivative_dy(A, B, i, j, h, alpha):
    """d(AB)/dy at (i, j); B averaged along x, A along y."""
    b_north = (B[i, j] + B[i + 1, j]) / 2.0
    b_south = (B[i, j - 1] + B[i + 1, j - 1]) / 2.0

    central = b_north * (A[i, j] + A[i, j + 1]) / 2.0 - b_south * (A[i, j - 1] + A[i, j]) / 2.0
    upwind = abs(b_north) * (A[i, j] - A[i, j + 1]) / 2.0 - abs(b_south) * (A[i, j - 1] - A[i, j]) / 2.0
    return central / h + alpha * upwind / h


# ----------------------------------------------------------------------------
# Self convection d(A^2)
# ----------------------------------------------------------------------------


@njit(inline="always", cache=True, nogil=True)
def square_derivative_dx(A, i, j, h, alpha):
    """d(A^2)/dx at (i, j)."""
    a_east = (A[i, j] + A[i + 1, j]) / 2.0
    a_west = (A[i - 1, j] + A[i, j]) / 2.0

    central = a_east * a_east - a_west * a_west
    upwind = abs(a_east) * (A[i, j] - A[i + 1, j]) / 2.0 - abs(a_west) * (A[i - 1, j] - A[i, j]) / 2.0
    return central / h + alpha * upwind / h


@njit(inline="always", cache=True, nogil=True)
def square_derivative_dy(A, i, j, h, alpha):
    """d(A^2)/dy at (i, j)."""
    a_north = (A[i, j] + A[i, j + 1]) / 2.0
    a_south = (A[i, j - 1] + A[i, j]) / 2.0

    central = a_north * a_north - a_south * a_south
    upwind = abs(a_north) * (A[i, j] - A[i, j + 1]) / 2.0 - abs(a_south) * (A[i, j - 1] - A[i, j]) / 2.0
    return central / h + alpha * upwind / h


# ----------------------------------------------------------------------------
# Axis dispatch (Python side)
# ----------------------------------------------------------------------------


def second_derivative(A, i, j, h, axis):
    if Axis(axis) is Axis.X:
        return second_derivative_dx(A, i, j, h)
    return second_derivative_dy(A, i, j, h)


def product_derivative(A, B, i, j, h, alpha, axis):
    if Axis(axis) is Axis.X:
        return product_derivative_dx(A, B, i, j, h, alpha)
    return product_derivative_dy(A, B, i, j, h, alpha)


def square_derivative(A, i, j, h, alpha, axis):
    if Axis(axis) is Axis.X:
        return square_derivative_dx(A, i, j, h, alpha)
    return square_derivative_dy(A, i, j, h, alpha)
