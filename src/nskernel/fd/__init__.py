"""Finite difference kernel for the staggered-grid Navier-Stokes/Boussinesq equations.

Operations (in the order a time step uses them):

- ``calculate_dt``  stability-limited step size
- ``calculate_fg``  momentum predictor (tentative velocities F, G)
- ``calculate_rs``  right-hand side of the pressure Poisson equation
- ``calculate_uv``  pressure correction of the velocities
- ``calculate_T``   temperature transport
"""

from .derivatives import (
    product_derivative,
    product_derivative_dx,
    product_derivative_dy,
    second_derivative,
    second_derivative_dx,
    second_derivative_dy,
    square_derivative,
    square_derivative_dx,
    square_derivative_dy,
)
from .energy import calculate_T
from .momentum import calculate_fg
from .pressure import calculate_rs, calculate_uv
from .timestep import calculate_dt

__all__ = [
    # Operations
    "calculate_dt",
    "calculate_fg",
    "calculate_rs",
    "calculate_uv",
    "calculate_T",
    # Derivative primitives
    "second_derivative",
    "second_derivative_dx",
    "second_derivative_dy",
    "product_derivative",
    "product_derivative_dx",
    "product_derivative_dy",
    "square_derivative",
    "square_derivative_dx",
    "square_derivative_dy",
]
