"""Argument checks shared by the kernel entry points."""

import math

import numpy as np

from ..errors import GridShapeError, ParameterError


def check_grid(imax, jmax, **arrays):
    """Check grid dimensions and that every array is (imax + 2, jmax + 2).

    Returns
    -------
    tuple
        The expected array shape.
    """
    if int(imax) != imax or int(jmax) != jmax or imax < 1 or jmax < 1:
        raise GridShapeError(f"Grid dimensions must be integers >= 1, got imax={imax}, jmax={jmax}")

    shape = (int(imax) + 2, int(jmax) + 2)
    for name, array in arrays.items():
        if not isinstance(array, np.ndarray):
            raise GridShapeError(f"{name} must be a numpy array, got {type(array).__name__}")
        if array.shape != shape:
            raise GridShapeError(f"{name} has shape {array.shape}, expected {shape}")
    return shape


def check_spacing(dx, dy):
    if not (dx > 0 and dy > 0) or not (math.isfinite(dx) and math.isfinite(dy)):
        raise ParameterError(f"Grid spacing must be positive and finite, got dx={dx}, dy={dy}")


def check_reynolds(Re):
    if Re == 0 or not math.isfinite(Re):
        raise ParameterError(f"Reynolds number must be finite and non-zero, got Re={Re}")


def check_timestep(dt, strict=True):
    """Check the time step; ``strict`` forbids dt == 0 (used where dt divides)."""
    if not math.isfinite(dt) or dt < 0 or (strict and dt == 0):
        bound = "> 0" if strict else ">= 0"
        raise ParameterError(f"Time step must be finite and {bound}, got dt={dt}")
