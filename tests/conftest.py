"""Pytest configuration and fixtures for kernel tests."""

import sys
from pathlib import Path

import numpy as np
import pytest
from scipy.sparse import lil_matrix
from scipy.sparse.linalg import spsolve

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


def _poisson_solve(P, RS, flags, params):
    """Exact solve of the discrete pressure equation on the fluid cells.

    Only faces between two fluid cells couple neighbouring pressures, which
    matches the faces corrected by ``calculate_uv``. Cell (first fluid cell)
    is pinned to zero to remove the constant nullspace.
    """
    imax, jmax = params.imax, params.jmax
    dx2, dy2 = params.dx**2, params.dy**2
    fluid = flags.fluid

    cells = [(i, j) for i in range(1, imax + 1) for j in range(1, jmax + 1) if fluid[i, j]]
    index = {cell: k for k, cell in enumerate(cells)}
    A = lil_matrix((len(cells), len(cells)))
    b = np.zeros(len(cells))

    for k, (i, j) in enumerate(cells):
        b[k] = RS[i, j]
        for (ni, nj), h2 in (((i + 1, j), dx2), ((i - 1, j), dx2), ((i, j + 1), dy2), ((i, j - 1), dy2)):
            if (ni, nj) in index:
                A[k, index[(ni, nj)]] += 1.0 / h2
                A[k, k] -= 1.0 / h2

    # Pin the first cell
    A[0, :] = 0.0
    A[0, 0] = 1.0
    b[0] = 0.0

    p = spsolve(A.tocsr(), b)
    for k, (i, j) in enumerate(cells):
        P[i, j] = p[k]
    return P


@pytest.fixture
def poisson_solver():
    """Reference pressure solver (sparse direct) for projection tests."""
    return _poisson_solve


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def small_grid():
    """Grid of 8 x 6 interior cells on the unit square."""
    return {"imax": 8, "jmax": 6, "dx": 1.0 / 8, "dy": 1.0 / 6}


@pytest.fixture
def physics():
    """Physical parameters with buoyancy switched on."""
    return {"Re": 100.0, "GX": 0.0, "GY": -9.81, "alpha": 0.9, "beta": 2.1e-4}


@pytest.fixture
def random_fields(small_grid, rng):
    """Random U, V, T on the small grid plus zeroed F, G."""
    shape = (small_grid["imax"] + 2, small_grid["jmax"] + 2)
    return {
        "U": rng.uniform(-1.0, 1.0, shape),
        "V": rng.uniform(-1.0, 1.0, shape),
        "T": rng.uniform(0.0, 1.0, shape),
        "F": np.zeros(shape),
        "G": np.zeros(shape),
    }


@pytest.fixture
def block_fluid(small_grid):
    """Fluid mask of the small grid with a 2 x 2 obstacle at cells (3..4, 2..3)."""
    fluid = np.ones((small_grid["imax"] + 2, small_grid["jmax"] + 2), dtype=bool)
    fluid[3:5, 2:4] = False
    return fluid
