"""Tests for temperature transport calculate_T."""

import numpy as np
import pytest

from nskernel.core.flags import ObstacleMask
from nskernel.errors import GridShapeError
from nskernel.fd import calculate_T


def reference_update(Re, Pr, dt, dx, dy, alpha, T, U, V):
    """Vectorised explicit update of the interior from the old field."""
    c = (slice(1, -1), slice(1, -1))
    e, w = (slice(2, None), slice(1, -1)), (slice(None, -2), slice(1, -1))
    n, s = (slice(1, -1), slice(2, None)), (slice(1, -1), slice(None, -2))
    u_w = U[:-2, 1:-1]
    v_s = V[1:-1, :-2]

    t_e, t_w = (T[c] + T[e]) / 2, (T[w] + T[c]) / 2
    t_n, t_s = (T[c] + T[n]) / 2, (T[s] + T[c]) / 2
    conv_x = (U[c] * t_e - u_w * t_w) / dx + alpha * (np.abs(U[c]) * t_e - np.abs(u_w) * t_w) / dx
    conv_y = (V[c] * t_n - v_s * t_s) / dy + alpha * (np.abs(V[c]) * t_n - np.abs(v_s) * t_s) / dy
    diff = (T[e] - 2 * T[c] + T[w]) / dx**2 + (T[n] - 2 * T[c] + T[s]) / dy**2

    new = T.copy()
    new[c] = T[c] + dt * (diff / (Re * Pr) - conv_x - conv_y)
    return new


class TestCalculateT:
    """Explicit Euler temperature update."""

    def test_matches_reference(self, small_grid, rng):
        imax, jmax, dx, dy = small_grid["imax"], small_grid["jmax"], small_grid["dx"], small_grid["dy"]
        shape = (imax + 2, jmax + 2)
        T = rng.uniform(size=shape)
        U, V = rng.normal(size=shape), rng.normal(size=shape)
        expected = reference_update(100.0, 0.7, 1e-3, dx, dy, 0.8, T, U, V)

        calculate_T(100.0, 0.7, 1e-3, dx, dy, 0.8, imax, jmax, T, U, V)
        assert np.allclose(T, expected, rtol=1e-12, atol=1e-13)

    def test_reads_only_old_state(self, small_grid, rng):
        """Result is independent of the sweep order (double buffering)."""
        imax, jmax, dx, dy = small_grid["imax"], small_grid["jmax"], small_grid["dx"], small_grid["dy"]
        shape = (imax + 2, jmax + 2)
        T = rng.uniform(size=shape)
        U, V = rng.normal(size=shape), rng.normal(size=shape)
        T_flipped = T[::-1, ::-1].copy()
        U_flipped, V_flipped = -np.roll(U[::-1, ::-1], -1, axis=0), -np.roll(V[::-1, ::-1], -1, axis=1)

        calculate_T(10.0, 1.0, 1e-3, dx, dy, 0.0, imax, jmax, T, U, V)
        calculate_T(10.0, 1.0, 1e-3, dx, dy, 0.0, imax, jmax, T_flipped, U_flipped, V_flipped)
        assert np.allclose(T[1:-1, 1:-1], T_flipped[::-1, ::-1][1:-1, 1:-1], rtol=1e-12, atol=1e-13)

    @pytest.mark.parametrize("alpha", [0.0, 1.0])
    def test_uniform_state_is_steady(self, small_grid, alpha):
        imax, jmax = small_grid["imax"], small_grid["jmax"]
        shape = (imax + 2, jmax + 2)
        T = np.full(shape, 293.0)
        U, V = np.full(shape, 0.4), np.full(shape, -0.2)
        calculate_T(100.0, 7.0, 0.01, small_grid["dx"], small_grid["dy"], alpha, imax, jmax, T, U, V)
        assert np.allclose(T, 293.0, rtol=0.0, atol=1e-10)

    def test_pure_conduction_of_a_hot_spot(self):
        imax = jmax = 5
        shape = (imax + 2, jmax + 2)
        T = np.zeros(shape)
        T[3, 3] = 1.0
        zero = np.zeros(shape)
        Re, Pr, dt, h = 10.0, 2.0, 0.01, 0.5
        calculate_T(Re, Pr, dt, h, h, 0.5, imax, jmax, T, zero, zero)

        k = dt / (Re * Pr * h**2)
        assert T[3, 3] == pytest.approx(1.0 - 4 * k)
        for i, j in [(2, 3), (4, 3), (3, 2), (3, 4)]:
            assert T[i, j] == pytest.approx(k)
        assert T[1, 1] == 0.0

    def test_ghost_layer_untouched(self, small_grid, rng):
        imax, jmax = small_grid["imax"], small_grid["jmax"]
        shape = (imax + 2, jmax + 2)
        T = rng.uniform(size=shape)
        T_old = T.copy()
        calculate_T(100.0, 1.0, 1e-3, small_grid["dx"], small_grid["dy"], 0.5, imax, jmax, T,
                    rng.normal(size=shape), rng.normal(size=shape))
        for edge in (np.s_[0, :], np.s_[-1, :], np.s_[:, 0], np.s_[:, -1]):
            assert np.array_equal(T[edge], T_old[edge])

    def test_obstacles_updated_without_flags(self, small_grid, rng, block_fluid):
        imax, jmax = small_grid["imax"], small_grid["jmax"]
        shape = (imax + 2, jmax + 2)
        T = rng.uniform(size=shape)
        U, V = rng.normal(size=shape), rng.normal(size=shape)
        T_masked = T.copy()

        calculate_T(100.0, 1.0, 1e-3, small_grid["dx"], small_grid["dy"], 0.5, imax, jmax, T, U, V)
        calculate_T(100.0, 1.0, 1e-3, small_grid["dx"], small_grid["dy"], 0.5, imax, jmax, T_masked, U, V,
                    ObstacleMask.from_fluid(block_fluid))

        obstacle = ~block_fluid
        assert not np.array_equal(T[obstacle], T_masked[obstacle])
        assert np.array_equal(T[block_fluid], T_masked[block_fluid])

    def test_shape_mismatch(self, small_grid):
        shape = (small_grid["imax"] + 2, small_grid["jmax"] + 2)
        with pytest.raises(GridShapeError):
            calculate_T(100.0, 1.0, 1e-3, 0.1, 0.1, 0.5, small_grid["imax"], small_grid["jmax"],
                        np.zeros(shape), np.zeros((2, 2)), np.zeros(shape))
