"""Tests for the space-time solution wrapper."""

import numpy as np
import pytest

from conservation_laws_1d import (
    FVSolution, Uniform1DMesh, Periodic, ZeroFlux, Dirichlet,
    BoundaryQueryError, ConfigurationError,
)


@pytest.fixture
def solution(periodic_mesh):
    """Three samples on 4 cells; cell i holds i + 10*k at sample k."""
    times = [0.0, 0.5, 1.0]
    states = [np.arange(4.0)[:, None] + 10.0 * k for k in range(3)]
    return FVSolution(periodic_mesh, times, states, scheme_name='lf')


class TestConstruction:

    def test_shapes(self, solution):
        assert len(solution) == 3
        assert solution.nvars == 1
        assert solution.t_final == 1.0
        np.testing.assert_array_equal(solution.final_state[:, 0], [20.0, 21.0, 22.0, 23.0])

    def test_scalar_states_promoted(self, periodic_mesh):
        sol = FVSolution(periodic_mesh, [0.0, 1.0], np.zeros((2, 4)))
        assert sol.states.shape == (2, 4, 1)

    def test_times_must_increase(self, periodic_mesh):
        with pytest.raises(ConfigurationError):
            FVSolution(periodic_mesh, [0.0, 0.0], np.zeros((2, 4, 1)))
        with pytest.raises(ConfigurationError):
            FVSolution(periodic_mesh, [1.0, 0.5], np.zeros((2, 4, 1)))

    def test_state_shape_checked(self, periodic_mesh):
        with pytest.raises(ConfigurationError):
            FVSolution(periodic_mesh, [0.0, 1.0], np.zeros((2, 5, 1)))
        with pytest.raises(ConfigurationError):
            FVSolution(periodic_mesh, [0.0, 1.0, 2.0], np.zeros((2, 4, 1)))


class TestTimeQueries:

    def test_sample_times(self, solution):
        np.testing.assert_array_equal(solution.state_at(0.5)[:, 0], [10.0, 11.0, 12.0, 13.0])
        np.testing.assert_array_equal(solution.state_at(1.0)[:, 0], [20.0, 21.0, 22.0, 23.0])

    def test_nearest_sample(self, solution):
        assert solution.value_at(0.1, 0.2) == 0.0
        assert solution.value_at(0.1, 0.3) == 10.0
        # Ties go to the earlier sample
        assert solution.value_at(0.1, 0.25) == 0.0

    def test_linear_interpolation(self, solution):
        assert solution.value_at(0.1, 0.25, interpolate=True) == pytest.approx(5.0)
        assert solution.value_at(0.1, 0.9, interpolate=True) == pytest.approx(18.0)

    @pytest.mark.parametrize("t", [-0.1, 1.5])
    def test_outside_time_range(self, solution, t):
        with pytest.raises(BoundaryQueryError):
            solution.value_at(0.5, t)
        with pytest.raises(LookupError):
            solution.state_at(t)


class TestSpatialQueries:

    def test_cell_lookup(self, solution):
        assert solution.value_at(0.3, 0.0) == 1.0
        assert solution(0.8, 1.0) == 23.0

    def test_vectorized(self, solution):
        values = solution.value_at(np.array([0.1, 0.4, 0.9]), 0.0)
        np.testing.assert_array_equal(values, [0.0, 1.0, 3.0])

    def test_periodic_wrap(self, solution):
        assert solution.value_at(1.1, 0.0) == 0.0
        assert solution.value_at(-0.1, 0.0) == 3.0

    def test_zero_flux_clamp(self):
        mesh = Uniform1DMesh(4, (0.0, 1.0), ZeroFlux(), ZeroFlux())
        sol = FVSolution(mesh, [0.0], np.arange(4.0)[None, :, None])
        assert sol.value_at(1.7, 0.0) == 3.0
        assert sol.value_at(-3.0, 0.0) == 0.0

    def test_dirichlet_value(self):
        mesh = Uniform1DMesh(4, (0.0, 1.0), Dirichlet([7.0, 8.0]), ZeroFlux())
        sol = FVSolution(mesh, [0.0], np.zeros((1, 4, 2)))
        assert sol.value_at(-5.0, 0.0, variable=1) == 8.0

    def test_point_just_inside_right_end(self):
        a, b = -2.9, 1.184
        mesh = Uniform1DMesh(3, (a, b), ZeroFlux(), Dirichlet(99.0))
        sol = FVSolution(mesh, [0.0], np.zeros((1, 3, 1)))
        assert sol.value_at(np.nextafter(b, a), 0.0) == 0.0
        assert sol.value_at(b, 0.0) == 0.0
        assert sol.value_at(b + 0.5, 0.0) == 99.0


class TestErrors:

    def test_zero_error_against_itself(self, periodic_mesh):
        exact = lambda x, t: 2.0 + t
        sol = FVSolution(periodic_mesh, [0.0, 1.0], [np.full((4, 1), 2.0), np.full((4, 1), 3.0)])
        errors = sol.errors(exact)
        for norm in ('L1', 'L2', 'Linf'):
            assert errors[norm][0] == pytest.approx(0.0, abs=1e-14)

    def test_constant_offset(self, periodic_mesh):
        sol = FVSolution(periodic_mesh, [0.0], np.ones((1, 4, 1)))
        errors = sol.errors(lambda x, t: 0.0)
        assert errors['L1'][0] == pytest.approx(1.0)
        assert errors['L2'][0] == pytest.approx(1.0)
        assert errors['Linf'][0] == pytest.approx(1.0)
        assert sol.l1_error(lambda x, t: 0.0) == pytest.approx(1.0)

    def test_errors_at_earlier_time(self, solution):
        errors = solution.errors(lambda x, t: 0.0, t=0.0)
        # mean of |0, 1, 2, 3| over unit length
        assert errors['L1'][0] == pytest.approx(1.5)
        assert errors['Linf'][0] == pytest.approx(3.0)

    def test_exact_averages(self, periodic_mesh, solution):
        averages = solution.exact_averages(lambda x, t: x, 0.0)
        np.testing.assert_allclose(averages[:, 0], periodic_mesh.cell_centers)
