"""Tests for the reference Runge-Kutta time marching."""

import numpy as np
import pytest

from conservation_laws_1d import (
    Uniform1DMesh, Periodic, SemiDiscretization, LaxFriedrichsScheme, CFLController,
    linear_advection, burgers, march, ssprk22_step, ssprk33_step, rk4_step,
    ConfigurationError,
)


def decay(u, t):
    return -u


class TestSteppers:

    @pytest.mark.parametrize("step, order", [(ssprk22_step, 2), (ssprk33_step, 3),
                                             (rk4_step, 4)])
    def test_local_error_order(self, step, order):
        u0 = np.array([[1.0]])
        errors = []
        for dt in (0.1, 0.05):
            u = step(decay, u0, 0.0, dt)
            errors.append(abs(u[0, 0] - np.exp(-dt)))
        # Local truncation error scales like dt^(order + 1)
        observed = np.log2(errors[0] / errors[1])
        assert observed == pytest.approx(order + 1, abs=0.3)

    def test_time_dependent_rhs(self):
        # du/dt = t integrates exactly with a third order method
        u = ssprk33_step(lambda u, t: np.full_like(u, t), np.zeros((1, 1)), 1.0, 0.5)
        assert u[0, 0] == pytest.approx(0.5 * (1.5**2 - 1.0))


class TestMarch:

    @pytest.fixture
    def semi(self):
        mesh = Uniform1DMesh(20, (0.0, 1.0), Periodic(), Periodic())
        return SemiDiscretization(mesh, linear_advection(1.0), LaxFriedrichsScheme())

    def test_lands_on_final_time(self, semi):
        u0 = semi.initial_state(lambda x: np.sin(2 * np.pi * x))
        controller = CFLController(semi.mesh, semi.flux, cfl=0.45)
        solution = march(semi, u0, 0.33, controller=controller)
        assert solution.t_final == 0.33
        assert solution.times[0] == 0.0
        assert np.all(np.diff(solution.times) > 0)
        assert solution.scheme_name == 'lf'
        assert solution.nvars == 1

    def test_conserves_total(self, semi):
        u0 = semi.initial_state(lambda x: 1.0 + np.sin(2 * np.pi * x))
        solution = march(semi, u0, 0.5, controller=CFLController(semi.mesh, semi.flux))
        assert semi.total(solution.final_state)[0] == pytest.approx(semi.total(u0)[0], abs=1e-12)

    def test_full_period_keeps_phase(self, semi):
        u0 = semi.initial_state(lambda x: np.sin(2 * np.pi * x))
        solution = march(semi, u0, 1.0, dt=0.025, method='rk4')
        assert len(solution) == 41
        final = solution.final_state[:, 0]
        # Damped by the upwind viscosity but not shifted
        assert np.max(np.abs(final)) < np.max(np.abs(u0))
        assert np.corrcoef(final, u0[:, 0])[0, 1] > 0.98

    def test_fixed_step_capped_by_controller(self, semi):
        u0 = np.ones((20, 1))
        controller = CFLController(semi.mesh, semi.flux, cfl=0.5)
        solution = march(semi, u0, 0.1, controller=controller, dt=1.0)
        assert np.diff(solution.times)[0] == pytest.approx(0.025)

    def test_save_every(self, semi):
        u0 = np.ones((20, 1))
        solution = march(semi, u0, 1.0, dt=0.1, save_every=4)
        np.testing.assert_allclose(solution.times, [0.0, 0.4, 0.8, 1.0])

    def test_needs_step_size(self, semi):
        with pytest.raises(ConfigurationError):
            march(semi, np.ones((20, 1)), 1.0)

    def test_unknown_method(self, semi):
        with pytest.raises(ConfigurationError):
            march(semi, np.ones((20, 1)), 1.0, dt=0.1, method='euler')

    def test_final_time_before_start(self, semi):
        with pytest.raises(ConfigurationError):
            march(semi, np.ones((20, 1)), 0.0, dt=0.1)

    def test_unconstrained_step(self):
        mesh = Uniform1DMesh(10, (0.0, 1.0), Periodic(), Periodic())
        semi = SemiDiscretization(mesh, burgers(), LaxFriedrichsScheme())
        with pytest.raises(ConfigurationError):
            march(semi, np.zeros((10, 1)), 1.0, controller=CFLController(mesh, burgers()))
