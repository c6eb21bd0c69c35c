"""Tests for flux specifications and the built-in conservation laws."""

import numpy as np
import pytest

from conservation_laws_1d import (
    FluxSpecification, linear_advection, advection_ec_flux, burgers, burgers_ec_flux,
    euler, euler_primitive_to_conservative, euler_conservative_to_primitive,
    ConfigurationError, NumericalFailure,
)
from conservation_laws_1d.flux import euler_sound_speed


def linear_system(matrix):
    """Flux f(u) = A u for a constant matrix A."""
    A = np.asarray(matrix, dtype=float)

    def flux(u):
        return u @ A.T

    def jacobian(u):
        return np.broadcast_to(A, u.shape + (A.shape[0],)).copy()

    return FluxSpecification(flux, jacobian, nvars=A.shape[0])


class TestScalarLaws:

    def test_linear_advection(self):
        flux = linear_advection(-2.0)
        u = np.array([[1.0], [3.0]])
        np.testing.assert_allclose(flux.evaluate(u), [[-2.0], [-6.0]])
        np.testing.assert_allclose(flux.spectral_radius(u), [2.0, 2.0])
        assert not flux.has_diffusion

    def test_burgers(self):
        flux = burgers()
        u = np.array([[-2.0], [0.5]])
        np.testing.assert_allclose(flux.evaluate(u), [[2.0], [0.125]])
        np.testing.assert_allclose(flux.jacobian_at(u)[:, 0, 0], [-2.0, 0.5])
        np.testing.assert_allclose(flux.spectral_radius(u), [2.0, 0.5])

    def test_viscosity_gives_diffusion(self):
        flux = burgers(viscosity=0.01)
        assert flux.has_diffusion
        u = np.ones((3, 1))
        np.testing.assert_allclose(flux.diffusion_spectral_radius(u), 0.01)

    def test_missing_diffusion(self):
        with pytest.raises(ConfigurationError):
            burgers().diffusion_at(np.ones((2, 1)))

    def test_ec_fluxes_are_consistent(self):
        u = np.linspace(-2.0, 2.0, 9)[:, None]
        np.testing.assert_allclose(burgers_ec_flux(u, u), 0.5 * u**2)
        np.testing.assert_allclose(advection_ec_flux(3.0)(u, u), 3.0 * u)

    def test_ec_fluxes_are_symmetric(self):
        ul = np.array([[1.0], [-0.5]])
        ur = np.array([[2.0], [4.0]])
        np.testing.assert_allclose(burgers_ec_flux(ul, ur), burgers_ec_flux(ur, ul))


class TestFluxSpecification:

    def test_finite_difference_jacobian(self):
        flux = FluxSpecification(lambda u: 0.5 * u**2)
        assert not flux.has_jacobian
        u = np.array([[-1.5], [0.0], [2.0]])
        np.testing.assert_allclose(flux.jacobian_at(u)[:, 0, 0], u[:, 0], atol=1e-6)

    def test_finite_difference_jacobian_matches_euler(self):
        exact = euler()
        approx = FluxSpecification(exact.flux)
        U = euler_primitive_to_conservative([1.0, 0.5], [0.3, -1.0], [1.0, 0.2])
        np.testing.assert_allclose(approx.jacobian_at(U), exact.jacobian_at(U),
                                   rtol=1e-5, atol=1e-6)

    def test_row_by_row_flux(self):
        def flux(u):
            assert u.shape == (2,)
            return np.array([u[1], u[0]])

        flux_spec = FluxSpecification(flux, vectorized=False)
        u = np.array([[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]])
        np.testing.assert_allclose(flux_spec.evaluate(u), u[:, ::-1])

    def test_constant_output(self):
        flux_spec = FluxSpecification(lambda u: 1.0)
        np.testing.assert_allclose(flux_spec.evaluate(np.zeros((4, 2))), np.ones((4, 2)))

    def test_wrong_output_shape(self):
        flux_spec = FluxSpecification(lambda u: np.zeros(u.shape[:-1] + (3,)))
        with pytest.raises(ConfigurationError):
            flux_spec.evaluate(np.zeros((4, 2)))

    def test_missing_component_not_widened(self):
        flux_spec = FluxSpecification(lambda u: u[..., :1], nvars=2)
        with pytest.raises(ConfigurationError):
            flux_spec.evaluate([[1.0, 5.0]])

    def test_per_row_scalar_not_widened(self):
        flux_spec = FluxSpecification(lambda u: u[..., 0], nvars=2)
        with pytest.raises(ConfigurationError):
            flux_spec.evaluate(np.ones((3, 2)))

    def test_jacobian_shape_checked(self):
        flux_spec = FluxSpecification(lambda u: u, lambda u: np.ones(u.shape), nvars=2)
        with pytest.raises(ConfigurationError):
            flux_spec.jacobian_at(np.ones((3, 2)))

    def test_variable_count_checked(self):
        with pytest.raises(ConfigurationError):
            burgers().evaluate(np.zeros((4, 2)))

    def test_flux_must_be_callable(self):
        with pytest.raises(ConfigurationError):
            FluxSpecification(3.0)


class TestEigen:

    def test_scalar(self):
        lam, R = burgers().eigen(np.array([[-3.0], [2.0]]))
        np.testing.assert_allclose(lam, [[-3.0], [2.0]])
        np.testing.assert_allclose(R, np.ones((2, 1, 1)))

    def test_reconstructs_jacobian(self):
        flux = euler()
        U = euler_primitive_to_conservative([1.0, 0.125], [0.2, -0.4], [1.0, 0.1])
        lam, R = flux.eigen(U)
        A = np.einsum('nij,nj,njk->nik', R, lam, np.linalg.inv(R))
        np.testing.assert_allclose(A, flux.jacobian_at(U), atol=1e-10)

    def test_complex_eigenvalues(self):
        flux = linear_system([[0.0, 1.0], [-1.0, 0.0]])
        with pytest.raises(NumericalFailure):
            flux.eigen(np.ones((3, 2)))

    def test_not_diagonalizable(self):
        flux = linear_system([[1.0, 1.0], [0.0, 1.0]])
        with pytest.raises(NumericalFailure):
            flux.eigen(np.ones((3, 2)))

    def test_non_finite_jacobian(self):
        with pytest.raises(NumericalFailure):
            burgers().eigen(np.array([[np.nan]]))


class TestEuler:

    def test_primitive_round_trip(self):
        rho = np.array([1.0, 0.125])
        u = np.array([0.75, -0.2])
        p = np.array([1.0, 0.1])
        U = euler_primitive_to_conservative(rho, u, p)
        assert U.shape == (2, 3)
        r2, u2, p2 = euler_conservative_to_primitive(U)
        np.testing.assert_allclose(r2, rho)
        np.testing.assert_allclose(u2, u)
        np.testing.assert_allclose(p2, p)

    def test_fluid_at_rest(self):
        U = euler_primitive_to_conservative(1.0, 0.0, 1.0)[None, :]
        np.testing.assert_allclose(euler().evaluate(U), [[0.0, 1.0, 0.0]])

    def test_eigenvalues(self):
        gamma = 1.4
        U = euler_primitive_to_conservative(1.0, 0.5, 1.0, gamma)[None, :]
        c = euler_sound_speed(U, gamma)[0]
        assert c == pytest.approx(np.sqrt(1.4))

        lam, _ = euler(gamma).eigen(U)
        np.testing.assert_allclose(np.sort(lam[0]), [0.5 - c, 0.5, 0.5 + c])
        assert euler(gamma).spectral_radius(U)[0] == pytest.approx(0.5 + c)
