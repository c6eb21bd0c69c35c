"""
Physical flux specifications for 1D conservation laws.

    ∂u/∂t + ∂f(u)/∂x = 0

A FluxSpecification wraps the user-supplied flux f, its optional Jacobian
Df and an optional diffusion matrix (used only for parabolic step size
estimates). Built-in specifications:
- Linear advection  f(u) = a*u
- Burgers           f(u) = u²/2
- Euler             f(U) = [ρu, ρu² + p, u(ρE + p)]

together with two-point entropy-conservative fluxes for the scalar laws.
"""

import logging

import numpy as np

from .errors import ConfigurationError, NumericalFailure

log = logging.getLogger(__name__)


class FluxSpecification:
    """
    Uniform wrapper around a physical flux.

    All callables act on the trailing axis of their argument: a state
    array of shape (..., M) maps to a flux of shape (..., M) and a
    Jacobian of shape (..., M, M). With ``vectorized=False`` the callables
    are only ever given single M-vectors and are applied row by row.

    Parameters
    ----------
    flux : callable
        Physical flux f(u)
    jacobian : callable, optional
        Flux Jacobian Df(u). When omitted a central finite difference
        approximation is used.
    diffusion : callable, optional
        Diffusion matrix B(u) of a parabolic regularization, used by the
        CFL controller
    nvars : int, optional
        Number of conserved variables M, checked on every call when given
    vectorized : bool
        Whether the callables broadcast over leading axes
    fd_step : float
        Relative step of the finite difference Jacobian
    """

    def __init__(self, flux, jacobian=None, diffusion=None, nvars=None,
                 vectorized=True, fd_step=1e-7):
        if not callable(flux):
            raise ConfigurationError("flux must be callable")
        self.flux = flux
        self.jacobian = jacobian
        self.diffusion = diffusion
        self.nvars = nvars
        self.vectorized = vectorized
        self.fd_step = fd_step

    @property
    def has_jacobian(self):
        return self.jacobian is not None

    @property
    def has_diffusion(self):
        return self.diffusion is not None

    def _apply(self, func, u, trailing_shape):
        u = np.asarray(u, dtype=float)
        m = u.shape[-1]
        if self.nvars is not None and m != self.nvars:
            raise ConfigurationError(
                f"State has {m} variables, flux expects {self.nvars}")
        if self.vectorized:
            out = np.asarray(func(u), dtype=float)
        else:
            rows = u.reshape(-1, m)
            out = np.array([np.asarray(func(row), dtype=float) for row in rows])
            out = out.reshape(u.shape[:-1] + out.shape[1:])
        expected = u.shape[:-1] + trailing_shape(m)
        if out.ndim == 0:
            # Constant flux
            return np.full(expected, float(out))
        if out.shape != expected:
            raise ConfigurationError(
                f"Flux callable returned shape {out.shape}, expected {expected}")
        return out

    def evaluate(self, u):
        """Physical flux f(u), shape (..., M)."""
        return self._apply(self.flux, u, lambda m: (m,))

    def jacobian_at(self, u):
        """Flux Jacobian Df(u), shape (..., M, M)."""
        if self.jacobian is not None:
            return self._apply(self.jacobian, u, lambda m: (m, m))
        return self._finite_difference_jacobian(u)

    def diffusion_at(self, u):
        """Diffusion matrix B(u), shape (..., M, M)."""
        if self.diffusion is None:
            raise ConfigurationError("Flux specification has no diffusion matrix")
        return self._apply(self.diffusion, u, lambda m: (m, m))

    def _finite_difference_jacobian(self, u):
        u = np.asarray(u, dtype=float)
        m = u.shape[-1]
        jac = np.empty(u.shape + (m,))
        for k in range(m):
            h = self.fd_step * np.maximum(1.0, np.abs(u[..., k]))
            du = np.zeros_like(u)
            du[..., k] = h
            df = self.evaluate(u + du) - self.evaluate(u - du)
            jac[..., :, k] = df / (2.0 * h[..., None])
        return jac

    def spectral_radius(self, u):
        """
        Largest absolute eigenvalue of Df for every state.

        Parameters
        ----------
        u : ndarray of shape (..., M)

        Returns
        -------
        rho : ndarray of shape (...)
        """
        return _spectral_radius(self.jacobian_at(u))

    def diffusion_spectral_radius(self, u):
        """Largest absolute eigenvalue of the diffusion matrix for every state."""
        return _spectral_radius(self.diffusion_at(u))

    def eigen(self, u):
        """
        Real eigendecomposition of Df at every state.

        Parameters
        ----------
        u : ndarray of shape (..., M)

        Returns
        -------
        lam : ndarray of shape (..., M)
            Eigenvalues
        R : ndarray of shape (..., M, M)
            Right eigenvectors as columns

        Raises
        ------
        NumericalFailure
            If the Jacobian has complex eigenvalues or is not
            diagonalizable at some state.
        """
        jac = self.jacobian_at(u)
        if not np.all(np.isfinite(jac)):
            raise NumericalFailure("Non-finite flux Jacobian")
        if jac.shape[-1] == 1:
            lam = jac[..., 0]
            R = np.ones_like(jac)
            return lam, R
        try:
            lam, R = np.linalg.eig(jac)
        except np.linalg.LinAlgError as exc:
            raise NumericalFailure(f"Eigendecomposition of flux Jacobian failed: {exc}") from exc

        scale = 1.0 + np.abs(lam)
        if np.any(np.abs(np.imag(lam)) > 1e-10 * scale):
            raise NumericalFailure("Flux Jacobian has complex eigenvalues (non-hyperbolic state)")
        lam = np.real(lam)
        R = np.real(R)
        cond = np.linalg.cond(R)
        if np.any(~np.isfinite(cond)) or np.any(cond > 1e12):
            raise NumericalFailure("Flux Jacobian is not diagonalizable at a sampled state")
        return lam, R

    def __repr__(self):
        name = getattr(self.flux, '__name__', type(self.flux).__name__)
        return f"FluxSpecification(flux={name}, nvars={self.nvars})"


def _spectral_radius(mat):
    if mat.shape[-1] == 1:
        return np.abs(mat[..., 0, 0])
    return np.max(np.abs(np.linalg.eigvals(mat)), axis=-1)


# ----------------------------------------------------------------------
# Linear advection
# ----------------------------------------------------------------------

def linear_advection(a=1.0, viscosity=None):
    """
    Flux specification for u_t + a u_x = 0.

    Parameters
    ----------
    a : float
        Advection speed
    viscosity : float, optional
        Constant diffusion coefficient for parabolic step size estimates

    Returns
    -------
    flux : FluxSpecification
    """
    def flux(u):
        return a * u

    def jacobian(u):
        return np.full(u.shape + (1,), a)

    diffusion = None
    if viscosity is not None:
        def diffusion(u):
            return np.full(u.shape + (1,), viscosity)

    return FluxSpecification(flux, jacobian, diffusion, nvars=1)


def advection_ec_flux(a=1.0):
    """Entropy-conservative flux for linear advection (central average)."""
    def ec_flux(ul, ur):
        return 0.5 * a * (ul + ur)
    return ec_flux


# ----------------------------------------------------------------------
# Burgers
# ----------------------------------------------------------------------

def burgers(viscosity=None):
    """
    Flux specification for the inviscid Burgers equation u_t + (u²/2)_x = 0.

    Parameters
    ----------
    viscosity : float, optional
        Constant diffusion coefficient for parabolic step size estimates
    """
    def flux(u):
        return 0.5 * u**2

    def jacobian(u):
        return u[..., None]

    diffusion = None
    if viscosity is not None:
        def diffusion(u):
            return np.full(u.shape + (1,), viscosity)

    return FluxSpecification(flux, jacobian, diffusion, nvars=1)


def burgers_ec_flux(ul, ur):
    """
    Entropy-conservative flux for Burgers with entropy u²/2.

    F*(uL, uR) = (uL² + uL uR + uR²) / 6
    """
    return (ul**2 + ul * ur + ur**2) / 6.0


# ----------------------------------------------------------------------
# Euler equations
# ----------------------------------------------------------------------

def euler_primitive_to_conservative(rho, u, p, gamma=1.4):
    """
    Convert primitive variables to conservative variables.

    Parameters
    ----------
    rho, u, p : ndarray
        Density, velocity, pressure
    gamma : float
        Ratio of specific heats

    Returns
    -------
    U : ndarray of shape (n, 3)
        Conservative variables [rho, rho*u, rho*E] per row
    """
    rho, u, p = np.broadcast_arrays(*(np.asarray(v, dtype=float) for v in (rho, u, p)))
    U = np.empty(rho.shape + (3,))
    U[..., 0] = rho
    U[..., 1] = rho * u
    # Total energy: E = p/(gamma-1) + 0.5*rho*u^2
    U[..., 2] = p / (gamma - 1) + 0.5 * rho * u**2
    return U


def euler_conservative_to_primitive(U, gamma=1.4):
    """
    Convert conservative variables to primitive variables.

    Parameters
    ----------
    U : ndarray of shape (..., 3)
        Conservative variables [rho, rho*u, rho*E]

    Returns
    -------
    rho, u, p : tuple of ndarrays
    """
    rho = U[..., 0]
    u = U[..., 1] / rho
    p = (gamma - 1) * (U[..., 2] - 0.5 * rho * u**2)
    return rho, u, p


def euler(gamma=1.4):
    """
    Flux specification for the 1D compressible Euler equations.

    State rows are [rho, rho*u, rho*E]; the Jacobian is analytic and its
    eigenvalues are u - c, u, u + c.
    """
    def flux(U):
        rho, u, p = euler_conservative_to_primitive(U, gamma)
        F = np.empty_like(U)
        F[..., 0] = rho * u                    # Mass flux
        F[..., 1] = rho * u**2 + p             # Momentum flux
        F[..., 2] = u * (U[..., 2] + p)        # Energy flux
        return F

    def jacobian(U):
        rho, u, p = euler_conservative_to_primitive(U, gamma)
        H = (U[..., 2] + p) / rho  # Total enthalpy
        A = np.zeros(U.shape + (3,))
        A[..., 0, 1] = 1.0
        A[..., 1, 0] = 0.5 * (gamma - 3) * u**2
        A[..., 1, 1] = (3 - gamma) * u
        A[..., 1, 2] = gamma - 1
        A[..., 2, 0] = 0.5 * (gamma - 1) * u**3 - u * H
        A[..., 2, 1] = H - (gamma - 1) * u**2
        A[..., 2, 2] = gamma * u
        return A

    return FluxSpecification(flux, jacobian, nvars=3)


def euler_sound_speed(U, gamma=1.4):
    """Compute sound speed c = sqrt(gamma * p / rho)."""
    rho, _, p = euler_conservative_to_primitive(U, gamma)
    return np.sqrt(gamma * p / rho)
