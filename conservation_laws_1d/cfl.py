"""
CFL-based step size control.

Hyperbolic:

    dt = CFL * dx / max ρ(Df(u_i))

Hyperbolic + parabolic (diffusion matrix B):

    dt = CFL / (max ρ(Df) / dx + max ρ(B) / (2 dx²))

The controller is meant to be called by a time integrator once per
accepted step with the current state. It only proposes a step size and
never modifies the state.
"""

import logging
import math

import numpy as np

from .errors import ConfigurationError, NumericalFailure

log = logging.getLogger(__name__)


def max_wave_speed(u, flux):
    """
    Maximum spectral radius of the flux Jacobian over all cells.

    Parameters
    ----------
    u : ndarray of shape (N, M)
    flux : FluxSpecification

    Returns
    -------
    max_rho : float
    """
    rho = flux.spectral_radius(np.asarray(u, dtype=float))
    max_rho = float(np.max(rho))
    if not math.isfinite(max_rho):
        raise NumericalFailure("Non-finite wave speed in CFL estimate")
    return max_rho


class CFLController:
    """
    Step size controller driven by the CFL condition.

    Parameters
    ----------
    mesh : Uniform1DMesh
        Mesh providing dx
    flux : FluxSpecification
        Physical flux; its diffusion matrix is used when ``parabolic``
    cfl : float
        CFL number (> 0). Values above 1 are accepted with a warning since
        the admissible bound depends on the scheme and integrator.
    parabolic : bool
        Include the diffusion restriction
    max_dt : float, optional
        Step size returned when no wave speed constrains the step; also
        an upper cap on every proposal
    interval : int
        Re-evaluate the step size every ``interval`` calls and reuse the
        cached value in between

    Attributes
    ----------
    dt : float or None
        Most recent proposal (math.inf when unconstrained)
    max_rho : float
        Cached maximum spectral radius of Df
    max_rho_diffusion : float
        Cached maximum spectral radius of the diffusion matrix
    ncalls : int
        Number of calls so far
    """

    def __init__(self, mesh, flux, cfl=0.5, parabolic=False, max_dt=None, interval=1):
        if not cfl > 0:
            raise ConfigurationError(f"CFL number must be positive, got {cfl}")
        if cfl > 1:
            log.warning("CFL number %.3g exceeds 1; stability depends on the scheme", cfl)
        if parabolic and not flux.has_diffusion:
            raise ConfigurationError("Parabolic CFL control needs a diffusion matrix")
        if max_dt is not None and not max_dt > 0:
            raise ConfigurationError(f"max_dt must be positive, got {max_dt}")
        if int(interval) != interval or interval < 1:
            raise ConfigurationError(f"interval must be a positive integer, got {interval}")

        self.mesh = mesh
        self.flux = flux
        self.cfl = cfl
        self.parabolic = parabolic
        self.max_dt = max_dt
        self.interval = int(interval)
        self.reset()

    def reset(self):
        self.dt = None
        self.max_rho = 0.0
        self.max_rho_diffusion = 0.0
        self.ncalls = 0

    @property
    def unconstrained(self):
        """True when the last evaluation found no wave speed to limit dt."""
        return self.dt is not None and math.isinf(self.dt)

    def update(self, u):
        """
        Recompute the step size from the state u.

        Parameters
        ----------
        u : ndarray of shape (N, M)

        Returns
        -------
        dt : float
            Proposed step size; ``max_dt`` or math.inf if every wave
            speed vanishes
        """
        dx = self.mesh.dx
        self.max_rho = max_wave_speed(u, self.flux)
        rate = self.max_rho / dx

        if self.parabolic:
            rho_b = self.flux.diffusion_spectral_radius(np.asarray(u, dtype=float))
            self.max_rho_diffusion = float(np.max(rho_b))
            if not math.isfinite(self.max_rho_diffusion):
                raise NumericalFailure("Non-finite diffusion spectral radius in CFL estimate")
            rate += self.max_rho_diffusion / (2 * dx**2)

        if rate == 0.0:
            dt = self.max_dt if self.max_dt is not None else math.inf
            log.debug("Zero wave speed, step size unconstrained (dt=%s)", dt)
        else:
            dt = self.cfl / rate
            if self.max_dt is not None:
                dt = min(dt, self.max_dt)

        self.dt = dt
        return dt

    def __call__(self, u, t=None):
        """Step size for the current state, re-evaluated every ``interval`` calls."""
        self.ncalls += 1
        if self.dt is None or (self.ncalls - 1) % self.interval == 0:
            self.update(u)
        return self.dt

    def propose(self, dt, u, t=None):
        """Cap an integrator's own step size proposal by the CFL step size."""
        return min(dt, self(u, t))

    def __repr__(self):
        return (f"CFLController(cfl={self.cfl}, parabolic={self.parabolic}, "
                f"max_dt={self.max_dt}, interval={self.interval})")
