"""
Semi-discretization of 1D conservation laws by the finite volume method.

Turns

    ∂u/∂t + ∂f(u)/∂x = 0

into the ODE system

    du_i/dt = -(F_{i+1/2} - F_{i-1/2}) / dx

where F are the numerical edge fluxes of the chosen scheme. The resulting
callable is handed to an external time integrator.
"""

import logging

import numpy as np

from .errors import ConfigurationError, NumericalFailure
from .parallel import parallel_for
from .quadrature import num_integrate

log = logging.getLogger(__name__)


class SemiDiscretization:
    """
    Right-hand side of the method-of-lines system.

    Parameters
    ----------
    mesh : Uniform1DMesh
        Mesh with boundary conditions
    flux : FluxSpecification
        Physical flux
    scheme : Scheme
        Numerical flux scheme
    threads : int
        Worker threads for the per-node and per-cell loops (1 = serial)
    """

    def __init__(self, mesh, flux, scheme, threads=1):
        if mesh.ncells < scheme.stencil_width:
            raise ConfigurationError(
                f"{scheme!r} needs {scheme.stencil_width} cells per ghost layer, "
                f"mesh has only {mesh.ncells}")
        if int(threads) != threads or threads < 1:
            raise ConfigurationError(f"threads must be a positive integer, got {threads}")
        self.mesh = mesh
        self.flux = flux
        self.scheme = scheme
        self.threads = int(threads)

    def _check_state(self, u):
        u = np.asarray(u, dtype=float)
        if u.ndim != 2 or u.shape[0] != self.mesh.ncells:
            raise ConfigurationError(
                f"State must have shape ({self.mesh.ncells}, M), got {u.shape}")
        if self.flux.nvars is not None and u.shape[1] != self.flux.nvars:
            raise ConfigurationError(
                f"State has {u.shape[1]} variables, flux expects {self.flux.nvars}")
        if not np.all(np.isfinite(u)):
            raise NumericalFailure("Non-finite value in state")
        return u

    def rhs(self, u, t=None, dt=None):
        """
        Compute the time derivative of the cell averages.

        Parameters
        ----------
        u : ndarray of shape (N, M)
            Cell averages
        t : float, optional
            Current time (the schemes are autonomous)
        dt : float, optional
            Current step size, forwarded to the scheme

        Returns
        -------
        dudt : ndarray of shape (N, M)
        """
        u = self._check_state(u)
        n, m = u.shape

        F = self.scheme.compute_edge_fluxes(u, self.mesh, self.flux, dt=dt,
                                            threads=self.threads)
        if F.shape != (n + 1, m):
            raise ConfigurationError(
                f"{self.scheme!r} returned fluxes of shape {F.shape}, expected {(n + 1, m)}")
        if not np.all(np.isfinite(F)):
            raise NumericalFailure(f"Non-finite numerical flux at t={t}")

        dudt = np.empty_like(u)
        dx = self.mesh.dx

        def difference_kernel(start, stop):
            dudt[start:stop] = -(F[start + 1:stop + 1] - F[start:stop]) / dx

        parallel_for(difference_kernel, n, self.threads)
        return dudt

    def __call__(self, u, t=None):
        return self.rhs(u, t)

    def ode_function(self, nvars):
        """
        Adapter for integrators working on flat vectors with f(t, y).

        Parameters
        ----------
        nvars : int
            Number of conserved variables M

        Returns
        -------
        f : callable
            f(t, y) with y of length N*M
        """
        shape = (self.mesh.ncells, nvars)

        def f(t, y):
            return self.rhs(np.reshape(y, shape), t).ravel()

        return f

    def initial_state(self, u0, order=5):
        """
        Project an initial condition onto cell averages.

        Parameters
        ----------
        u0 : callable
            Initial condition u0(x) returning a scalar or an M-vector
        order : int
            Number of Gauss-Legendre points per cell

        Returns
        -------
        u : ndarray of shape (N, M)
        """
        mesh = self.mesh
        averages = [num_integrate(u0, mesh.node_position(i), mesh.node_position(i + 1), order)
                    for i in mesh.cell_indices()]
        u = np.array(averages) / mesh.dx
        log.debug("Projected initial condition onto %d cells (%d variables)",
                  u.shape[0], u.shape[1])
        return u

    def total(self, u):
        """Integral of the cell averages over the domain, per variable."""
        return np.sum(np.asarray(u, dtype=float), axis=0) * self.mesh.dx

    def __repr__(self):
        return (f"SemiDiscretization(mesh={self.mesh!r}, flux={self.flux!r}, "
                f"scheme={self.scheme!r}, threads={self.threads})")
