"""
Boundary conditions for 1D finite volume meshes.

Implements the ghost cell policies applied at each end of the mesh:
- Periodic (wrap around to the opposite end)
- ZeroFlux (zero-gradient extrapolation of the nearest interior cell)
- Dirichlet (fixed prescribed state)

Policies are pure functions of the current interior state. Nothing is
cached between calls, so ghost values always reflect the state being
assembled.
"""

import numpy as np

from .errors import ConfigurationError


class BoundaryCondition:
    """Base class for boundary conditions."""

    def resolve(self, index, u):
        """
        Return the state used for a single (possibly out-of-range) cell.

        Parameters
        ----------
        index : int
            Cell index, may lie any distance outside [0, N-1]
        u : ndarray of shape (N, M)
            Interior cell averages

        Returns
        -------
        value : ndarray of shape (M,)
        """
        return self.resolve_many(np.asarray([index]), u)[0]

    def resolve_many(self, indices, u):
        """
        Return ghost states for an array of out-of-range cell indices.

        Parameters
        ----------
        indices : ndarray of int
            Cell indices beyond the end this policy is attached to
        u : ndarray of shape (N, M)
            Interior cell averages

        Returns
        -------
        values : ndarray of shape indices.shape + (M,)
        """
        raise NotImplementedError

    @property
    def is_periodic(self):
        return False

    def __repr__(self):
        return f"{type(self).__name__}()"


class Periodic(BoundaryCondition):
    """
    Periodic boundary condition.

    Ghost cells take the value of the cell at the opposite mesh end.
    """

    def resolve_many(self, indices, u):
        return u[np.mod(indices, u.shape[0])]

    @property
    def is_periodic(self):
        return True


class ZeroFlux(BoundaryCondition):
    """
    Zero-gradient boundary condition.

    Ghost cells copy the nearest interior cell, so waves leave the domain
    without reflection.
    """

    def resolve_many(self, indices, u):
        return u[np.clip(indices, 0, u.shape[0] - 1)]


class Dirichlet(BoundaryCondition):
    """
    Fixed-state boundary condition.

    Every ghost cell, however far outside the domain, takes the
    prescribed value.

    Parameters
    ----------
    value : float or array_like of shape (M,)
        Prescribed state vector
    """

    def __init__(self, value):
        value = np.atleast_1d(np.asarray(value, dtype=float)).copy()
        if value.ndim != 1:
            raise ConfigurationError(
                f"Dirichlet value must be a vector, got shape {value.shape}")
        value.flags.writeable = False
        self._value = value

    @property
    def value(self):
        return self._value

    def resolve_many(self, indices, u):
        if self._value.shape[0] != u.shape[1]:
            raise ConfigurationError(
                f"Dirichlet value has {self._value.shape[0]} components, "
                f"state has {u.shape[1]} variables")
        indices = np.asarray(indices)
        return np.broadcast_to(self._value, indices.shape + self._value.shape).copy()

    def __repr__(self):
        return f"Dirichlet({self._value.tolist()})"


def make_boundary(boundary):
    """
    Build a boundary condition from a name or pass an instance through.

    Parameters
    ----------
    boundary : str or BoundaryCondition
        'periodic', 'zero_flux' (alias 'zeroflux', 'outflow') or an
        existing BoundaryCondition

    Returns
    -------
    bc : BoundaryCondition
    """
    if isinstance(boundary, BoundaryCondition):
        return boundary
    name = str(boundary).lower()
    if name == 'periodic':
        return Periodic()
    if name in ('zero_flux', 'zeroflux', 'outflow'):
        return ZeroFlux()
    raise ConfigurationError(f"Unknown boundary condition: {boundary}")
