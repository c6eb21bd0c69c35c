"""
Space-time solution of a finite volume computation.

Couples the mesh with a trajectory of cell averages recorded by a time
integrator and answers point queries u(x, t).
"""

import numpy as np

from .errors import BoundaryQueryError, ConfigurationError
from .quadrature import num_integrate


class FVSolution:
    """
    Trajectory of cell averages on a mesh.

    Parameters
    ----------
    mesh : Uniform1DMesh
        Mesh the states live on
    times : array_like of shape (K,)
        Strictly increasing sample times
    states : array_like of shape (K, N, M) or (K, N)
        Cell averages at each sample time
    scheme_name : str, optional
        Label of the scheme that produced the trajectory
    """

    def __init__(self, mesh, times, states, scheme_name=None):
        times = np.asarray(times, dtype=float)
        states = np.asarray(states, dtype=float)
        if times.ndim != 1 or times.size == 0:
            raise ConfigurationError("times must be a non-empty 1D sequence")
        if np.any(np.diff(times) <= 0):
            raise ConfigurationError("times must be strictly increasing")
        if states.ndim == 2:
            states = states[..., None]
        if states.ndim != 3 or states.shape[:2] != (times.size, mesh.ncells):
            raise ConfigurationError(
                f"states must have shape ({times.size}, {mesh.ncells}, M), got {states.shape}")

        self.mesh = mesh
        self.times = times
        self.states = states
        self.scheme_name = scheme_name

    @property
    def nvars(self):
        return self.states.shape[2]

    @property
    def t_final(self):
        return self.times[-1]

    @property
    def final_state(self):
        return self.states[-1]

    @property
    def cell_centers(self):
        return self.mesh.cell_centers

    def __len__(self):
        return self.times.size

    def _bracket(self, t):
        """Index k and weight theta with t = (1-theta)*times[k] + theta*times[k+1]."""
        t = float(t)
        if not (self.times[0] <= t <= self.times[-1]):
            raise BoundaryQueryError(
                f"t={t} outside recorded range [{self.times[0]}, {self.times[-1]}]")
        k = int(np.searchsorted(self.times, t, side='right')) - 1
        if k >= self.times.size - 1:
            return self.times.size - 1, 0.0
        theta = (t - self.times[k]) / (self.times[k + 1] - self.times[k])
        return k, theta

    def state_at(self, t, interpolate=False):
        """
        Cell averages at time t.

        Parameters
        ----------
        t : float
            Query time within the recorded range
        interpolate : bool
            Linear interpolation between the bracketing samples instead
            of the nearest sample (ties go to the earlier sample)

        Returns
        -------
        u : ndarray of shape (N, M)
        """
        k, theta = self._bracket(t)
        if theta == 0.0:
            return self.states[k]
        if interpolate:
            return (1 - theta) * self.states[k] + theta * self.states[k + 1]
        return self.states[k] if theta <= 0.5 else self.states[k + 1]

    def value_at(self, x, t, variable=0, interpolate=False):
        """
        Value of one variable at point(s) x and time t.

        Points outside the domain are resolved with the mesh boundary
        conditions (wrap, clamp or fixed value).

        Parameters
        ----------
        x : float or array_like
        t : float
        variable : int
        interpolate : bool
            See state_at

        Returns
        -------
        value : float or ndarray
        """
        u = self.state_at(t, interpolate)
        idx = self.mesh.locate_cell(x)
        values = self.mesh.get_cell_values(u, np.atleast_1d(idx))[..., variable]
        if np.ndim(x) == 0:
            return float(values[0])
        return values.reshape(np.shape(x))

    def __call__(self, x, t, variable=0):
        return self.value_at(x, t, variable)

    def exact_averages(self, exact, t, order=5):
        """
        Cell averages of an exact solution exact(x, t).

        Returns
        -------
        u : ndarray of shape (N, M)
        """
        mesh = self.mesh
        averages = [num_integrate(lambda x: exact(x, t), mesh.node_position(i),
                                  mesh.node_position(i + 1), order)
                    for i in mesh.cell_indices()]
        return np.array(averages) / mesh.dx

    def errors(self, exact, t=None):
        """
        L1, L2 and L∞ errors against an exact solution.

        Parameters
        ----------
        exact : callable
            exact(x, t) returning a scalar or an M-vector
        t : float, optional
            Time of comparison (default final time)

        Returns
        -------
        errors : dict
            'L1', 'L2', 'Linf', each an array with one entry per variable
        """
        if t is None:
            t = self.t_final
        diff = np.abs(self.state_at(t) - self.exact_averages(exact, t))
        dx = self.mesh.dx
        return {
            'L1': np.sum(diff, axis=0) * dx,
            'L2': np.sqrt(np.sum(diff**2, axis=0) * dx),
            'Linf': np.max(diff, axis=0),
        }

    def l1_error(self, exact, t=None, variable=0):
        """L1 error of one variable."""
        return float(self.errors(exact, t)['L1'][variable])

    def __repr__(self):
        return (f"FVSolution(ncells={self.mesh.ncells}, nvars={self.nvars}, "
                f"samples={len(self)}, t=[{self.times[0]}, {self.times[-1]}])")
