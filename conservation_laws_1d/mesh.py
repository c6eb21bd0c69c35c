"""
Uniform 1D finite volume mesh.

Partitions [x_min, x_max] into N cells of equal width and carries one
boundary condition per end.

Indexing convention (0-based):
- cells 0..N-1, cell i spans [x_min + i*dx, x_min + (i+1)*dx]
- nodes 0..N, node j is the interface between cell j-1 and cell j,
  so node 0 and node N are the domain ends

Every read of a cell value that may fall outside [0, N-1] goes through
this class, which hands out-of-range indices to the boundary condition
of the end they lie beyond.
"""

import numpy as np

from .boundary_conditions import make_boundary, ZeroFlux
from .errors import ConfigurationError


class Uniform1DMesh:
    """
    Structured uniform mesh on an interval.

    Parameters
    ----------
    ncells : int
        Number of cells N (>= 1)
    x_range : tuple
        Domain extent (x_min, x_max), x_max > x_min
    left_boundary, right_boundary : BoundaryCondition or str
        Boundary policy at each end (default ZeroFlux). Periodic must be
        used at both ends or at neither.
    """

    def __init__(self, ncells, x_range=(0.0, 1.0), left_boundary=None,
                 right_boundary=None):
        if int(ncells) != ncells or ncells < 1:
            raise ConfigurationError(f"Mesh needs at least one cell, got ncells={ncells}")
        x_min, x_max = float(x_range[0]), float(x_range[1])
        if not np.isfinite(x_min) or not np.isfinite(x_max) or x_max <= x_min:
            raise ConfigurationError(f"Invalid domain bounds: ({x_min}, {x_max})")

        self._ncells = int(ncells)
        self._x_min = x_min
        self._x_max = x_max
        self._dx = (x_max - x_min) / self._ncells

        self._left = make_boundary(left_boundary if left_boundary is not None else ZeroFlux())
        self._right = make_boundary(right_boundary if right_boundary is not None else ZeroFlux())
        if self._left.is_periodic != self._right.is_periodic:
            raise ConfigurationError(
                "Periodic boundary must be set on both ends of the mesh "
                f"(got left={self._left!r}, right={self._right!r})")

        # Cell centers and node positions
        self._centers = x_min + (np.arange(self._ncells) + 0.5) * self._dx
        self._nodes = x_min + np.arange(self._ncells + 1) * self._dx
        self._centers.flags.writeable = False
        self._nodes.flags.writeable = False

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    @property
    def ncells(self):
        return self._ncells

    @property
    def nnodes(self):
        return self._ncells + 1

    @property
    def dx(self):
        return self._dx

    @property
    def x_range(self):
        return (self._x_min, self._x_max)

    @property
    def left_boundary(self):
        return self._left

    @property
    def right_boundary(self):
        return self._right

    @property
    def is_periodic(self):
        return self._left.is_periodic and self._right.is_periodic

    @property
    def cell_centers(self):
        return self._centers

    @property
    def nodes(self):
        return self._nodes

    def cell_center(self, i):
        """Center of cell i."""
        return self._x_min + (i + 0.5) * self._dx

    def cell_volume(self, i=None):
        """Width of cell i (identical for every cell)."""
        return self._dx

    def node_position(self, j):
        """Coordinate of node j."""
        return self._x_min + j * self._dx

    def cell_indices(self):
        return range(self._ncells)

    def node_indices(self):
        return range(self._ncells + 1)

    def locate_cell(self, x):
        """
        Index of the cell containing x.

        Points outside the domain map to out-of-range indices, which the
        boundary conditions resolve. A point on an interior node belongs
        to the cell on its right; x_max belongs to the last cell.

        Parameters
        ----------
        x : float or ndarray

        Returns
        -------
        index : int or ndarray of int
        """
        x = np.asarray(x, dtype=float)
        idx = np.floor((x - self._x_min) / self._dx).astype(int)
        # Round-off must not push an in-domain point into a ghost cell
        inside = (x >= self._x_min) & (x <= self._x_max)
        idx = np.where(inside, np.clip(idx, 0, self._ncells - 1), idx)
        if idx.ndim == 0:
            return int(idx)
        return idx

    # ------------------------------------------------------------------
    # Boundary-resolved state access
    # ------------------------------------------------------------------

    def get_cell_values(self, u, indices):
        """
        Cell values for arbitrary indices, resolving ghosts.

        Parameters
        ----------
        u : ndarray of shape (N, M)
            Cell averages
        indices : array_like of int
            Any shape; entries may lie outside [0, N-1]

        Returns
        -------
        values : ndarray of shape indices.shape + (M,)
        """
        indices = np.asarray(indices, dtype=int)
        n = self._ncells
        out = np.empty(indices.shape + (u.shape[1],), dtype=u.dtype)

        inside = (indices >= 0) & (indices < n)
        out[inside] = u[indices[inside]]

        below = indices < 0
        if np.any(below):
            out[below] = self._left.resolve_many(indices[below], u)
        above = indices >= n
        if np.any(above):
            out[above] = self._right.resolve_many(indices[above], u)
        return out

    def cell_value(self, i, u):
        """State of cell i, or its ghost value if i is out of range."""
        return self.get_cell_values(u, [i])[0]

    def cell_value_at_left(self, j, u):
        """State on the left of node j (cell j-1)."""
        return self.cell_value(j - 1, u)

    def cell_value_at_right(self, j, u):
        """State on the right of node j (cell j)."""
        return self.cell_value(j, u)

    def extended_state(self, u, nghost):
        """
        State array padded with boundary-resolved ghost layers.

        Parameters
        ----------
        u : ndarray of shape (N, M)
        nghost : int
            Number of ghost cells on each side

        Returns
        -------
        u_ext : ndarray of shape (N + 2*nghost, M)
            u_ext[k] holds cell k - nghost
        """
        indices = np.arange(-nghost, self._ncells + nghost)
        return self.get_cell_values(u, indices)

    def __repr__(self):
        return (f"Uniform1DMesh(ncells={self._ncells}, x_range=({self._x_min}, "
                f"{self._x_max}), left={self._left!r}, right={self._right!r})")
