"""
ENO reconstruction on uniform meshes.

Given cell averages, recovers point values at both faces of every cell
from the smoothest sub-stencil of ``order`` cells, chosen by comparing
undivided differences level by level (Harten, Engquist, Osher and
Chakravarthy; see also Shu, "Essentially non-oscillatory and weighted
essentially non-oscillatory schemes for hyperbolic conservation laws",
1997).

The candidate stencil around cell i is i-(order-1) .. i+(order-1).
"""

import numpy as np

from .errors import ConfigurationError


def eno_coefficients(order):
    """
    Uniform-grid reconstruction coefficients c_{r,j}.

    For a stencil of ``order`` cells starting ``r`` cells left of cell i,

        u_{i+1/2} = sum_j c_{r,j} ubar_{i-r+j}

    Parameters
    ----------
    order : int
        Number of cells in the reconstruction stencil

    Returns
    -------
    c : ndarray of shape (order + 1, order)
        Row r + 1 holds c_{r,.} for r = -1, ..., order - 1
    """
    k = order
    c = np.zeros((k + 1, k))
    for r in range(-1, k):
        for j in range(k):
            total = 0.0
            for m in range(j + 1, k + 1):
                num = 0.0
                for l in range(k + 1):
                    if l == m:
                        continue
                    prod = 1.0
                    for q in range(k + 1):
                        if q != m and q != l:
                            prod *= r - q + 1
                    num += prod
                den = 1.0
                for l in range(k + 1):
                    if l != m:
                        den *= m - l
                total += num / den
            c[r + 1, j] = total
    return c


class ENOReconstruction:
    """
    ENO reconstruction of a given order.

    Parameters
    ----------
    order : int
        Reconstruction order (stencil size), >= 1
    """

    def __init__(self, order):
        if int(order) != order or order < 1:
            raise ConfigurationError(f"ENO order must be a positive integer, got {order}")
        self.order = int(order)
        self.coefficients = eno_coefficients(self.order)

    @property
    def halfwidth(self):
        """Cells needed on each side of a reconstructed cell."""
        return self.order - 1

    def reconstruct(self, v_ext, start, stop):
        """
        Face values for cells start..stop-1 of an extended array.

        Parameters
        ----------
        v_ext : ndarray of shape (n_ext, M)
            Cell averages including ghost cells
        start, stop : int
            Range of rows of v_ext to reconstruct. Requires
            start >= halfwidth and stop <= n_ext - halfwidth.

        Returns
        -------
        v_minus : ndarray of shape (stop - start, M)
            Value at the left face of each cell
        v_plus : ndarray of shape (stop - start, M)
            Value at the right face of each cell
        """
        k = self.order
        hw = k - 1
        if start < hw or stop > v_ext.shape[0] - hw:
            raise ConfigurationError(
                f"ENO order {k} needs {hw} cells around rows {start}..{stop - 1}, "
                f"array has {v_ext.shape[0]} rows")

        local = v_ext[start - hw:stop + hw]
        n = stop - start
        m = local.shape[1]
        cells = np.arange(hw, hw + n)
        cols = np.arange(m)[None, :]

        # Leftmost cell of the growing stencil, per cell and variable
        left = np.repeat(cells[:, None], m, axis=1)
        for level in range(1, k):
            diffs = np.diff(local, n=level, axis=0)
            d_left = np.abs(diffs[left - 1, cols])
            d_right = np.abs(diffs[left, cols])
            left = np.where(d_left < d_right, left - 1, left)

        r = cells[:, None] - left
        stencil = local[left[..., None] + np.arange(k), cols[..., None]]
        v_plus = np.sum(self.coefficients[r + 1] * stencil, axis=-1)
        v_minus = np.sum(self.coefficients[r] * stencil, axis=-1)
        return v_minus, v_plus

    def __repr__(self):
        return f"ENOReconstruction(order={self.order})"
