"""
Numerical flux schemes for 1D conservation laws.

Implements:
- Lax-Friedrichs flux (global viscosity) and its local variant (Rusanov)
- TeCNO entropy-stable flux of order 2-5 (Fjordholm, Mishra, Tadmor,
  "Arbitrarily high-order accurate entropy stable essentially
  nonoscillatory schemes for systems of conservation laws", SIAM J.
  Numer. Anal. 50(2), 2012)

Every scheme returns N+1 edge fluxes for a mesh of N cells. Edge j is
node j of the mesh: the interface between cell j-1 and cell j. Ghost
values are always obtained from the mesh, never by indexing the state.
"""

import numpy as np

from .errors import ConfigurationError
from .parallel import parallel_for
from .reconstruction import ENOReconstruction


class Scheme:
    """Base class for numerical flux schemes."""

    name = 'scheme'

    @property
    def stencil_width(self):
        """Ghost cells required on each side of the mesh."""
        raise NotImplementedError

    def compute_edge_fluxes(self, u, mesh, flux, dt=None, threads=1):
        """
        Compute the numerical flux at every node.

        Parameters
        ----------
        u : ndarray of shape (N, M)
            Cell averages
        mesh : Uniform1DMesh
            Mesh providing boundary-resolved cell values
        flux : FluxSpecification
            Physical flux
        dt : float, optional
            Current step size (unused by the schemes in this module)
        threads : int
            Worker threads for the per-node loops

        Returns
        -------
        F : ndarray of shape (N+1, M)
            Numerical flux at each node
        """
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}()"


class LaxFriedrichsScheme(Scheme):
    """
    Lax-Friedrichs flux.

    F = 0.5 * [f(u_L) + f(u_R)] - 0.5 * alpha * (u_R - u_L)

    With ``local=False`` alpha is the largest spectral radius of Df over
    the whole mesh (including ghost cells); with ``local=True`` it is
    taken per edge from the two adjacent states (Rusanov flux).

    Simple and robust, but diffusive. Only first order accurate.

    Parameters
    ----------
    local : bool
        Use per-edge instead of global viscosity
    """

    def __init__(self, local=False):
        self.local = local
        self.name = 'llf' if local else 'lf'

    @property
    def stencil_width(self):
        return 1

    def compute_edge_fluxes(self, u, mesh, flux, dt=None, threads=1):
        n_nodes = mesh.nnodes
        u_ext = mesh.extended_state(u, 1)
        m = u_ext.shape[1]

        # Spectral radius in every (ghost and interior) cell
        rho = np.empty(u_ext.shape[0])

        def radius_kernel(start, stop):
            rho[start:stop] = flux.spectral_radius(u_ext[start:stop])

        parallel_for(radius_kernel, u_ext.shape[0], threads)
        alpha_global = np.max(rho)

        F = np.empty((n_nodes, m))

        def flux_kernel(start, stop):
            # Node j separates u_ext[j] (cell j-1) and u_ext[j+1] (cell j)
            U_L = u_ext[start:stop]
            U_R = u_ext[start + 1:stop + 1]
            if self.local:
                alpha = np.maximum(rho[start:stop], rho[start + 1:stop + 1])[:, None]
            else:
                alpha = alpha_global
            F[start:stop] = (0.5 * (flux.evaluate(U_L) + flux.evaluate(U_R))
                             - 0.5 * alpha * (U_R - U_L))

        parallel_for(flux_kernel, n_nodes, threads)
        return F

    def __repr__(self):
        return f"LaxFriedrichsScheme(local={self.local})"


class TecnoScheme(Scheme):
    """
    TeCNO entropy-stable flux.

    F_j = ff_j - dd_j

    ff_j is a high-order combination of a two-point entropy-conservative
    flux, dd_j = 0.5 * R_j |Λ_j| R_j^{-1} [[v]]_j is upwind dissipation
    acting on the jump of ENO-reconstructed entropy variables, with R_j,
    Λ_j the eigensystem of Df at the average of the states adjacent to
    node j.

    Parameters
    ----------
    ec_flux : callable
        Entropy-conservative flux ec_flux(u_L, u_R) acting on the
        trailing axis of arrays of shape (..., M)
    order : int
        Formal order, one of 2, 3, 4, 5
    ve : callable, optional
        Map from conserved to entropy variables (identity by default),
        acting on the trailing axis
    """

    EC_WEIGHTS = {
        2: ((1.0, ((1, 0),)),),
        3: ((4.0 / 3.0, ((1, 0),)),
            (-1.0 / 6.0, ((2, 0), (1, 1)))),
        5: ((3.0 / 2.0, ((1, 0),)),
            (-3.0 / 10.0, ((2, 0), (1, 1))),
            (1.0 / 30.0, ((3, 0), (2, 1), (1, 2)))),
    }
    EC_WEIGHTS[4] = EC_WEIGHTS[3]

    def __init__(self, ec_flux, order=2, ve=None):
        if order not in (2, 3, 4, 5):
            raise ConfigurationError(f"TeCNO order must be 2, 3, 4 or 5, got {order}")
        if not callable(ec_flux):
            raise ConfigurationError("ec_flux must be callable")
        self.ec_flux = ec_flux
        self.order = order
        self.ve = ve
        self.reconstruction = ENOReconstruction(order)
        self.name = f'tecno{order}'

    @property
    def stencil_width(self):
        # Ghost cells -1 and N are reconstructed too
        return self.order

    def entropy_variables(self, u):
        if self.ve is None:
            return u
        return np.asarray(self.ve(u), dtype=float)

    def compute_edge_fluxes(self, u, mesh, flux, dt=None, threads=1):
        g = self.stencil_width
        n_nodes = mesh.nnodes
        u_ext = mesh.extended_state(u, g)
        v_ext = self.entropy_variables(u_ext)
        m = u_ext.shape[1]

        F = np.empty((n_nodes, m))
        jumps = np.empty((n_nodes, m))
        lam = np.empty((n_nodes, m))
        R = np.empty((n_nodes, m, m))

        def eigen_kernel(start, stop):
            # Node j separates ext rows g+j-1 and g+j
            U_L = u_ext[g + start - 1:g + stop - 1]
            U_R = u_ext[g + start:g + stop]
            lam[start:stop], R[start:stop] = flux.eigen(0.5 * (U_L + U_R))

            # Cells start-1 .. stop-1 cover the faces of nodes start..stop-1
            v_minus, v_plus = self.reconstruction.reconstruct(v_ext, g + start - 1, g + stop)
            jumps[start:stop] = v_minus[1:] - v_plus[:-1]

        parallel_for(eigen_kernel, n_nodes, threads)

        if mesh.is_periodic:
            # The seam is a single interface seen from both ends
            jumps[-1] = jumps[0]

        def flux_kernel(start, stop):
            R_j = R[start:stop]
            if m == 1:
                w = jumps[start:stop]
                dd = 0.5 * R_j[..., 0] * np.abs(lam[start:stop]) * w
            else:
                w = np.linalg.solve(R_j, jumps[start:stop][..., None])[..., 0]
                dd = 0.5 * np.einsum('nij,nj->ni', R_j, np.abs(lam[start:stop]) * w)

            ff = np.zeros((stop - start, m))
            for weight, pairs in self.EC_WEIGHTS[self.order]:
                for left, right in pairs:
                    # left cells to the left of node j, right cells to its right
                    U_L = u_ext[g + start - left:g + stop - left]
                    U_R = u_ext[g + start + right:g + stop + right]
                    ff += weight * np.asarray(self.ec_flux(U_L, U_R), dtype=float)
            F[start:stop] = ff - dd

        parallel_for(flux_kernel, n_nodes, threads)
        return F

    def __repr__(self):
        return f"TecnoScheme(order={self.order})"


SCHEME_NAMES = ('lf', 'llf', 'tecno')


def make_scheme(name, order=2, ec_flux=None, ve=None):
    """
    Build a scheme from its short name.

    Parameters
    ----------
    name : str
        'lf' (alias 'lax_friedrichs'), 'llf' (alias 'rusanov') or 'tecno'
    order : int
        TeCNO order
    ec_flux : callable
        Entropy-conservative flux, required for 'tecno'
    ve : callable, optional
        Entropy variables for 'tecno'

    Returns
    -------
    scheme : Scheme
    """
    key = name.lower()
    if key in ('lf', 'lax_friedrichs', 'glf'):
        return LaxFriedrichsScheme(local=False)
    if key in ('llf', 'rusanov'):
        return LaxFriedrichsScheme(local=True)
    if key == 'tecno':
        if ec_flux is None:
            raise ConfigurationError("TeCNO scheme needs an entropy-conservative flux")
        return TecnoScheme(ec_flux, order=order, ve=ve)
    raise ConfigurationError(f"Unknown flux scheme: {name}")
