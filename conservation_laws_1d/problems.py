"""
Test problems with known solutions.

Each problem bundles a flux specification, an entropy-conservative flux
(where one is available), an initial condition and boundary conditions.
"""

import numpy as np

from .boundary_conditions import Periodic, ZeroFlux
from .flux import (
    linear_advection, advection_ec_flux, burgers, burgers_ec_flux, euler,
    euler_primitive_to_conservative,
)


class Problem:
    """
    A conservation law with initial and boundary data.

    Parameters
    ----------
    name : str
    flux : FluxSpecification
    u0 : callable
        Initial condition u0(x)
    x_range : tuple
    boundaries : tuple of BoundaryCondition
        (left, right)
    ec_flux : callable, optional
        Entropy-conservative flux for TeCNO
    exact : callable, optional
        Exact solution exact(x, t)
    labels : list of str, optional
        Variable names for plotting
    t_end : float
        Default final time
    """

    def __init__(self, name, flux, u0, x_range=(0.0, 1.0), boundaries=None,
                 ec_flux=None, exact=None, labels=None, t_end=1.0):
        self.name = name
        self.flux = flux
        self.u0 = u0
        self.x_range = x_range
        self.boundaries = boundaries or (Periodic(), Periodic())
        self.ec_flux = ec_flux
        self.exact = exact
        self.labels = labels
        self.t_end = t_end


def advection_problem(a=1.0, k=4):
    """
    Periodic linear advection of sin(k π x) on [0, 1].

    The exact solution is the initial profile translated by a*t.
    """
    def u0(x):
        return np.sin(k * np.pi * x)

    def exact(x, t):
        return np.sin(k * np.pi * np.mod(x - a * t, 1.0))

    return Problem('advection', linear_advection(a), u0, (0.0, 1.0),
                   (Periodic(), Periodic()), advection_ec_flux(a), exact, ['u'], t_end=1.0)


def burgers_problem():
    """
    Periodic Burgers equation from a smooth sine wave on [0, 2π].

    Steepens into a shock at t = 1; no closed form exact solution is
    provided.
    """
    def u0(x):
        return np.sin(x)

    return Problem('burgers', burgers(), u0, (0.0, 2 * np.pi),
                   (Periodic(), Periodic()), burgers_ec_flux, None, ['u'], t_end=0.5)


def sod_problem(gamma=1.4, x_discontinuity=0.5):
    """
    Standard Sod shock tube with zero-gradient boundaries.

    Left state (x < x_d):  ρ=1.0, u=0.0, p=1.0
    Right state (x >= x_d): ρ=0.125, u=0.0, p=0.1
    """
    def u0(x):
        if x < x_discontinuity:
            return euler_primitive_to_conservative(1.0, 0.0, 1.0, gamma)
        return euler_primitive_to_conservative(0.125, 0.0, 0.1, gamma)

    return Problem('sod', euler(gamma), u0, (0.0, 1.0), (ZeroFlux(), ZeroFlux()),
                   None, None, ['Density (ρ)', 'Momentum (ρu)', 'Energy (ρE)'], t_end=0.2)


PROBLEMS = {
    'advection': advection_problem,
    'burgers': burgers_problem,
    'sod': sod_problem,
}
