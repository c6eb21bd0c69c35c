"""
1D Finite Volume Conservation Laws

Semi-discretization of hyperbolic conservation laws u_t + f(u)_x = 0 on
uniform 1D meshes with Lax-Friedrichs and TeCNO entropy-stable fluxes,
CFL step size control and a space-time solution wrapper.

Example Usage
-------------
>>> import numpy as np
>>> from conservation_laws_1d import (
...     Uniform1DMesh, Periodic, linear_advection, LaxFriedrichsScheme,
...     SemiDiscretization, CFLController, march)
>>>
>>> mesh = Uniform1DMesh(100, (0.0, 1.0), Periodic(), Periodic())
>>> flux = linear_advection(1.0)
>>> rhs = SemiDiscretization(mesh, flux, LaxFriedrichsScheme())
>>> u0 = rhs.initial_state(lambda x: np.sin(4 * np.pi * x))
>>> solution = march(rhs, u0, 1.0, controller=CFLController(mesh, flux, cfl=0.5))
>>> value = solution.value_at(0.3, 1.0)
"""

from .boundary_conditions import BoundaryCondition, Periodic, ZeroFlux, Dirichlet
from .cfl import CFLController, max_wave_speed
from .errors import (
    ConservationLawError, ConfigurationError, NumericalFailure, BoundaryQueryError,
)
from .flux import (
    FluxSpecification, linear_advection, advection_ec_flux, burgers, burgers_ec_flux,
    euler, euler_primitive_to_conservative, euler_conservative_to_primitive,
)
from .integrators import march, ssprk22_step, ssprk33_step, rk4_step
from .mesh import Uniform1DMesh
from .quadrature import num_integrate
from .reconstruction import ENOReconstruction
from .schemes import Scheme, LaxFriedrichsScheme, TecnoScheme, make_scheme
from .semidiscretization import SemiDiscretization
from .solution import FVSolution

__version__ = "1.0.0"
__all__ = [
    "BoundaryCondition", "Periodic", "ZeroFlux", "Dirichlet",
    "CFLController", "max_wave_speed",
    "ConservationLawError", "ConfigurationError", "NumericalFailure", "BoundaryQueryError",
    "FluxSpecification", "linear_advection", "advection_ec_flux", "burgers",
    "burgers_ec_flux", "euler", "euler_primitive_to_conservative",
    "euler_conservative_to_primitive",
    "march", "ssprk22_step", "ssprk33_step", "rk4_step",
    "Uniform1DMesh", "num_integrate", "ENOReconstruction",
    "Scheme", "LaxFriedrichsScheme", "TecnoScheme", "make_scheme",
    "SemiDiscretization", "FVSolution",
]
