"""
Exceptions raised by the finite volume discretization.

Configuration problems are detected when objects are built, numerical
failures while a right-hand side is being evaluated. Both propagate to
the caller unchanged.
"""


class ConservationLawError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(ConservationLawError, ValueError):
    """
    Malformed construction parameters.

    Raised for meshes with fewer than one cell or an empty domain,
    inconsistent boundary pairs, unknown scheme names, scheme stencils
    wider than the mesh and invalid controller settings.
    """


class NumericalFailure(ConservationLawError, ArithmeticError):
    """
    Fatal failure during a right-hand side evaluation.

    Raised when the flux Jacobian cannot be diagonalized with real
    eigenvalues or when NaN/Inf values appear in the state or in the
    computed fluxes.
    """


class BoundaryQueryError(ConservationLawError, LookupError):
    """Solution queried at a time outside the recorded trajectory."""
