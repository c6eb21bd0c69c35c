"""Pytest configuration and fixtures for the finite volume tests."""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from conservation_laws_1d import (
    Uniform1DMesh,
    Periodic,
    ZeroFlux,
    linear_advection,
    burgers,
)


@pytest.fixture
def rng():
    """Seeded random generator."""
    return np.random.default_rng(1234)


@pytest.fixture
def periodic_mesh():
    """Periodic 4-cell mesh on [0, 1]."""
    return Uniform1DMesh(4, (0.0, 1.0), Periodic(), Periodic())


@pytest.fixture
def zero_flux_mesh():
    """Zero-gradient 4-cell mesh on [0, 1]."""
    return Uniform1DMesh(4, (0.0, 1.0), ZeroFlux(), ZeroFlux())


@pytest.fixture
def advection():
    """Linear advection with unit speed."""
    return linear_advection(1.0)


@pytest.fixture
def burgers_flux():
    """Inviscid Burgers flux."""
    return burgers()

