"""
conftest.py: Shared pytest fixtures for the spectral and interpolation test suite
"""

from fractions import Fraction

import numpy as np
import pytest

from spectral.basis import SUPPORTED_COMBINATIONS
from datastructures import Element, InterpolationTargetInfo, Mesh
from interpolation import LineSegment, make_interpolation_system


def cubic(x):
    """Test field of degree 3, exactly representable on 4 or more points."""
    return x**3 - 2.0 * x + 0.5


@pytest.fixture
def cubic_field():
    return cubic


@pytest.fixture(params=SUPPORTED_COMBINATIONS, ids=lambda c: f"{c[0].value}-{c[1].value}")
def basis_and_quadrature(request):
    return request.param


@pytest.fixture
def temporal_ids():
    """Temporal ids as fractions of a unit slab."""
    return [Fraction(0), Fraction(1, 3), Fraction(2, 3), Fraction(1)]


@pytest.fixture
def line_elements():
    """Two 1D Legendre-Gauss-Lobatto elements covering [0, 2]."""
    mesh = Mesh(5)
    return [
        Element("element-0", (0.0,), (1.0,), mesh),
        Element("element-1", (1.0,), (2.0,), mesh),
    ]


@pytest.fixture
def make_line_system(line_elements):
    """Factory for a system with line-segment targets on the 1D elements."""
    def _make(tags=("A", "B"), number_of_interpolators=1, number_of_points=7):
        infos = [
            InterpolationTargetInfo(
                tag,
                LineSegment((0.1 * i,), (2.0 - 0.1 * i,), number_of_points),
                ("u",),
            )
            for i, tag in enumerate(tags)
        ]
        return make_interpolation_system(infos, line_elements, number_of_interpolators)
    return _make


@pytest.fixture
def send_cubic_data(line_elements):
    """Send the cubic test field of every line element for the given temporal ids."""
    def _send(system, ids):
        for temporal_id in ids:
            for element in line_elements:
                x = element.inertial_coordinates()[:, 0]
                system.send_volume_data(temporal_id, element.element_id, {"u": cubic(x)})
    return _send


@pytest.fixture
def rng_factory():
    def _make(seed):
        return np.random.default_rng(seed)
    return _make
