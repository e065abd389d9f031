"""Polynomial interpolation helpers built on the spectral operators."""

import numpy as np

from .basis import Basis
from .spectral import grid_points_to_spectral_matrix, interpolation_matrix, quadrature_weights


def lagrange_polynomial(index, x, control_points):
    """Evaluate the Lagrange cardinal polynomial l_index at `x`.

    l_index is the polynomial of degree len(control_points) - 1 that is one at
    ``control_points[index]`` and zero at every other control point.

    Parameters
    ----------
    index : int
        Index of the control point where the polynomial equals one.
    x : float or np.ndarray
        Evaluation point(s).
    control_points : array_like
        Distinct control points.
    """
    control_points = np.asarray(control_points, dtype=np.float64)
    if not 0 <= index < control_points.shape[0]:
        raise ValueError(f"Index {index} out of range for {control_points.shape[0]} control points")
    x = np.asarray(x, dtype=np.float64)
    x_index = control_points[index]
    result = np.ones_like(x)
    for j, x_j in enumerate(control_points):
        if j != index:
            result = result * (x - x_j) / (x_index - x_j)
    return result


def spectral_interpolate(mesh, values, target_points):
    """Interpolate grid-point values on a 1D mesh to target points on [-1, 1]."""
    values = np.asarray(values, dtype=np.float64)
    if values.shape[0] != mesh.number_of_grid_points:
        raise ValueError(
            f"Expected {mesh.number_of_grid_points} values on the mesh, got {values.shape[0]}"
        )
    return interpolation_matrix(mesh, target_points) @ values


def integrate(mesh, values):
    """Integral over the reference interval [-1, 1] of grid-point values on a 1D mesh.

    Legendre meshes use the quadrature weights directly. The Chebyshev weights
    carry the weight function 1/sqrt(1 - x^2), so on Chebyshev meshes the
    interpolating polynomial is integrated through its spectral coefficients,
    using that the integral of T_k is 2 / (1 - k^2) for even k and 0 for odd k.
    """
    values = np.asarray(values, dtype=np.float64)
    if values.shape[0] != mesh.number_of_grid_points:
        raise ValueError(
            f"Expected {mesh.number_of_grid_points} values on the mesh, got {values.shape[0]}"
        )
    if mesh.basis[0] == Basis.Legendre:
        return float(np.dot(quadrature_weights(mesh), values))

    coefficients = grid_points_to_spectral_matrix(mesh) @ values
    k = np.arange(coefficients.shape[0])
    integrals = np.zeros(k.shape[0])
    even = k % 2 == 0
    integrals[even] = 2.0 / (1.0 - k[even] ** 2)
    return float(np.dot(integrals, coefficients))
