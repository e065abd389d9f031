"""Spectral operators on the reference interval [-1, 1].

Collocation points, quadrature weights, barycentric weights, differentiation,
transform, filter and interpolation matrices for every supported
(basis, quadrature) pair. Everything except the interpolation matrix depends
only on (basis, quadrature, number of points) and is computed once per
process through a `StaticCache`; the returned arrays are read-only and shared
between all callers.

Each quantity is available in two forms:

- ``<quantity>_for_basis(basis, quadrature, num_points)``
- ``<quantity>(mesh)`` for a one-dimensional mesh descriptor, which selects
  the basis/quadrature implementation from the mesh tags.
"""

from functools import partial

import numpy as np
from numba import njit
from scipy import linalg

from .basis import (
    SUPPORTED_COMBINATIONS,
    Basis,
    Quadrature,
    check_basis_and_quadrature,
    check_number_of_points,
    compute_basis_function_normalization_square,
    compute_basis_function_value,
    compute_collocation_points_and_weights,
    maximum_number_of_points,
    minimum_number_of_points,
)
from .static_cache import StaticCache

ROUNDOFF_EPS = 100.0 * np.finfo(float).eps


# =============================================================
# Basis-agnostic kernels (Kopriva, "Implementing Spectral Methods
# for Partial Differential Equations", algorithms 30, 32 and 37)
# =============================================================


@njit(cache=True)
def _equal_within_roundoff(a, b, eps, scale):
    return abs(a - b) <= eps * max(scale, max(abs(a), abs(b)))


@njit(cache=True)
def _barycentric_weights(x):
    n = x.shape[0]
    bary_weights = np.ones(n)
    for j in range(1, n):
        for k in range(j):
            bary_weights[k] *= x[k] - x[j]
            bary_weights[j] *= x[j] - x[k]
    for j in range(n):
        bary_weights[j] = 1.0 / bary_weights[j]
    return bary_weights


@njit(cache=True)
def _differentiation_matrix(x, bary_weights):
    n = x.shape[0]
    diff_matrix = np.zeros((n, n))
    for i in range(n):
        diagonal = 0.0
        for j in range(n):
            if i != j:
                diff_matrix[i, j] = bary_weights[j] / (bary_weights[i] * (x[i] - x[j]))
                diagonal -= diff_matrix[i, j]
        # Negative row sum, so constants are annihilated exactly
        diff_matrix[i, i] = diagonal
    return diff_matrix


@njit(cache=True)
def _interpolation_matrix(x, bary_weights, target_points, eps):
    n = x.shape[0]
    m = target_points.shape[0]
    interp_matrix = np.zeros((m, n))
    for k in range(m):
        t = target_points[k]
        # No interpolation where a target coincides with a collocation point
        row_has_match = False
        for j in range(n):
            if _equal_within_roundoff(t, x[j], eps, 1.0):
                interp_matrix[k, j] = 1.0
                row_has_match = True
        if not row_has_match:
            row_sum = 0.0
            for j in range(n):
                interp_matrix[k, j] = bary_weights[j] / (t - x[j])
                row_sum += interp_matrix[k, j]
            for j in range(n):
                interp_matrix[k, j] /= row_sum
    return interp_matrix


# =============================================================
# Generators of the cached quantities
# =============================================================


def _generate_collocation_points_and_weights(basis, quadrature, num_points):
    return compute_collocation_points_and_weights(basis, quadrature, num_points)


def _generate_barycentric_weights(basis, quadrature, num_points):
    x = collocation_points_for_basis(basis, quadrature, num_points)
    return _barycentric_weights(x)


def _generate_differentiation_matrix(basis, quadrature, num_points):
    x = collocation_points_for_basis(basis, quadrature, num_points)
    bary_weights = barycentric_weights_for_basis(basis, quadrature, num_points)
    return _differentiation_matrix(x, bary_weights)


def _generate_spectral_to_grid_points_matrix(basis, quadrature, num_points):
    # Vandermonde matrix V[i, j] = Phi_j(x_i)
    x = collocation_points_for_basis(basis, quadrature, num_points)
    modes = np.arange(num_points)
    return np.asarray(compute_basis_function_value(basis, modes[None, :], x[:, None]), dtype=np.float64)


def _generate_grid_points_to_spectral_matrix(basis, quadrature, num_points):
    vandermonde = spectral_to_grid_points_matrix_for_basis(basis, quadrature, num_points)
    if quadrature == Quadrature.Gauss:
        # Gauss quadrature integrates the orthogonality relation exactly:
        # V^{-1}[i, j] = V[j, i] * w_j / gamma_i
        weights = quadrature_weights_for_basis(basis, quadrature, num_points)
        gamma = np.array(
            [compute_basis_function_normalization_square(basis, i) for i in range(num_points)]
        )
        return vandermonde.T * weights[None, :] / gamma[:, None]
    return linalg.inv(vandermonde)


def _generate_linear_filter_matrix(basis, quadrature, num_points):
    # V . diag(1, 1, 0, ...) . V^{-1}, restricted to the two retained modes
    num_modes = min(2, num_points)
    vandermonde = spectral_to_grid_points_matrix_for_basis(basis, quadrature, num_points)
    vandermonde_inverse = grid_points_to_spectral_matrix_for_basis(basis, quadrature, num_points)
    return vandermonde[:, :num_modes] @ vandermonde_inverse[:num_modes, :]


_GENERATORS = {
    "collocation_points_and_weights": _generate_collocation_points_and_weights,
    "barycentric_weights": _generate_barycentric_weights,
    "differentiation_matrix": _generate_differentiation_matrix,
    "spectral_to_grid_points_matrix": _generate_spectral_to_grid_points_matrix,
    "grid_points_to_spectral_matrix": _generate_grid_points_to_spectral_matrix,
    "linear_filter_matrix": _generate_linear_filter_matrix,
}


def _build_cache_table():
    """One cache per (basis, quadrature, quantity); contents are computed on first lookup."""
    table = {}
    for basis, quadrature in SUPPORTED_COMBINATIONS:
        min_points = minimum_number_of_points(basis, quadrature)
        max_points = maximum_number_of_points(basis)
        for quantity, generator in _GENERATORS.items():
            table[(basis, quadrature, quantity)] = StaticCache(
                partial(generator, basis, quadrature),
                min_points,
                max_points,
                name=f"{quantity} ({basis.value}, {quadrature.value})",
            )
    return table


SPECTRAL_CACHES = _build_cache_table()


def precomputed_spectral_quantity(basis, quadrature, quantity, num_points):
    """Look up a cached quantity, validating the basis, quadrature and number of points."""
    check_basis_and_quadrature(basis, quadrature)
    return SPECTRAL_CACHES[(basis, quadrature, quantity)](num_points)


def clear_spectral_caches():
    """Drop every cached quantity."""
    for cache in SPECTRAL_CACHES.values():
        cache.clear()


# =============================================================
# Public interface: explicit basis and quadrature
# =============================================================


def collocation_points_for_basis(basis, quadrature, num_points):
    """Collocation points on [-1, 1] (read-only, shared)."""
    return precomputed_spectral_quantity(basis, quadrature, "collocation_points_and_weights", num_points)[0]


def quadrature_weights_for_basis(basis, quadrature, num_points):
    """Quadrature weights of the collocation points (read-only, shared)."""
    return precomputed_spectral_quantity(basis, quadrature, "collocation_points_and_weights", num_points)[1]


def barycentric_weights_for_basis(basis, quadrature, num_points):
    return precomputed_spectral_quantity(basis, quadrature, "barycentric_weights", num_points)


def differentiation_matrix_for_basis(basis, quadrature, num_points):
    """Matrix mapping grid-point values to the values of their derivative."""
    return precomputed_spectral_quantity(basis, quadrature, "differentiation_matrix", num_points)


def spectral_to_grid_points_matrix_for_basis(basis, quadrature, num_points):
    """Vandermonde matrix mapping spectral coefficients to grid-point values."""
    return precomputed_spectral_quantity(basis, quadrature, "spectral_to_grid_points_matrix", num_points)


def grid_points_to_spectral_matrix_for_basis(basis, quadrature, num_points):
    """Inverse of the Vandermonde matrix: grid-point values to spectral coefficients."""
    return precomputed_spectral_quantity(basis, quadrature, "grid_points_to_spectral_matrix", num_points)


def linear_filter_matrix_for_basis(basis, quadrature, num_points):
    """Matrix keeping only the two lowest spectral modes of grid-point values."""
    return precomputed_spectral_quantity(basis, quadrature, "linear_filter_matrix", num_points)


def interpolation_matrix_for_basis(basis, quadrature, num_points, target_points):
    """Barycentric interpolation matrix from the collocation points to `target_points`.

    Not cached, since the targets vary between calls.

    Parameters
    ----------
    basis : Basis
    quadrature : Quadrature
    num_points : int
        Number of source collocation points.
    target_points : array_like
        One-dimensional sequence of target points on the reference interval.

    Returns
    -------
    np.ndarray
        Matrix of shape (len(target_points), num_points). Rows of targets that
        coincide with a collocation point (within roundoff) are unit vectors.
    """
    check_basis_and_quadrature(basis, quadrature)
    check_number_of_points(basis, quadrature, num_points)
    targets = np.atleast_1d(np.asarray(target_points, dtype=np.float64))
    if targets.ndim != 1:
        raise ValueError(f"Target points must be one-dimensional, got shape {targets.shape}")
    x = collocation_points_for_basis(basis, quadrature, num_points)
    bary_weights = barycentric_weights_for_basis(basis, quadrature, num_points)
    return _interpolation_matrix(x, bary_weights, np.ascontiguousarray(targets), ROUNDOFF_EPS)


# =============================================================
# Public interface: mesh descriptor
# =============================================================


def _spectral_quantity_for_mesh(function, mesh, *args):
    """Select the implementation matching the basis and quadrature of a 1D mesh."""
    if mesh.dim != 1:
        raise ValueError(f"Spectral quantities need a one-dimensional mesh, got dim={mesh.dim}")
    basis, quadrature, num_points = mesh.basis[0], mesh.quadrature[0], mesh.extents[0]
    check_basis_and_quadrature(basis, quadrature)
    return function(basis, quadrature, num_points, *args)


def collocation_points(mesh):
    return _spectral_quantity_for_mesh(collocation_points_for_basis, mesh)


def quadrature_weights(mesh):
    return _spectral_quantity_for_mesh(quadrature_weights_for_basis, mesh)


def differentiation_matrix(mesh):
    return _spectral_quantity_for_mesh(differentiation_matrix_for_basis, mesh)


def spectral_to_grid_points_matrix(mesh):
    return _spectral_quantity_for_mesh(spectral_to_grid_points_matrix_for_basis, mesh)


def grid_points_to_spectral_matrix(mesh):
    return _spectral_quantity_for_mesh(grid_points_to_spectral_matrix_for_basis, mesh)


def linear_filter_matrix(mesh):
    return _spectral_quantity_for_mesh(linear_filter_matrix_for_basis, mesh)


def interpolation_matrix(mesh, target_points):
    return _spectral_quantity_for_mesh(interpolation_matrix_for_basis, mesh, target_points)


# =============================================================
# Bases on a physical interval
# =============================================================


class _MappedBasis:
    """Collocation quantities affinely mapped from [-1, 1] onto `domain`.

    Parameters
    ----------
    domain : tuple of float, optional
        Physical interval (a, b). Default is (-1, 1).
    """

    basis = None
    quadrature = None

    def __init__(self, domain=(-1.0, 1.0)):
        a, b = float(domain[0]), float(domain[1])
        if not a < b:
            raise ValueError(f"Domain must satisfy a < b, got {domain}")
        self.domain = (a, b)
        self.jacobian = 0.5 * (b - a)

    def to_reference(self, x):
        return (np.asarray(x, dtype=np.float64) - self.domain[0]) / self.jacobian - 1.0

    def nodes(self, num_points):
        """Collocation points mapped onto the domain."""
        x = collocation_points_for_basis(self.basis, self.quadrature, num_points)
        return self.domain[0] + self.jacobian * (x + 1.0)

    def weights(self, num_points):
        return self.jacobian * quadrature_weights_for_basis(self.basis, self.quadrature, num_points)

    def diff_matrix(self, num_points):
        """Differentiation matrix with respect to the physical coordinate."""
        return differentiation_matrix_for_basis(self.basis, self.quadrature, num_points) / self.jacobian

    def interpolation_matrix(self, num_points, target_points):
        return interpolation_matrix_for_basis(
            self.basis, self.quadrature, num_points, self.to_reference(target_points)
        )

    def __repr__(self):
        return f"{type(self).__name__}(domain={self.domain})"


class LegendreLobattoBasis(_MappedBasis):
    """Legendre-Gauss-Lobatto collocation on a physical interval."""

    basis = Basis.Legendre
    quadrature = Quadrature.GaussLobatto


class LegendreGaussBasis(_MappedBasis):
    """Legendre-Gauss collocation on a physical interval."""

    basis = Basis.Legendre
    quadrature = Quadrature.Gauss


class ChebyshevLobattoBasis(_MappedBasis):
    """Chebyshev-Gauss-Lobatto collocation on a physical interval.

    The quadrature weights include the Chebyshev weight function
    1 / sqrt(1 - x^2).
    """

    basis = Basis.Chebyshev
    quadrature = Quadrature.GaussLobatto
