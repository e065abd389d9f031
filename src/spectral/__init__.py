"""Spectral collocation operators for element-wise PDE discretizations."""

from .basis import (
    Basis,
    Quadrature,
    SUPPORTED_COMBINATIONS,
    compute_basis_function_normalization_square,
    compute_basis_function_value,
    compute_collocation_points_and_weights,
    maximum_number_of_points,
    minimum_number_of_points,
)
from .static_cache import StaticCache
from .spectral import (
    ChebyshevLobattoBasis,
    LegendreGaussBasis,
    LegendreLobattoBasis,
    barycentric_weights_for_basis,
    clear_spectral_caches,
    collocation_points,
    collocation_points_for_basis,
    differentiation_matrix,
    differentiation_matrix_for_basis,
    grid_points_to_spectral_matrix,
    grid_points_to_spectral_matrix_for_basis,
    interpolation_matrix,
    interpolation_matrix_for_basis,
    linear_filter_matrix,
    linear_filter_matrix_for_basis,
    quadrature_weights,
    quadrature_weights_for_basis,
    spectral_to_grid_points_matrix,
    spectral_to_grid_points_matrix_for_basis,
)
from .polynomial import integrate, lagrange_polynomial, spectral_interpolate

__all__ = [
    # Basis and quadrature tags
    "Basis",
    "Quadrature",
    "SUPPORTED_COMBINATIONS",
    "minimum_number_of_points",
    "maximum_number_of_points",
    # Basis quantities
    "compute_collocation_points_and_weights",
    "compute_basis_function_value",
    "compute_basis_function_normalization_square",
    # Caching
    "StaticCache",
    "clear_spectral_caches",
    # Operators (explicit basis)
    "collocation_points_for_basis",
    "quadrature_weights_for_basis",
    "barycentric_weights_for_basis",
    "differentiation_matrix_for_basis",
    "spectral_to_grid_points_matrix_for_basis",
    "grid_points_to_spectral_matrix_for_basis",
    "linear_filter_matrix_for_basis",
    "interpolation_matrix_for_basis",
    # Operators (mesh)
    "collocation_points",
    "quadrature_weights",
    "differentiation_matrix",
    "spectral_to_grid_points_matrix",
    "grid_points_to_spectral_matrix",
    "linear_filter_matrix",
    "interpolation_matrix",
    # Bases on a physical interval
    "LegendreLobattoBasis",
    "LegendreGaussBasis",
    "ChebyshevLobattoBasis",
    # Polynomial helpers
    "lagrange_polynomial",
    "spectral_interpolate",
    "integrate",
]
