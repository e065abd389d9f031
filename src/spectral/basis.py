"""Basis- and quadrature-specific spectral quantities.

Pure functions computing, for a (basis, quadrature, number of points) triple,
the collocation points and quadrature weights on the reference interval
[-1, 1], the values of the basis functions and their normalization.

Supported combinations:
- Legendre  x {Gauss, GaussLobatto}
- Chebyshev x {Gauss, GaussLobatto}
"""

from enum import Enum

import numpy as np
from scipy.special import eval_chebyt, eval_legendre


class Basis(Enum):
    """Family of basis functions on the reference interval."""

    Legendre = "Legendre"
    Chebyshev = "Chebyshev"


class Quadrature(Enum):
    """Placement rule for the collocation points."""

    Gauss = "Gauss"
    GaussLobatto = "GaussLobatto"


SUPPORTED_COMBINATIONS = (
    (Basis.Legendre, Quadrature.Gauss),
    (Basis.Legendre, Quadrature.GaussLobatto),
    (Basis.Chebyshev, Quadrature.Gauss),
    (Basis.Chebyshev, Quadrature.GaussLobatto),
)

_MAXIMUM_NUMBER_OF_POINTS = {
    Basis.Legendre: 12,
    Basis.Chebyshev: 12,
}

_MINIMUM_NUMBER_OF_POINTS = {
    Quadrature.Gauss: 1,
    Quadrature.GaussLobatto: 2,
}

# Newton iteration controls for the Legendre roots
_NEWTON_MAX_ITERATIONS = 100
_NEWTON_TOLERANCE = 4.0 * np.finfo(float).eps


def maximum_number_of_points(basis: Basis) -> int:
    """Largest number of collocation points supported for `basis`."""
    try:
        return _MAXIMUM_NUMBER_OF_POINTS[basis]
    except KeyError:
        raise NotImplementedError(f"Missing basis case for spectral quantity: {basis}") from None


def minimum_number_of_points(basis: Basis, quadrature: Quadrature) -> int:
    """Smallest number of collocation points supported for `basis` and `quadrature`."""
    check_basis_and_quadrature(basis, quadrature)
    return _MINIMUM_NUMBER_OF_POINTS[quadrature]


def check_basis_and_quadrature(basis, quadrature):
    """Raise NotImplementedError for a combination without an implementation."""
    if (basis, quadrature) not in SUPPORTED_COMBINATIONS:
        if basis not in _MAXIMUM_NUMBER_OF_POINTS:
            raise NotImplementedError(f"Missing basis case for spectral quantity: {basis}")
        raise NotImplementedError(
            f"Missing quadrature case for spectral quantity: {basis} with {quadrature}"
        )


def check_number_of_points(basis, quadrature, num_points):
    """Validate `num_points` against the supported range.

    Raises
    ------
    NotImplementedError
        If the basis/quadrature combination is not implemented.
    ValueError
        If `num_points` lies outside [minimum, maximum]. Values are never clamped.
    """
    min_points = minimum_number_of_points(basis, quadrature)
    max_points = maximum_number_of_points(basis)
    if num_points < min_points:
        raise ValueError(
            f"Tried to work with less than the minimum number of collocation points "
            f"for this quadrature: {num_points} < {min_points} ({basis.value}, {quadrature.value})"
        )
    if num_points > max_points:
        raise ValueError(
            f"Exceeded maximum number of collocation points: {num_points} > {max_points} "
            f"({basis.value}, {quadrature.value})"
        )


# =============================================================
# Legendre polynomial evaluation
# =============================================================


def _legendre_polynomial_and_derivative(degree, x):
    """Evaluate P_degree and its derivative with the three-term recurrence."""
    x = np.asarray(x, dtype=np.float64)
    if degree == 0:
        return np.ones_like(x), np.zeros_like(x)
    if degree == 1:
        return x.copy(), np.ones_like(x)

    L_prev2, L_prev1 = np.ones_like(x), x.copy()
    dL_prev2, dL_prev1 = np.zeros_like(x), np.ones_like(x)
    for k in range(2, degree + 1):
        L = ((2 * k - 1) * x * L_prev1 - (k - 1) * L_prev2) / k
        dL = dL_prev2 + (2 * k - 1) * L_prev1
        L_prev2, L_prev1 = L_prev1, L
        dL_prev2, dL_prev1 = dL_prev1, dL
    return L_prev1, dL_prev1


def _newton_polish(x, residual_and_slope):
    """Run Newton iterations on every entry of `x` until the update is negligible."""
    if x.size == 0:
        return x
    for _ in range(_NEWTON_MAX_ITERATIONS):
        f, df = residual_and_slope(x)
        delta = -f / df
        x = x + delta
        if np.max(np.abs(delta)) <= _NEWTON_TOLERANCE * max(np.max(np.abs(x)), 1.0):
            break
    return x


def _legendre_gauss(num_points):
    # Roots of P_n, initial guess from the Chebyshev-Gauss points
    j = np.arange(num_points)
    x = -np.cos((2 * j + 1) * np.pi / (2 * num_points))
    x = _newton_polish(x, lambda y: _legendre_polynomial_and_derivative(num_points, y))
    _, dL = _legendre_polynomial_and_derivative(num_points, x)
    weights = 2.0 / ((1.0 - x**2) * dL**2)
    return x, weights


def _legendre_gauss_lobatto(num_points):
    N = num_points - 1
    end_weight = 2.0 / (N * (N + 1))
    if N == 1:
        return np.array([-1.0, 1.0]), np.array([end_weight, end_weight])

    def derivative_and_second_derivative(y):
        # Interior Lobatto points are the roots of P_N'; P_N'' follows from the Legendre equation
        L, dL = _legendre_polynomial_and_derivative(N, y)
        return dL, (2.0 * y * dL - N * (N + 1) * L) / (1.0 - y**2)

    # Interior roots on the negative half, mirrored onto the positive half.
    # Chebyshev-Gauss-Lobatto points are the initial guess.
    j = np.arange(1, (N + 1) // 2)
    guess = -np.cos(j * np.pi / N)
    negative_half = _newton_polish(guess, derivative_and_second_derivative)
    middle = np.array([0.0]) if N % 2 == 0 else np.array([])
    x = np.concatenate(([-1.0], negative_half, middle, -negative_half[::-1], [1.0]))

    L, _ = _legendre_polynomial_and_derivative(N, x)
    weights = 2.0 / (N * (N + 1) * L**2)
    return x, weights


def _chebyshev_gauss(num_points):
    j = np.arange(num_points)
    # -cos((2j+1) pi / 2n), written as a sine so that the points are exactly antisymmetric
    x = np.sin(np.pi * (2 * j + 1 - num_points) / (2 * num_points))
    weights = np.full(num_points, np.pi / num_points)
    return x, weights


def _chebyshev_gauss_lobatto(num_points):
    N = num_points - 1
    j = np.arange(num_points)
    x = np.sin(np.pi * (2 * j - N) / (2 * N))
    x[0], x[-1] = -1.0, 1.0
    weights = np.full(num_points, np.pi / N)
    weights[0] *= 0.5
    weights[-1] *= 0.5
    return x, weights


_COLLOCATION_POINTS_AND_WEIGHTS = {
    (Basis.Legendre, Quadrature.Gauss): _legendre_gauss,
    (Basis.Legendre, Quadrature.GaussLobatto): _legendre_gauss_lobatto,
    (Basis.Chebyshev, Quadrature.Gauss): _chebyshev_gauss,
    (Basis.Chebyshev, Quadrature.GaussLobatto): _chebyshev_gauss_lobatto,
}


def compute_collocation_points_and_weights(basis, quadrature, num_points):
    """Compute the collocation points and integral weights of a basis and quadrature.

    Parameters
    ----------
    basis : Basis
        Basis family.
    quadrature : Quadrature
        Quadrature rule.
    num_points : int
        Number of collocation points.

    Returns
    -------
    points : np.ndarray
        Strictly increasing collocation points on [-1, 1], shape (num_points,).
    weights : np.ndarray
        Quadrature weights associated to the points, shape (num_points,).
    """
    check_number_of_points(basis, quadrature, num_points)
    points, weights = _COLLOCATION_POINTS_AND_WEIGHTS[(basis, quadrature)](num_points)
    return np.asarray(points, dtype=np.float64), np.asarray(weights, dtype=np.float64)


def compute_basis_function_value(basis, k, x):
    """Value of the zero-indexed basis function Phi_k at `x` (scalar or array)."""
    if basis == Basis.Legendre:
        return eval_legendre(k, x)
    if basis == Basis.Chebyshev:
        return eval_chebyt(k, x)
    raise NotImplementedError(f"Missing basis case for spectral quantity: {basis}")


def compute_basis_function_normalization_square(basis, k):
    """Definite integral of Phi_k squared (with the basis weight function)."""
    if basis == Basis.Legendre:
        return 2.0 / (2 * k + 1)
    if basis == Basis.Chebyshev:
        return np.pi if k == 0 else 0.5 * np.pi
    raise NotImplementedError(f"Missing basis case for spectral quantity: {basis}")
