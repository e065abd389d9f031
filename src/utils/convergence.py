"""Convergence of spectral differentiation and interpolation with the number of points."""

import numpy as np
import pandas as pd

from spectral.basis import maximum_number_of_points, minimum_number_of_points
from spectral.spectral import (
    collocation_points_for_basis,
    differentiation_matrix_for_basis,
    interpolation_matrix_for_basis,
)


def convergence_table(basis, quadrature, func, dfunc, target_points, num_points=None):
    """Maximum errors of differentiating and interpolating `func` versus number of points.

    Parameters
    ----------
    basis : Basis
    quadrature : Quadrature
    func, dfunc : callable
        Test function and its exact derivative, vectorized over numpy arrays.
    target_points : array_like
        Points on [-1, 1] where the interpolation error is measured.
    num_points : iterable of int, optional
        Point counts to sample. Default is the whole supported range.

    Returns
    -------
    pd.DataFrame
        Long-format DataFrame with columns ``n``, ``quantity``
        ('differentiation' or 'interpolation') and ``error``.
    """
    if num_points is None:
        num_points = range(
            minimum_number_of_points(basis, quadrature), maximum_number_of_points(basis) + 1
        )
    target_points = np.asarray(target_points, dtype=np.float64)
    exact_at_targets = func(target_points)

    rows = []
    for n in num_points:
        x = collocation_points_for_basis(basis, quadrature, n)
        f = func(x)
        D = differentiation_matrix_for_basis(basis, quadrature, n)
        I = interpolation_matrix_for_basis(basis, quadrature, n, target_points)
        rows.append({"n": n, "quantity": "differentiation", "error": np.max(np.abs(D @ f - dfunc(x)))})
        rows.append({"n": n, "quantity": "interpolation", "error": np.max(np.abs(I @ f - exact_at_targets))})

    df = pd.DataFrame(rows)
    df["basis"] = basis.value
    df["quadrature"] = quadrature.value
    return df
