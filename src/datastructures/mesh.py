"""Mesh descriptor and element geometry consumed by the spectral operators."""

from dataclasses import dataclass
from typing import Hashable, Tuple

import numpy as np
import pandas as pd

from spectral.basis import Basis, Quadrature, check_number_of_points
from spectral.spectral import collocation_points


def _as_tuple(value, dim, kind):
    if isinstance(value, (list, tuple)):
        value = tuple(value)
        if len(value) != dim:
            raise ValueError(f"Mesh has {dim} dimensions but {len(value)} {kind} values were given")
        return value
    return (value,) * dim


@dataclass(frozen=True)
class Mesh:
    """Discretization of a (tensor-product) element.

    Parameters
    ----------
    extents : int or tuple of int
        Number of collocation points per dimension.
    basis : Basis or tuple of Basis
        Basis family per dimension. A single value applies to all dimensions.
    quadrature : Quadrature or tuple of Quadrature
        Quadrature rule per dimension. A single value applies to all dimensions.

    Raises
    ------
    ValueError
        If a point count lies outside the supported range of its
        basis/quadrature, or the per-dimension tuples disagree in length.
    NotImplementedError
        If a basis/quadrature combination has no implementation.
    """

    extents: Tuple[int, ...]
    basis: Tuple[Basis, ...] = Basis.Legendre
    quadrature: Tuple[Quadrature, ...] = Quadrature.GaussLobatto

    def __post_init__(self):
        extents = tuple(int(n) for n in np.atleast_1d(self.extents))
        if len(extents) == 0:
            raise ValueError("Mesh needs at least one dimension")
        dim = len(extents)
        basis = _as_tuple(self.basis, dim, "basis")
        quadrature = _as_tuple(self.quadrature, dim, "quadrature")
        for n, b, q in zip(extents, basis, quadrature):
            check_number_of_points(Basis(b), Quadrature(q), n)
        object.__setattr__(self, "extents", extents)
        object.__setattr__(self, "basis", tuple(Basis(b) for b in basis))
        object.__setattr__(self, "quadrature", tuple(Quadrature(q) for q in quadrature))

    @property
    def dim(self) -> int:
        return len(self.extents)

    @property
    def number_of_grid_points(self) -> int:
        return int(np.prod(self.extents))

    def slice_through(self, d) -> "Mesh":
        """One-dimensional mesh of dimension `d`."""
        return Mesh(self.extents[d], self.basis[d], self.quadrature[d])

    def slices(self):
        return tuple(self.slice_through(d) for d in range(self.dim))

    def to_dataframe(self) -> pd.DataFrame:
        """One row per dimension with extents, basis and quadrature."""
        return pd.DataFrame(
            {
                "dimension": range(self.dim),
                "extents": self.extents,
                "basis": [b.value for b in self.basis],
                "quadrature": [q.value for q in self.quadrature],
            }
        )


@dataclass(frozen=True)
class Element:
    """Axis-aligned element with an affine map from the logical cube [-1, 1]^dim.

    Parameters
    ----------
    element_id : hashable
        Identifier of the element.
    lower, upper : tuple of float
        Corners of the element in inertial coordinates.
    mesh : Mesh
        Discretization of the element. Field data on the element is stored
        flattened in C order of ``mesh.extents`` (last dimension fastest).
    """

    element_id: Hashable
    lower: Tuple[float, ...]
    upper: Tuple[float, ...]
    mesh: Mesh

    def __post_init__(self):
        lower = tuple(float(v) for v in np.atleast_1d(self.lower))
        upper = tuple(float(v) for v in np.atleast_1d(self.upper))
        if len(lower) != self.mesh.dim or len(upper) != self.mesh.dim:
            raise ValueError(
                f"Element {self.element_id!r} bounds must have {self.mesh.dim} entries, "
                f"got {len(lower)} and {len(upper)}"
            )
        if any(lo >= hi for lo, hi in zip(lower, upper)):
            raise ValueError(f"Element {self.element_id!r} expects lower < upper, got {lower}, {upper}")
        object.__setattr__(self, "lower", lower)
        object.__setattr__(self, "upper", upper)

    @property
    def dim(self) -> int:
        return self.mesh.dim

    def contains(self, points, tol=1e-12):
        """Boolean mask of the points (shape (m, dim)) lying inside the element."""
        points = np.atleast_2d(np.asarray(points, dtype=np.float64))
        lower, upper = np.array(self.lower), np.array(self.upper)
        scale = tol * np.maximum(1.0, np.maximum(np.abs(lower), np.abs(upper)))
        return np.all((points >= lower - scale) & (points <= upper + scale), axis=1)

    def to_logical(self, points):
        """Map inertial points (shape (m, dim)) to logical coordinates in [-1, 1]^dim."""
        points = np.atleast_2d(np.asarray(points, dtype=np.float64))
        lower, upper = np.array(self.lower), np.array(self.upper)
        return np.clip(2.0 * (points - lower) / (upper - lower) - 1.0, -1.0, 1.0)

    def inertial_coordinates(self):
        """Inertial coordinates of the element grid points, shape (n, dim), C order."""
        axes = [
            lo + 0.5 * (hi - lo) * (collocation_points(m) + 1.0)
            for lo, hi, m in zip(self.lower, self.upper, self.mesh.slices())
        ]
        grids = np.meshgrid(*axes, indexing="ij")
        return np.stack([g.ravel() for g in grids], axis=1)
