"""Interpolation from the grid of an element to arbitrary points inside it."""

import numpy as np

from spectral.spectral import interpolation_matrix


class IrregularInterpolant:
    """Tensor-product barycentric interpolation to a set of logical points.

    Parameters
    ----------
    mesh : Mesh
        Source mesh. Data is flattened in C order of ``mesh.extents``.
    logical_points : array_like
        Target points in logical coordinates [-1, 1]^dim, shape (m, dim).
    """

    def __init__(self, mesh, logical_points):
        logical_points = np.asarray(logical_points, dtype=np.float64)
        if logical_points.ndim == 1 and mesh.dim == 1:
            logical_points = logical_points[:, None]
        if logical_points.ndim != 2 or logical_points.shape[1] != mesh.dim:
            raise ValueError(
                f"Logical points must have shape (m, {mesh.dim}), got {logical_points.shape}"
            )
        self.mesh = mesh
        self.number_of_target_points = logical_points.shape[0]

        # Row k is the Kronecker product of the 1D rows of target k
        matrix = np.ones((self.number_of_target_points, 1))
        for d, mesh_1d in enumerate(mesh.slices()):
            rows = interpolation_matrix(mesh_1d, logical_points[:, d])
            matrix = (matrix[:, :, None] * rows[:, None, :]).reshape(self.number_of_target_points, -1)
        self.matrix = matrix

    def interpolate(self, vars):
        """Interpolate a single array or a dict of named arrays of grid-point values."""
        if isinstance(vars, dict):
            return {name: self.interpolate(values) for name, values in vars.items()}
        values = np.asarray(vars, dtype=np.float64)
        if values.shape[0] != self.mesh.number_of_grid_points:
            raise ValueError(
                f"Expected {self.mesh.number_of_grid_points} grid-point values, got {values.shape[0]}"
            )
        return self.matrix @ values
