"""Option holders computing the points of an interpolation target.

Each option holder validates its parameters on construction and exposes
``points()``, an array of shape (number_of_points, dim) in inertial
coordinates, and ``to_dataframe()``.
"""

from dataclasses import dataclass, asdict, field
from typing import Tuple

import numpy as np
import pandas as pd

from spectral.basis import Basis, Quadrature, maximum_number_of_points
from spectral.spectral import collocation_points_for_basis


@dataclass(frozen=True)
class LineSegment:
    """Equally spaced points on the segment from `begin` to `end` (both included).

    Parameters
    ----------
    begin, end : tuple of float
        End points of the segment.
    number_of_points : int
        Number of points, at least 2.
    """

    begin: Tuple[float, ...]
    end: Tuple[float, ...]
    number_of_points: int

    def __post_init__(self):
        begin = tuple(float(v) for v in np.atleast_1d(self.begin))
        end = tuple(float(v) for v in np.atleast_1d(self.end))
        if len(begin) != len(end):
            raise ValueError(f"LineSegment end points differ in dimension: {begin}, {end}")
        if self.number_of_points < 2:
            raise ValueError(f"LineSegment expects at least 2 points, got {self.number_of_points}")
        object.__setattr__(self, "begin", begin)
        object.__setattr__(self, "end", end)

    @property
    def dim(self):
        return len(self.begin)

    def points(self):
        fraction = np.linspace(0.0, 1.0, self.number_of_points)[:, None]
        begin, end = np.array(self.begin), np.array(self.end)
        return begin + fraction * (end - begin)

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame([asdict(self)])


@dataclass(frozen=True)
class WedgeSectionTorus:
    """Points on a section of a torus, symmetric about the z axis.

    The section spans radii in [min_radius, max_radius] and polar angles in
    [min_theta, max_theta], and the full azimuthal range. Radii and polar
    angles are uniformly spaced or placed at Legendre-Gauss-Lobatto points;
    azimuthal angles are uniform on [0, 2 pi). Points are ordered with the
    radius varying fastest, then theta, then phi.

    Parameters
    ----------
    min_radius, max_radius : float
        Radial extent, 0 <= min_radius < max_radius.
    min_theta, max_theta : float
        Polar extent, 0 <= min_theta < max_theta <= pi.
    number_of_radial_points, number_of_theta_points : int
        At least 2. Non-uniform grids are limited to the maximum number of
        Legendre collocation points.
    number_of_phi_points : int
        At least 1.
    use_uniform_radial_grid, use_uniform_theta_grid : bool, optional
        Uniform spacing instead of Legendre-Gauss-Lobatto points. Default is False.
    """

    min_radius: float
    max_radius: float
    min_theta: float
    max_theta: float
    number_of_radial_points: int
    number_of_theta_points: int
    number_of_phi_points: int
    use_uniform_radial_grid: bool = False
    use_uniform_theta_grid: bool = False

    def __post_init__(self):
        if self.min_radius >= self.max_radius:
            raise ValueError("WedgeSectionTorus expects min_radius < max_radius")
        if self.min_radius < 0.0:
            raise ValueError("WedgeSectionTorus expects min_radius >= 0")
        if self.min_theta >= self.max_theta:
            raise ValueError("WedgeSectionTorus expects min_theta < max_theta")
        if self.min_theta < 0.0 or self.max_theta > np.pi:
            raise ValueError("WedgeSectionTorus expects 0 <= min_theta and max_theta <= pi")
        for name, uniform in (
            ("number_of_radial_points", self.use_uniform_radial_grid),
            ("number_of_theta_points", self.use_uniform_theta_grid),
        ):
            n = getattr(self, name)
            if n < 2:
                raise ValueError(f"WedgeSectionTorus expects {name} >= 2, got {n}")
            if not uniform and n > maximum_number_of_points(Basis.Legendre):
                raise ValueError(
                    f"WedgeSectionTorus {name}={n} exceeds the maximum number of "
                    f"Legendre-Gauss-Lobatto points ({maximum_number_of_points(Basis.Legendre)})"
                )
        if self.number_of_phi_points < 1:
            raise ValueError(
                f"WedgeSectionTorus expects number_of_phi_points >= 1, got {self.number_of_phi_points}"
            )

    @property
    def dim(self):
        return 3

    @staticmethod
    def _grid(lower, upper, num_points, uniform):
        if uniform:
            return np.linspace(lower, upper, num_points)
        x = collocation_points_for_basis(Basis.Legendre, Quadrature.GaussLobatto, num_points)
        return 0.5 * (upper + lower) + 0.5 * (upper - lower) * x

    def points(self):
        radii = self._grid(
            self.min_radius, self.max_radius, self.number_of_radial_points, self.use_uniform_radial_grid
        )
        thetas = self._grid(
            self.min_theta, self.max_theta, self.number_of_theta_points, self.use_uniform_theta_grid
        )
        phis = 2.0 * np.pi * np.arange(self.number_of_phi_points) / self.number_of_phi_points

        # indexing="ij" on (phi, theta, r) with C-order ravel puts r fastest
        phi, theta, r = (a.ravel() for a in np.meshgrid(phis, thetas, radii, indexing="ij"))
        return np.stack(
            [r * np.sin(theta) * np.cos(phi), r * np.sin(theta) * np.sin(phi), r * np.cos(theta)],
            axis=1,
        )

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame([asdict(self)])


@dataclass(frozen=True)
class SpecifiedPoints:
    """An explicit list of target points, shape (number_of_points, dim)."""

    coordinates: np.ndarray = field(repr=False)

    def __post_init__(self):
        coords = np.atleast_2d(np.asarray(self.coordinates, dtype=np.float64))
        if coords.shape[0] == 0:
            raise ValueError("SpecifiedPoints expects at least one point")
        coords = coords.copy()
        coords.flags.writeable = False
        object.__setattr__(self, "coordinates", coords)

    @property
    def dim(self):
        return self.coordinates.shape[1]

    def points(self):
        return np.array(self.coordinates)

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(self.coordinates, columns=[f"x{d}" for d in range(self.dim)])
