"""
test_target_points.py: Target point option holders and target configuration
"""

import numpy as np
import pytest

from datastructures import InterpolationTargetInfo
from interpolation import LineSegment, SpecifiedPoints, WedgeSectionTorus
from spectral import Basis, Quadrature, collocation_points_for_basis


class TestLineSegment:

    def test_points(self):
        points = LineSegment((0.0, 1.0, 2.0), (1.0, 1.0, 0.0), 5).points()
        assert points.shape == (5, 3)
        np.testing.assert_allclose(points[0], [0.0, 1.0, 2.0])
        np.testing.assert_allclose(points[-1], [1.0, 1.0, 0.0])
        np.testing.assert_allclose(points[2], [0.5, 1.0, 1.0])

    def test_scalar_end_points(self):
        segment = LineSegment(0.0, 1.0, 3)
        assert segment.dim == 1
        np.testing.assert_allclose(segment.points()[:, 0], [0.0, 0.5, 1.0])

    def test_validation(self):
        with pytest.raises(ValueError):
            LineSegment((0.0,), (1.0,), 1)
        with pytest.raises(ValueError):
            LineSegment((0.0, 0.0), (1.0,), 4)

    def test_to_dataframe(self):
        df = LineSegment((0.0,), (1.0,), 4).to_dataframe()
        assert df.loc[0, "number_of_points"] == 4


def torus(**overrides):
    options = dict(
        min_radius=1.0,
        max_radius=2.0,
        min_theta=0.25 * np.pi,
        max_theta=0.75 * np.pi,
        number_of_radial_points=4,
        number_of_theta_points=3,
        number_of_phi_points=5,
    )
    options.update(overrides)
    return WedgeSectionTorus(**options)


class TestWedgeSectionTorus:

    def test_number_of_points(self):
        points = torus().points()
        assert points.shape == (4 * 3 * 5, 3)

    def test_radii_at_lobatto_points(self):
        points = torus().points()
        radii = np.linalg.norm(points, axis=1)
        x = collocation_points_for_basis(Basis.Legendre, Quadrature.GaussLobatto, 4)
        expected = 1.5 + 0.5 * x
        # Radius varies fastest
        np.testing.assert_allclose(radii[:4], expected)
        np.testing.assert_allclose(radii, np.tile(expected, 15))

    def test_uniform_grids(self):
        points = torus(use_uniform_radial_grid=True, use_uniform_theta_grid=True).points()
        radii = np.linalg.norm(points, axis=1)
        np.testing.assert_allclose(radii[:4], np.linspace(1.0, 2.0, 4))
        theta = np.arccos(points[::4, 2] / radii[::4])
        np.testing.assert_allclose(theta[:3], np.linspace(0.25 * np.pi, 0.75 * np.pi, 3))

    def test_azimuthal_angles(self):
        points = torus(number_of_phi_points=4, use_uniform_theta_grid=True).points()
        # Point index 12 * k is the first radius and theta of the k-th phi
        phi = np.arctan2(points[::12, 1], points[::12, 0]) % (2.0 * np.pi)
        np.testing.assert_allclose(phi, [0.0, 0.5 * np.pi, np.pi, 1.5 * np.pi], atol=1e-14)

    def test_uniform_grid_allows_many_points(self):
        assert torus(number_of_radial_points=40, use_uniform_radial_grid=True).points().shape[0] == 40 * 15

    @pytest.mark.parametrize(
        "overrides, message",
        [
            (dict(min_radius=2.0, max_radius=1.0), "min_radius < max_radius"),
            (dict(min_radius=-1.0), "min_radius >= 0"),
            (dict(min_theta=1.0, max_theta=0.5), "min_theta < max_theta"),
            (dict(max_theta=4.0), "max_theta <= pi"),
            (dict(number_of_radial_points=1), "number_of_radial_points"),
            (dict(number_of_theta_points=13), "number_of_theta_points"),
            (dict(number_of_phi_points=0), "number_of_phi_points"),
        ],
    )
    def test_invalid_options(self, overrides, message):
        with pytest.raises(ValueError, match=message):
            torus(**overrides)

    def test_to_dataframe(self):
        df = torus().to_dataframe()
        assert df.loc[0, "number_of_phi_points"] == 5


class TestSpecifiedPoints:

    def test_points_are_copied(self):
        coordinates = np.array([[0.0, 1.0], [2.0, 3.0]])
        option = SpecifiedPoints(coordinates)
        coordinates[0, 0] = 9.0
        assert option.points()[0, 0] == 0.0
        assert option.dim == 2

    def test_returned_points_are_writable_copies(self):
        option = SpecifiedPoints([[0.0, 1.0]])
        points = option.points()
        points[0, 0] = 5.0
        assert option.points()[0, 0] == 0.0

    def test_requires_points(self):
        with pytest.raises(ValueError):
            SpecifiedPoints(np.zeros((0, 3)))

    def test_to_dataframe(self):
        df = SpecifiedPoints([[0.0, 1.0, 2.0]]).to_dataframe()
        assert list(df.columns) == ["x0", "x1", "x2"]


class TestInterpolationTargetInfo:

    def test_single_variable_name(self):
        info = InterpolationTargetInfo("A", SpecifiedPoints([[0.0]]), "psi")
        assert info.vars_to_interpolate == ("psi",)

    def test_validation(self):
        with pytest.raises(ValueError):
            InterpolationTargetInfo("", SpecifiedPoints([[0.0]]))
        with pytest.raises(ValueError):
            InterpolationTargetInfo("A", SpecifiedPoints([[0.0]]), ())

    def test_to_dataframe(self):
        df = InterpolationTargetInfo("A", LineSegment(0.0, 1.0, 3), ("u", "v")).to_dataframe()
        assert df.loc[0, "target_points"] == "LineSegment"
        assert df.loc[0, "vars_to_interpolate"] == "u,v"
