"""
Tests for the 3x3 inverse and the least-squares affine fit.
"""

import numpy as np
import pytest

from gazedwell.utils.linalg import determinant_3x3, invert_3x3, mat_vec_3
from gazedwell.vision.least_squares import (
    CalibrationPoint,
    RegressionCoefficients,
    fit_affine,
    fit_residuals,
    normal_equations,
)
from gazedwell.vision.mapper import Viewport, map_gaze_to_screen


def true_transform(eye_x, eye_y):
    """Known affine map used to generate calibration data."""
    return (50.0 + 800.0 * eye_x + 30.0 * eye_y, 20.0 + 10.0 * eye_x + 900.0 * eye_y)


@pytest.fixture
def affine_points():
    """Nine correspondences generated by true_transform on an uneven grid."""
    points = []
    for row in range(3):
        for col in range(3):
            eye_x = 0.3 + 0.2 * col + 0.01 * row
            eye_y = 0.35 + 0.15 * row - 0.02 * col
            screen_x, screen_y = true_transform(eye_x, eye_y)
            points.append(CalibrationPoint(eye_x, eye_y, screen_x, screen_y))
    return points


class TestInvert3x3:
    """Tests for the closed-form inverse."""

    def test_inverse_matches_numpy(self):
        m = np.array([[4.0, 2.0, 1.0], [2.0, 5.0, 3.0], [1.0, 3.0, 6.0]])

        inv = invert_3x3(m)

        assert inv is not None
        np.testing.assert_allclose(inv, np.linalg.inv(m), atol=1e-12)
        np.testing.assert_allclose(m @ inv, np.eye(3), atol=1e-12)

    def test_singular_returns_none(self):
        m = np.array([[1.0, 2.0, 3.0], [2.0, 4.0, 6.0], [0.0, 1.0, 1.0]])

        assert invert_3x3(m) is None

    def test_near_singular_threshold(self):
        m = np.diag([1e-4, 1e-4, 1e-4])  # det = 1e-12

        assert invert_3x3(m) is None
        assert invert_3x3(m, epsilon=1e-13) is not None

    def test_determinant(self):
        m = np.array([[2.0, 0.0, 0.0], [0.0, 3.0, 0.0], [0.0, 0.0, 4.0]])

        assert determinant_3x3(m) == pytest.approx(24.0)

    def test_wrong_shape(self):
        with pytest.raises(ValueError):
            invert_3x3(np.eye(2))

    def test_mat_vec(self):
        result = mat_vec_3(np.eye(3) * 2.0, np.array([1.0, 2.0, 3.0]))

        np.testing.assert_allclose(result, [2.0, 4.0, 6.0])


class TestNormalEquations:
    """Tests for building X^T X and X^T y."""

    def test_sums(self):
        points = [
            CalibrationPoint(1.0, 2.0, 10.0, 20.0),
            CalibrationPoint(3.0, 4.0, 30.0, 40.0),
        ]

        xtx, xty_x, xty_y = normal_equations(points)

        np.testing.assert_allclose(
            xtx, [[2.0, 4.0, 6.0], [4.0, 10.0, 14.0], [6.0, 14.0, 20.0]]
        )
        np.testing.assert_allclose(xty_x, [40.0, 100.0, 140.0])
        np.testing.assert_allclose(xty_y, [60.0, 140.0, 200.0])


class TestFitAffine:
    """Tests for the least-squares fit."""

    def test_recovers_true_transform(self, affine_points):
        coeffs = fit_affine(affine_points)

        assert coeffs is not None
        assert coeffs.x_coeffs == pytest.approx((50.0, 800.0, 30.0), abs=1e-6)
        assert coeffs.y_coeffs == pytest.approx((20.0, 10.0, 900.0), abs=1e-6)

    def test_held_out_points_match_transform(self, affine_points):
        coeffs = fit_affine(affine_points)
        viewport = Viewport(5000, 5000)  # large enough that nothing clamps

        for eye_x, eye_y in [(0.42, 0.61), (0.55, 0.4), (0.71, 0.66)]:
            mapped = map_gaze_to_screen(eye_x, eye_y, coeffs, viewport)
            expected_x, expected_y = true_transform(eye_x, eye_y)

            assert mapped.x == pytest.approx(expected_x, abs=1e-6)
            assert mapped.y == pytest.approx(expected_y, abs=1e-6)

    def test_residuals_near_zero(self, affine_points):
        coeffs = fit_affine(affine_points)

        assert fit_residuals(affine_points, coeffs).max() < 1e-6

    def test_constant_eye_x_is_singular(self):
        points = [
            CalibrationPoint(0.5, 0.1 * (i + 1), 100.0 * i, 50.0 * i)
            for i in range(9)
        ]

        assert fit_affine(points) is None

    def test_too_few_points(self):
        points = [CalibrationPoint(0.1, 0.1, 10.0, 10.0), CalibrationPoint(0.9, 0.9, 90.0, 90.0)]

        assert fit_affine(points) is None

    def test_exactly_three_points(self):
        points = [
            CalibrationPoint(0.0, 0.0, 0.0, 0.0),
            CalibrationPoint(1.0, 0.0, 100.0, 0.0),
            CalibrationPoint(0.0, 1.0, 0.0, 100.0),
        ]

        coeffs = fit_affine(points)

        assert coeffs is not None
        assert coeffs.x_coeffs == pytest.approx((0.0, 100.0, 0.0), abs=1e-9)
        assert coeffs.y_coeffs == pytest.approx((0.0, 0.0, 100.0), abs=1e-9)


class TestRegressionCoefficients:
    """Tests for applying a fitted model."""

    def test_apply(self):
        coeffs = RegressionCoefficients(x_coeffs=(1.0, 2.0, 3.0), y_coeffs=(4.0, 5.0, 6.0))

        point = coeffs.apply(10.0, 100.0)

        assert point.x == pytest.approx(321.0)
        assert point.y == pytest.approx(654.0)
