"""
Tests for gaze-to-screen mapping mathematics.
"""

import pytest
import numpy as np

from gazedwell.vision.gaze_estimator import Point2
from gazedwell.vision.least_squares import RegressionCoefficients
from gazedwell.vision.mapper import Viewport, linear_fallback, map_gaze_to_screen


class TestGazeMapper:
    """Tests for gaze-to-screen coordinate mapping."""

    @pytest.fixture
    def viewport(self):
        return Viewport(1920, 1080)

    @pytest.fixture
    def identity_coeffs(self):
        """Model mapping normalized gaze straight onto a 1920x1080 screen."""
        return RegressionCoefficients(x_coeffs=(0.0, 1920.0, 0.0), y_coeffs=(0.0, 0.0, 1080.0))

    def test_calibrated_center(self, viewport, identity_coeffs):
        point = map_gaze_to_screen(0.5, 0.5, identity_coeffs, viewport)

        assert point.x == pytest.approx(960.0)
        assert point.y == pytest.approx(540.0)

    def test_bounds_clamping(self, viewport, identity_coeffs):
        """Extreme gaze values are clamped to the viewport."""
        for eye_x, eye_y in [(-5.0, 0.5), (5.0, 0.5), (0.5, -5.0), (0.5, 5.0)]:
            point = map_gaze_to_screen(eye_x, eye_y, identity_coeffs, viewport)

            assert 0 <= point.x <= 1920
            assert 0 <= point.y <= 1080

        assert map_gaze_to_screen(5.0, 5.0, identity_coeffs, viewport) == Point2(1920.0, 1080.0)
        assert map_gaze_to_screen(-5.0, -5.0, identity_coeffs, viewport) == Point2(0.0, 0.0)

    def test_fallback_is_mirrored(self, viewport):
        """Without calibration X is mirrored, Y is not."""
        point = map_gaze_to_screen(0.25, 0.75, None, viewport)

        assert point.x == pytest.approx(0.75 * 1920)
        assert point.y == pytest.approx(0.75 * 1080)
        assert point == linear_fallback(0.25, 0.75, viewport)

    def test_fallback_monotonicity(self, viewport):
        """Looking further right in camera space moves the pointer left."""
        xs = [map_gaze_to_screen(g, 0.5, None, viewport).x for g in [0.1, 0.3, 0.5, 0.7, 0.9]]

        for i in range(1, len(xs)):
            assert xs[i] < xs[i - 1], f"Fallback mapping not mirrored: {xs}"

    def test_monotonicity_vertical(self, viewport, identity_coeffs):
        ys = [
            map_gaze_to_screen(0.5, g, identity_coeffs, viewport).y
            for g in [0.1, 0.3, 0.5, 0.7, 0.9]
        ]

        for i in range(1, len(ys)):
            assert ys[i] >= ys[i - 1], f"Vertical mapping not monotonic: {ys}"

    def test_invalid_viewport(self):
        with pytest.raises(ValueError, match="Invalid viewport size"):
            Viewport(0, 1080)


class TestPoint2:
    """Tests for Point2."""

    def test_to_array(self):
        array = Point2(0.5, -0.3).to_array()

        assert isinstance(array, np.ndarray)
        assert array.shape == (2,)
        assert array[0] == 0.5
        assert array[1] == -0.3

    def test_distance(self):
        assert Point2(0.0, 0.0).distance_to(Point2(3.0, 4.0)) == pytest.approx(5.0)
