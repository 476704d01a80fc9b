"""
Tests for gaze-space and screen-space exponential smoothing.
"""

import pytest

from gazedwell.vision.gaze_estimator import GazeSample, Point2
from gazedwell.vision.smoothing import (
    GazeSampleSmoother,
    PointerSmoother,
    ema_point,
    smooth_gaze_sample,
)


def _sample(lx, ly, rx, ry):
    return GazeSample.from_irises(Point2(lx, ly), Point2(rx, ry))


class TestEmaPoint:
    """Tests for the per-axis EMA step."""

    def test_step_toward_new_value(self):
        out = ema_point(Point2(0.0, 10.0), Point2(10.0, 0.0), 0.3)

        assert out.x == pytest.approx(3.0)
        assert out.y == pytest.approx(7.0)

    def test_identical_inputs_are_fixed_point(self):
        p = Point2(0.123456789, 0.987654321)

        assert ema_point(p, p, 0.3) == p

    def test_alpha_one_jumps_to_new_value(self):
        assert ema_point(Point2(1.0, 1.0), Point2(5.0, -2.0), 1.0) == Point2(5.0, -2.0)


class TestSmoothGazeSample:
    """Tests for smoothing full gaze samples."""

    def test_first_sample_passes_through(self):
        raw = _sample(0.4, 0.5, 0.6, 0.5)

        assert smooth_gaze_sample(None, raw, 0.3) is raw

    def test_each_point_smoothed_independently(self):
        prev = _sample(0.0, 0.0, 1.0, 1.0)
        raw = _sample(1.0, 1.0, 0.0, 0.0)

        out = smooth_gaze_sample(prev, raw, 0.3)

        assert out.left_iris.x == pytest.approx(0.3)
        assert out.right_iris.x == pytest.approx(0.7)
        assert out.average.x == pytest.approx(0.5)
        assert out.average.y == pytest.approx(0.5)

    def test_constant_stream_converges(self):
        target = _sample(0.42, 0.58, 0.44, 0.6)
        current = _sample(0.0, 0.0, 1.0, 1.0)

        for _ in range(200):
            current = smooth_gaze_sample(current, target, 0.3)

        assert current.average.x == pytest.approx(target.average.x, abs=1e-9)
        assert current.average.y == pytest.approx(target.average.y, abs=1e-9)

    def test_constant_stream_stays_exactly_equal(self):
        raw = _sample(0.31, 0.47, 0.35, 0.49)
        current = smooth_gaze_sample(None, raw, 0.3)

        for _ in range(50):
            current = smooth_gaze_sample(current, raw, 0.3)
            assert current == raw


class TestGazeSampleSmoother:
    """Tests for the session-owned gaze smoother."""

    def test_smooth_and_reset(self):
        smoother = GazeSampleSmoother(alpha=0.5)
        first = _sample(0.2, 0.2, 0.2, 0.2)
        second = _sample(0.6, 0.6, 0.6, 0.6)

        assert smoother.smooth(first) == first
        assert smoother.smooth(second).average.x == pytest.approx(0.4)

        smoother.reset()
        assert smoother.current is None
        assert smoother.smooth(second) == second

    @pytest.mark.parametrize("alpha", [0.0, -0.1, 1.5])
    def test_invalid_alpha(self, alpha):
        with pytest.raises(ValueError):
            GazeSampleSmoother(alpha=alpha)

    def test_update_alpha_keeps_state(self):
        smoother = GazeSampleSmoother(alpha=0.3)
        smoother.smooth(_sample(0.0, 0.0, 0.0, 0.0))
        smoother.update_alpha(1.0)

        out = smoother.smooth(_sample(1.0, 1.0, 1.0, 1.0))

        assert out.average.x == pytest.approx(1.0)
        assert smoother.alpha == 1.0


class TestPointerSmoother:
    """Tests for the screen-space pointer smoother."""

    def test_default_alpha(self):
        assert PointerSmoother().alpha == pytest.approx(0.35)

    def test_first_position_then_ema(self):
        smoother = PointerSmoother(alpha=0.35)

        assert smoother.smooth(Point2(100.0, 200.0)) == Point2(100.0, 200.0)

        out = smoother.smooth(Point2(200.0, 200.0))
        assert out.x == pytest.approx(135.0)
        assert out.y == pytest.approx(200.0)

    def test_independent_from_gaze_stage(self):
        gaze = GazeSampleSmoother(alpha=0.3)
        pointer = PointerSmoother(alpha=0.9)

        pointer.update_alpha(0.5)

        assert gaze.alpha == pytest.approx(0.3)
        assert pointer.alpha == pytest.approx(0.5)

    def test_reset(self):
        smoother = PointerSmoother()
        smoother.smooth(Point2(1.0, 1.0))
        smoother.reset()

        assert smoother.current is None
