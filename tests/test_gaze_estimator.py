"""
Tests for landmark-to-gaze conversion.
"""

from types import SimpleNamespace

import pytest

from gazedwell.vision.gaze_estimator import (
    GazeEstimator,
    GazeSample,
    Point2,
    gaze_sample_from_landmarks,
)


def make_landmarks(count, overrides):
    """Landmark list of ``count`` points at the origin with some overridden."""
    landmarks = [SimpleNamespace(x=0.0, y=0.0) for _ in range(count)]
    for index, (x, y) in overrides.items():
        landmarks[index] = SimpleNamespace(x=x, y=y)
    return landmarks


class TestGazeSampleFromLandmarks:
    """Tests for gaze_sample_from_landmarks."""

    def test_refined_mesh_uses_iris_centres(self):
        landmarks = make_landmarks(478, {468: (0.4, 0.5), 473: (0.6, 0.7)})

        sample = gaze_sample_from_landmarks(landmarks)

        assert sample.left_iris == Point2(0.4, 0.5)
        assert sample.right_iris == Point2(0.6, 0.7)
        assert sample.average.x == pytest.approx(0.5)
        assert sample.average.y == pytest.approx(0.6)

    def test_basic_mesh_uses_eye_corners(self):
        landmarks = make_landmarks(
            468,
            {33: (0.30, 0.40), 133: (0.40, 0.40), 362: (0.60, 0.42), 263: (0.70, 0.42)},
        )

        sample = gaze_sample_from_landmarks(landmarks)

        assert sample.left_iris.x == pytest.approx(0.35)
        assert sample.right_iris.x == pytest.approx(0.65)
        assert sample.average.x == pytest.approx(0.5)
        assert sample.average.y == pytest.approx(0.41)

    @pytest.mark.parametrize("landmarks", [None, []])
    def test_no_face(self, landmarks):
        assert gaze_sample_from_landmarks(landmarks) is None

    def test_too_few_landmarks(self):
        assert gaze_sample_from_landmarks(make_landmarks(100, {})) is None


class TestGazeEstimator:
    """Tests for GazeEstimator."""

    def test_keeps_last_sample(self):
        estimator = GazeEstimator()
        landmarks = make_landmarks(478, {468: (0.4, 0.5), 473: (0.6, 0.5)})

        sample = estimator.estimate(landmarks)

        assert estimator.estimate(None) is None
        assert estimator.last_sample == sample

        estimator.reset()
        assert estimator.last_sample is None

    def test_from_irises(self):
        sample = GazeSample.from_irises(Point2(0.0, 1.0), Point2(1.0, 0.0))

        assert sample.average == Point2(0.5, 0.5)
