"""
Gaze samples from face-mesh landmarks.

Produces normalized camera-space gaze samples (iris positions in [0, 1])
that the smoothing and calibration stages consume.
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from gazedwell.utils.logger import get_logger

logger = get_logger(__name__)


# MediaPipe Face Mesh iris centres (present with refine_landmarks=True)
LEFT_IRIS_CENTER = 468
RIGHT_IRIS_CENTER = 473

# Eye corners used when iris landmarks are unavailable
LEFT_EYE_CORNERS = (33, 133)
RIGHT_EYE_CORNERS = (362, 263)


@dataclass(frozen=True)
class Point2:
    """2D point, either normalized camera space or screen pixels."""

    x: float
    y: float

    def distance_to(self, other: "Point2") -> float:
        """Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def to_array(self) -> np.ndarray:
        """Convert to numpy array."""
        return np.array([self.x, self.y], dtype=np.float64)


@dataclass(frozen=True)
class GazeSample:
    """
    One frame's iris positions in normalized camera space.

    Coordinates are in [0, 1] x [0, 1] relative to the camera frame.
    Used both for raw tracker output and for the smoothed sample.
    """

    left_iris: Point2
    right_iris: Point2
    average: Point2

    @classmethod
    def from_irises(cls, left: Point2, right: Point2) -> "GazeSample":
        """Build a sample whose average is the midpoint of both irises."""
        return cls(
            left_iris=left,
            right_iris=right,
            average=Point2((left.x + right.x) / 2.0, (left.y + right.y) / 2.0),
        )


def _midpoint(landmarks: Sequence, first: int, second: int) -> Point2:
    a, b = landmarks[first], landmarks[second]
    return Point2((a.x + b.x) / 2.0, (a.y + b.y) / 2.0)


def gaze_sample_from_landmarks(landmarks: Optional[Sequence]) -> Optional[GazeSample]:
    """
    Convert one face's landmark list to a gaze sample.

    Args:
        landmarks: Indexable sequence of objects with ``x`` and ``y``
            attributes (normalized), e.g. MediaPipe ``face_landmarks.landmark``

    Returns:
        GazeSample, or None when no usable face is present

    Method:
    - Refined meshes (478 points) use the iris centre landmarks directly
    - Otherwise the midpoint of each eye's corners approximates the iris
    """
    if not landmarks:
        return None

    if len(landmarks) > RIGHT_IRIS_CENTER:
        left = landmarks[LEFT_IRIS_CENTER]
        right = landmarks[RIGHT_IRIS_CENTER]
        return GazeSample.from_irises(Point2(left.x, left.y), Point2(right.x, right.y))

    if len(landmarks) <= max(LEFT_EYE_CORNERS + RIGHT_EYE_CORNERS):
        logger.debug(f"Too few landmarks for gaze estimation: {len(landmarks)}")
        return None

    return GazeSample.from_irises(
        _midpoint(landmarks, *LEFT_EYE_CORNERS),
        _midpoint(landmarks, *RIGHT_EYE_CORNERS),
    )


class GazeEstimator:
    """
    Estimate gaze samples from face landmarks.

    Keeps the last successful sample so callers can show it while the
    face is temporarily lost.
    """

    def __init__(self):
        self._last_sample: Optional[GazeSample] = None
        self._missed_frames = 0

    def estimate(self, landmarks: Optional[Sequence]) -> Optional[GazeSample]:
        """
        Estimate a gaze sample for one frame.

        Args:
            landmarks: Landmark list of the first detected face, or None

        Returns:
            GazeSample if a face is present, None otherwise
        """
        sample = gaze_sample_from_landmarks(landmarks)

        if sample is None:
            self._missed_frames += 1
            return None

        if self._missed_frames:
            logger.debug(f"Face reacquired after {self._missed_frames} frames")
            self._missed_frames = 0

        self._last_sample = sample
        return sample

    @property
    def last_sample(self) -> Optional[GazeSample]:
        """Get last estimated sample."""
        return self._last_sample

    def reset(self):
        """Reset estimator state."""
        self._last_sample = None
        self._missed_frames = 0
