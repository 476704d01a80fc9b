"""
Iris tracking using MediaPipe Face Mesh.

Privacy: No facial recognition, no biometric templates stored.
Only iris positions are extracted from each frame.
"""

from typing import Optional

import mediapipe as mp
import numpy as np

from gazedwell.core.config import CameraConfig
from gazedwell.vision.gaze_estimator import GazeEstimator, GazeSample
from gazedwell.utils.logger import get_logger

logger = get_logger(__name__)


class IrisTracker:
    """
    Per-frame iris positions from MediaPipe Face Mesh.

    ``refine_landmarks=True`` adds the iris centre landmarks (468, 473);
    without them the estimator falls back to eye corners.
    """

    def __init__(self, config: CameraConfig):
        """
        Initialize tracker.

        Args:
            config: Camera configuration (detection thresholds)
        """
        self._face_mesh = mp.solutions.face_mesh.FaceMesh(
            max_num_faces=1,
            refine_landmarks=True,
            min_detection_confidence=config.min_detection_confidence,
            min_tracking_confidence=config.min_tracking_confidence,
        )
        self._estimator = GazeEstimator()

        logger.info("IrisTracker initialized with MediaPipe Face Mesh")

    def process_frame(self, frame: np.ndarray) -> Optional[GazeSample]:
        """
        Extract a raw gaze sample from one RGB frame.

        Args:
            frame: RGB image (H, W, 3)

        Returns:
            GazeSample, or None if no face was detected
        """
        if frame is None or frame.size == 0:
            return None

        results = self._face_mesh.process(frame)

        if not results.multi_face_landmarks:
            return self._estimator.estimate(None)

        landmarks = results.multi_face_landmarks[0].landmark
        return self._estimator.estimate(landmarks)

    @property
    def last_sample(self) -> Optional[GazeSample]:
        return self._estimator.last_sample

    def close(self):
        """Release MediaPipe resources."""
        if self._face_mesh is not None:
            self._face_mesh.close()
            self._face_mesh = None
            logger.info("IrisTracker closed")
