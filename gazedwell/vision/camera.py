"""
Webcam frame source for the iris tracker.

Frames live in memory only and are dropped after landmark extraction.
"""

import sys
from typing import Optional

import cv2
import numpy as np

from gazedwell.core.config import CameraConfig
from gazedwell.utils.logger import get_logger

logger = get_logger(__name__)


class CameraError(Exception):
    """Camera could not be opened or stopped delivering frames."""

    pass


def _capture_api() -> int:
    # DirectShow opens much faster than MSMF on Windows
    return cv2.CAP_DSHOW if sys.platform == "win32" else cv2.CAP_ANY


class Camera:
    """
    RGB frames from an OpenCV capture device.

    Usable as a context manager; ``open`` raises CameraError when the
    device is missing or busy.
    """

    def __init__(self, config: CameraConfig):
        self._config = config
        self._capture: Optional[cv2.VideoCapture] = None
        self._failed_reads = 0

    def open(self):
        """
        Open the configured device and skip the warm-up frames.

        Raises:
            CameraError: If the device cannot be opened
        """
        if self._capture is not None:
            return

        index = self._config.camera_index
        try:
            capture = cv2.VideoCapture(index, _capture_api())
        except cv2.error as e:
            raise CameraError(f"Camera {index} initialization failed: {e}") from e

        if not capture.isOpened():
            capture.release()
            raise CameraError(
                f"Failed to open camera {index}. "
                "Check that camera access is allowed and not used by another application."
            )

        capture.set(cv2.CAP_PROP_FRAME_WIDTH, self._config.frame_width)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self._config.frame_height)
        capture.set(cv2.CAP_PROP_FPS, self._config.target_fps)

        # First frames after init are often black
        for _ in range(self._config.warmup_frames):
            capture.read()

        self._capture = capture
        self._failed_reads = 0
        logger.info(
            f"Camera {index} opened at "
            f"{int(capture.get(cv2.CAP_PROP_FRAME_WIDTH))}x"
            f"{int(capture.get(cv2.CAP_PROP_FRAME_HEIGHT))}"
        )

    def read_rgb(self) -> Optional[np.ndarray]:
        """
        Grab one frame.

        Returns:
            RGB image (H, W, 3), mirrored if configured, or None if the
            read failed
        """
        if self._capture is None:
            raise CameraError("Camera is not open")

        ok, frame = self._capture.read()
        if not ok or frame is None:
            self._failed_reads += 1
            if self._failed_reads == 1 or self._failed_reads % 100 == 0:
                logger.warning(f"Camera read failed ({self._failed_reads} so far)")
            return None

        if self._config.mirror:
            frame = cv2.flip(frame, 1)

        return cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)

    def close(self):
        """Release the device. Safe to call more than once."""
        if self._capture is None:
            return

        self._capture.release()
        self._capture = None
        logger.info("Camera closed")

    @property
    def is_open(self) -> bool:
        return self._capture is not None

    def __enter__(self) -> "Camera":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
