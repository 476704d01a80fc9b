"""
Gaze-to-screen mapping.

Applies the fitted calibration model when one exists and falls back to a
mirrored linear map otherwise. Always produces a coordinate.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from gazedwell.vision.gaze_estimator import Point2
from gazedwell.vision.least_squares import RegressionCoefficients


@dataclass(frozen=True)
class Viewport:
    """Current drawable area in pixels."""

    width: float
    height: float

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Invalid viewport size: {self.width}x{self.height}")

    def clamp(self, point: Point2) -> Point2:
        """Clamp a point to ``[0, width] x [0, height]``."""
        return Point2(
            float(np.clip(point.x, 0.0, self.width)),
            float(np.clip(point.y, 0.0, self.height)),
        )


def linear_fallback(eye_x: float, eye_y: float, viewport: Viewport) -> Point2:
    """
    Uncalibrated map from normalized gaze to screen.

    X is mirrored because the front-facing camera image is mirrored.
    """
    return Point2((1.0 - eye_x) * viewport.width, eye_y * viewport.height)


def map_gaze_to_screen(
    eye_x: float,
    eye_y: float,
    coeffs: Optional[RegressionCoefficients],
    viewport: Viewport,
) -> Point2:
    """
    Map a normalized gaze position to screen pixels.

    Args:
        eye_x: Normalized gaze x (camera space)
        eye_y: Normalized gaze y (camera space)
        coeffs: Fitted model, or None when uncalibrated or the fit failed
        viewport: Current viewport size

    Returns:
        Screen position; clamped to the viewport when calibrated
    """
    if coeffs is None:
        return linear_fallback(eye_x, eye_y, viewport)

    return viewport.clamp(coeffs.apply(eye_x, eye_y))
