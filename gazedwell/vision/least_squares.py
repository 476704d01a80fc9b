"""
Least-squares affine fit from gaze space to screen space.

Model (one independent regression per screen axis):
    screen_x = a0 + a1 * eye_x + a2 * eye_y
    screen_y = b0 + b1 * eye_x + b2 * eye_y

Solved with the normal equations  beta = (X^T X)^-1 X^T y,  where each row
of X is [1, eye_x, eye_y].
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from gazedwell.utils.linalg import SINGULAR_EPSILON, invert_3x3, mat_vec_3
from gazedwell.vision.gaze_estimator import Point2
from gazedwell.utils.logger import get_logger

logger = get_logger(__name__)

MIN_FIT_POINTS = 3

Coefficients = Tuple[float, float, float]


@dataclass(frozen=True)
class CalibrationPoint:
    """One observed gaze / screen correspondence."""

    eye_x: float
    eye_y: float
    screen_x: float
    screen_y: float


@dataclass(frozen=True)
class RegressionCoefficients:
    """Fitted affine model, ``[a0, a1, a2]`` and ``[b0, b1, b2]``."""

    x_coeffs: Coefficients
    y_coeffs: Coefficients

    def apply(self, eye_x: float, eye_y: float) -> Point2:
        """Map a gaze position to an (unclamped) screen position."""
        a0, a1, a2 = self.x_coeffs
        b0, b1, b2 = self.y_coeffs
        return Point2(a0 + a1 * eye_x + a2 * eye_y, b0 + b1 * eye_x + b2 * eye_y)


def normal_equations(
    points: Sequence[CalibrationPoint],
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Build ``X^T X`` and the two ``X^T y`` vectors.

    Returns:
        (xtx, xty_x, xty_y) with shapes (3, 3), (3,), (3,)
    """
    eye = np.array([[p.eye_x, p.eye_y] for p in points], dtype=np.float64)
    screen = np.array([[p.screen_x, p.screen_y] for p in points], dtype=np.float64)

    design = np.column_stack([np.ones(len(points)), eye[:, 0], eye[:, 1]])

    xtx = design.T @ design
    xty_x = design.T @ screen[:, 0]
    xty_y = design.T @ screen[:, 1]

    return xtx, xty_x, xty_y


def fit_affine(
    points: Sequence[CalibrationPoint],
    epsilon: float = SINGULAR_EPSILON,
) -> Optional[RegressionCoefficients]:
    """
    Fit the affine gaze-to-screen model by ordinary least squares.

    Args:
        points: Calibration correspondences (at least 3)
        epsilon: Singularity threshold for the normal matrix determinant

    Returns:
        RegressionCoefficients, or None if there are too few points or the
        normal matrix is singular (e.g. all gaze samples on one line)
    """
    if len(points) < MIN_FIT_POINTS:
        logger.warning(
            f"Need at least {MIN_FIT_POINTS} calibration points, got {len(points)}"
        )
        return None

    xtx, xty_x, xty_y = normal_equations(points)

    xtx_inv = invert_3x3(xtx, epsilon)
    if xtx_inv is None:
        logger.warning("Calibration matrix is singular, cannot compute regression")
        return None

    x_coeffs = mat_vec_3(xtx_inv, xty_x)
    y_coeffs = mat_vec_3(xtx_inv, xty_y)

    coeffs = RegressionCoefficients(
        x_coeffs=tuple(float(c) for c in x_coeffs),
        y_coeffs=tuple(float(c) for c in y_coeffs),
    )

    logger.debug(f"Affine fit: x={coeffs.x_coeffs}, y={coeffs.y_coeffs}")
    return coeffs


def fit_residuals(
    points: Sequence[CalibrationPoint], coeffs: RegressionCoefficients
) -> np.ndarray:
    """
    Per-point Euclidean error of the fitted model (pixels).

    Useful for judging calibration quality after the fit.
    """
    errors = [
        coeffs.apply(p.eye_x, p.eye_y).distance_to(Point2(p.screen_x, p.screen_y))
        for p in points
    ]
    return np.array(errors, dtype=np.float64)
