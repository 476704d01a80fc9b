"""
Small fixed-size linear algebra helpers.

Closed-form 3x3 inversion for the normal equations of the affine
calibration fit.
"""

from typing import Optional

import numpy as np

# Determinants with smaller magnitude are treated as singular
SINGULAR_EPSILON = 1e-10


def determinant_3x3(m: np.ndarray) -> float:
    """Determinant of a 3x3 matrix by cofactor expansion along the first row."""
    (a, b, c), (d, e, f), (g, h, i) = m
    return float(a * (e * i - f * h) - b * (d * i - f * g) + c * (d * h - e * g))


def invert_3x3(
    m: np.ndarray, epsilon: float = SINGULAR_EPSILON
) -> Optional[np.ndarray]:
    """
    Invert a 3x3 matrix using the adjugate / determinant formula.

    Args:
        m: Matrix of shape (3, 3)
        epsilon: Singularity threshold on |det|

    Returns:
        Inverse matrix of shape (3, 3), or None if the matrix is singular
    """
    m = np.asarray(m, dtype=np.float64)
    if m.shape != (3, 3):
        raise ValueError(f"Expected a 3x3 matrix, got shape {m.shape}")

    det = determinant_3x3(m)
    if abs(det) < epsilon:
        return None

    (a, b, c), (d, e, f), (g, h, i) = m
    adjugate = np.array(
        [
            [e * i - f * h, c * h - b * i, b * f - c * e],
            [f * g - d * i, a * i - c * g, c * d - a * f],
            [d * h - e * g, b * g - a * h, a * e - b * d],
        ],
        dtype=np.float64,
    )

    return adjugate / det


def mat_vec_3(m: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Multiply a 3x3 matrix by a length-3 vector."""
    return np.asarray(m, dtype=np.float64) @ np.asarray(v, dtype=np.float64)
