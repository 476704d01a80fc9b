"""
Exponential moving average smoothing for gaze and pointer positions.

Two independent stages use the same algebra:
1. Gaze space - removes frame-to-frame jitter from raw iris samples
2. Screen space - smooths the rendered pointer fed to dwell detection
"""

from typing import Optional

from gazedwell.vision.gaze_estimator import GazeSample, Point2
from gazedwell.utils.logger import get_logger

logger = get_logger(__name__)


def _validate_alpha(alpha: float) -> float:
    if not 0.0 < alpha <= 1.0:
        raise ValueError(f"Smoothing factor must be in (0, 1], got {alpha}")
    return float(alpha)


def ema_point(prev: Point2, new: Point2, alpha: float) -> Point2:
    """
    One EMA step per axis: ``prev + alpha * (new - prev)``.

    Identical inputs return ``prev`` unchanged, so a constant stream is an
    exact fixed point once reached.
    """
    return Point2(
        prev.x + alpha * (new.x - prev.x),
        prev.y + alpha * (new.y - prev.y),
    )


def smooth_gaze_sample(
    prev: Optional[GazeSample], raw: GazeSample, alpha: float
) -> GazeSample:
    """
    Smooth a raw gaze sample against the previous smoothed sample.

    Args:
        prev: Previous smoothed sample, or None for the first frame
        raw: New raw sample from the tracker
        alpha: Smoothing factor (higher = more responsive)

    Returns:
        New smoothed sample (``raw`` itself on the first frame)
    """
    if prev is None:
        return raw

    return GazeSample(
        left_iris=ema_point(prev.left_iris, raw.left_iris, alpha),
        right_iris=ema_point(prev.right_iris, raw.right_iris, alpha),
        average=ema_point(prev.average, raw.average, alpha),
    )


class GazeSampleSmoother:
    """
    Owns the smoothed gaze sample for one tracking session.

    The previous value lives here rather than in module state so that it
    is created with the session and cleared on stop or recalibration.
    """

    def __init__(self, alpha: float = 0.3):
        """
        Initialize smoother.

        Args:
            alpha: Smoothing factor in (0, 1]
        """
        self._alpha = _validate_alpha(alpha)
        self._current: Optional[GazeSample] = None

        logger.debug(f"GazeSampleSmoother initialized: alpha={self._alpha:.2f}")

    def smooth(self, raw: GazeSample) -> GazeSample:
        """
        Apply one smoothing step.

        Args:
            raw: Raw gaze sample

        Returns:
            Updated smoothed sample
        """
        self._current = smooth_gaze_sample(self._current, raw, self._alpha)
        return self._current

    def update_alpha(self, alpha: float):
        """Change the smoothing factor without losing state."""
        self._alpha = _validate_alpha(alpha)
        logger.debug(f"Gaze smoothing factor updated: {self._alpha:.2f}")

    def reset(self):
        """Forget the previous sample (next sample passes through)."""
        self._current = None
        logger.debug("Gaze smoother reset")

    @property
    def alpha(self) -> float:
        return self._alpha

    @property
    def current(self) -> Optional[GazeSample]:
        """Get current smoothed sample."""
        return self._current


class PointerSmoother:
    """
    Screen-space EMA for the rendered pointer.

    Tuned independently of gaze smoothing; a higher factor settles faster,
    which keeps dwell timing responsive.
    """

    def __init__(self, alpha: float = 0.35):
        """
        Initialize smoother.

        Args:
            alpha: Smoothing factor in (0, 1]
        """
        self._alpha = _validate_alpha(alpha)
        self._current: Optional[Point2] = None

        logger.debug(f"PointerSmoother initialized: alpha={self._alpha:.2f}")

    def smooth(self, target: Point2) -> Point2:
        """
        Move the pointer one step toward ``target``.

        Args:
            target: Mapped screen position (pixels)

        Returns:
            Smoothed pointer position (pixels)
        """
        if self._current is None:
            self._current = target
        else:
            self._current = ema_point(self._current, target, self._alpha)
        return self._current

    def update_alpha(self, alpha: float):
        """Change the smoothing factor without losing state."""
        self._alpha = _validate_alpha(alpha)
        logger.debug(f"Pointer smoothing factor updated: {self._alpha:.2f}")

    def reset(self):
        """Forget the pointer position."""
        self._current = None
        logger.debug("Pointer smoother reset")

    @property
    def alpha(self) -> float:
        return self._alpha

    @property
    def current(self) -> Optional[Point2]:
        """Get current pointer position."""
        return self._current
