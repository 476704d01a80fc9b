"""
Calibration session for mapping gaze to screen coordinates.

The user looks at each of nine grid targets in turn and confirms; every
confirmation pairs the current smoothed gaze with the target's screen
position. After the last target the affine model is fitted once and the
session is frozen until reset.
"""

from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Tuple, Union

from gazedwell.core.config import CalibrationConfig
from gazedwell.vision.gaze_estimator import Point2
from gazedwell.vision.least_squares import (
    CalibrationPoint,
    RegressionCoefficients,
    fit_affine,
    fit_residuals,
)
from gazedwell.vision.mapper import Viewport, map_gaze_to_screen
from gazedwell.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Idle:
    """No calibration in progress."""


@dataclass(frozen=True)
class Collecting:
    """Waiting for the user to confirm gaze at target ``index``."""

    index: int


@dataclass(frozen=True)
class Complete:
    """All targets recorded and the fit attempted."""


CalibrationPhase = Union[Idle, Collecting, Complete]


@dataclass(frozen=True)
class CalibrationTarget:
    """One fixed grid position for the current session."""

    index: int
    screen: Point2


@dataclass(frozen=True)
class CalibrationSnapshot:
    """Read-only view of calibration progress for the presentation layer."""

    phase: CalibrationPhase
    completed_indices: FrozenSet[int]
    total: int

    @property
    def current_index(self) -> Optional[int]:
        if isinstance(self.phase, Collecting):
            return self.phase.index
        return None

    @property
    def is_collecting(self) -> bool:
        return isinstance(self.phase, Collecting)

    @property
    def is_complete(self) -> bool:
        return isinstance(self.phase, Complete)


def calibration_targets(
    viewport: Viewport, fractions: Tuple[float, ...] = (0.1, 0.5, 0.9)
) -> List[CalibrationTarget]:
    """
    Generate the calibration grid, row-major from the top-left.

    Args:
        viewport: Current viewport size
        fractions: Grid positions as fractions of width/height

    Returns:
        Targets in collection order
    """
    targets = []
    for row, fy in enumerate(fractions):
        for col, fx in enumerate(fractions):
            targets.append(
                CalibrationTarget(
                    index=row * len(fractions) + col,
                    screen=Point2(fx * viewport.width, fy * viewport.height),
                )
            )
    return targets


class Calibrator:
    """
    Personalized affine calibration.

    States:
        Idle -> Collecting(0) -> ... -> Collecting(8) -> Complete
        reset() returns to Idle from any state

    Points are collected strictly in target order, one per target.
    """

    def __init__(self, config: CalibrationConfig, viewport: Viewport):
        """
        Initialize calibrator.

        Args:
            config: Calibration configuration
            viewport: Viewport used for target generation
        """
        self._config = config
        self._viewport = viewport

        self._phase: CalibrationPhase = Idle()
        self._targets = calibration_targets(viewport, config.grid_fractions)
        self._points: List[CalibrationPoint] = []
        self._coefficients: Optional[RegressionCoefficients] = None

        logger.info(
            f"Calibrator initialized for {viewport.width:.0f}x{viewport.height:.0f}, "
            f"{len(self._targets)} targets"
        )

    def start(self, viewport: Optional[Viewport] = None):
        """
        Begin a calibration session.

        Clears previous points and coefficients and regenerates the targets
        from the current viewport.

        Args:
            viewport: Current viewport (defaults to the last known one)
        """
        if viewport is not None:
            self._viewport = viewport

        self._targets = calibration_targets(self._viewport, self._config.grid_fractions)
        self._points = []
        self._coefficients = None
        self._phase = Collecting(index=0)

        logger.info(f"Calibration started: {len(self._targets)} targets")

    def record_point(self, eye_x: float, eye_y: float) -> bool:
        """
        Record the user's gaze for the current target.

        Ignored outside ``Collecting``.

        Args:
            eye_x: Smoothed normalized gaze x
            eye_y: Smoothed normalized gaze y

        Returns:
            True if a point was recorded
        """
        if not isinstance(self._phase, Collecting):
            logger.debug(f"Ignoring calibration point while {type(self._phase).__name__}")
            return False

        index = self._phase.index
        target = self._targets[index]

        self._points.append(
            CalibrationPoint(
                eye_x=eye_x,
                eye_y=eye_y,
                screen_x=target.screen.x,
                screen_y=target.screen.y,
            )
        )
        logger.info(
            f"Target {index} recorded: gaze=({eye_x:.4f}, {eye_y:.4f}) "
            f"-> screen=({target.screen.x:.0f}, {target.screen.y:.0f})"
        )

        next_index = index + 1
        if next_index >= len(self._targets):
            self._finalize()
        else:
            self._phase = Collecting(index=next_index)

        return True

    def _finalize(self):
        """Fit the model over all points and freeze the session."""
        self._coefficients = fit_affine(self._points, self._config.singular_epsilon)
        self._phase = Complete()

        if self._coefficients is None:
            logger.warning("Calibration fit failed, using uncalibrated mapping")
        else:
            errors = fit_residuals(self._points, self._coefficients)
            logger.info(
                f"Calibration finalized: mean error {errors.mean():.1f}px, "
                f"max {errors.max():.1f}px"
            )

    def reset(self):
        """Return to Idle and discard points and coefficients."""
        self._phase = Idle()
        self._points = []
        self._coefficients = None
        logger.info("Calibration reset")

    def map_to_screen(
        self, eye_x: float, eye_y: float, viewport: Optional[Viewport] = None
    ) -> Point2:
        """
        Map gaze to screen with the current model (or the fallback).

        Args:
            eye_x: Normalized gaze x
            eye_y: Normalized gaze y
            viewport: Current viewport (defaults to the last known one)

        Returns:
            Screen position in pixels
        """
        return map_gaze_to_screen(
            eye_x, eye_y, self._coefficients, viewport or self._viewport
        )

    def snapshot(self) -> CalibrationSnapshot:
        """Get calibration progress for display."""
        return CalibrationSnapshot(
            phase=self._phase,
            completed_indices=frozenset(range(len(self._points))),
            total=len(self._targets),
        )

    def get_current_target(self) -> Optional[CalibrationTarget]:
        """Get the target awaiting confirmation, if collecting."""
        if isinstance(self._phase, Collecting):
            return self._targets[self._phase.index]
        return None

    @property
    def phase(self) -> CalibrationPhase:
        """Get current phase."""
        return self._phase

    @property
    def targets(self) -> List[CalibrationTarget]:
        """Get calibration targets for the current session."""
        return list(self._targets)

    @property
    def points(self) -> List[CalibrationPoint]:
        """Get recorded points in target order."""
        return list(self._points)

    @property
    def coefficients(self) -> Optional[RegressionCoefficients]:
        """Get fitted model, None if not fitted or singular."""
        return self._coefficients

    @property
    def is_complete(self) -> bool:
        return isinstance(self._phase, Complete)

    @property
    def is_calibrated(self) -> bool:
        """True when a usable model exists."""
        return self._coefficients is not None

    @property
    def progress(self) -> Tuple[int, int]:
        """Get progress (recorded_points, total_targets)."""
        return (len(self._points), len(self._targets))
