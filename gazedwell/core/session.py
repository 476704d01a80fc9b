"""
Per-session pipeline state.

A TrackingSession is created when tracking starts and closed when it
stops. It owns every piece of mutable per-frame state so nothing survives
a stop/start cycle.
"""

from dataclasses import dataclass
from typing import Optional

from gazedwell.core.config import DwellConfig, SmoothingConfig
from gazedwell.interaction.dwell import DwellClickDetector, DwellUpdate
from gazedwell.os_control.click_dispatcher import ClickDispatcher
from gazedwell.vision.gaze_estimator import GazeSample, Point2
from gazedwell.vision.sample_slot import LatestSampleSlot
from gazedwell.vision.smoothing import GazeSampleSmoother, PointerSmoother
from gazedwell.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class GazeReading:
    """Result of reading the sample slot for one tick."""

    sample: Optional[GazeSample]  # Current smoothed sample (None if never seen)
    face_detected: bool
    fresh: bool  # True if a new raw sample was smoothed this tick


class TrackingSession:
    """
    Owns the slot, both smoothers and the dwell detector for one session.

    Lifecycle:
        created  - Controller.start_tracking
        reset    - reset_smoothing() on calibration reset
        closed   - Controller.stop_tracking; all state discarded
    """

    def __init__(
        self,
        smoothing: SmoothingConfig,
        dwell: DwellConfig,
        dispatcher: Optional[ClickDispatcher] = None,
    ):
        self.slot = LatestSampleSlot()
        self.gaze_smoother = GazeSampleSmoother(smoothing.gaze_alpha)
        self.pointer_smoother = PointerSmoother(smoothing.pointer_alpha)
        self.dwell_detector = DwellClickDetector(dwell, dispatcher)

        self._last_sequence: Optional[int] = None
        self._closed = False

        logger.info("Tracking session created")

    def read_gaze(self) -> GazeReading:
        """
        Consume the slot at most once.

        A sample that was already smoothed (same sequence number) does not
        step the smoother again.
        """
        reading = self.slot.read()

        if reading.sample is None:
            return GazeReading(
                sample=self.gaze_smoother.current, face_detected=False, fresh=False
            )

        if reading.sequence == self._last_sequence:
            return GazeReading(
                sample=self.gaze_smoother.current, face_detected=True, fresh=False
            )

        self._last_sequence = reading.sequence
        smoothed = self.gaze_smoother.smooth(reading.sample)
        return GazeReading(sample=smoothed, face_detected=True, fresh=True)

    def smooth_pointer(self, target: Point2) -> Point2:
        return self.pointer_smoother.smooth(target)

    def update_dwell(self, pointer: Point2, now_ms: float, enabled: bool) -> DwellUpdate:
        return self.dwell_detector.update(pointer.x, pointer.y, now_ms, enabled)

    def reset_smoothing(self):
        """Clear both smoothing stages and any dwell in progress."""
        self.gaze_smoother.reset()
        self.pointer_smoother.reset()
        self.dwell_detector.reset()
        self._last_sequence = None

    def close(self):
        """Discard all session state."""
        self.slot.clear()
        self.reset_smoothing()
        self._closed = True
        logger.info("Tracking session closed")

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def smoothed_gaze(self) -> Optional[GazeSample]:
        return self.gaze_smoother.current

    @property
    def pointer(self) -> Optional[Point2]:
        return self.pointer_smoother.current
