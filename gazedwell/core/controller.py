"""
Central controller orchestrating the gaze pipeline.

Manages screen transitions and runs one synchronous pipeline step per
display tick.
"""

from typing import Optional
from dataclasses import dataclass

from gazedwell.core.config import AppConfig, DwellConfig, SmoothingConfig
from gazedwell.core.session import TrackingSession
from gazedwell.core.state import StateMachine, ScreenState, ErrorInfo
from gazedwell.interaction.dwell import DwellUpdate
from gazedwell.os_control.click_dispatcher import ClickDispatcher
from gazedwell.vision.calibrator import Calibrator, CalibrationSnapshot
from gazedwell.vision.gaze_estimator import GazeSample, Point2
from gazedwell.vision.mapper import Viewport
from gazedwell.utils.timing import FPSCounter, TickThrottle
from gazedwell.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class TickResult:
    """Everything the presentation layer needs after one tick."""

    screen_state: ScreenState
    calibration: CalibrationSnapshot
    face_detected: bool = False
    gaze: Optional[GazeSample] = None
    pointer: Optional[Point2] = None
    dwell_progress: float = 0.0
    is_dwelling: bool = False
    clicked_at: Optional[Point2] = None
    fps: float = 0.0


class Controller:
    """
    Central controller for GazeDwell.

    Pipeline per tick:
    slot -> gaze smoothing -> calibration mapping -> pointer smoothing -> dwell

    Threading: ``submit_sample`` / ``submit_no_face`` may be called from the
    tracker thread; everything else runs on the tick thread.
    """

    def __init__(
        self,
        config: AppConfig,
        viewport: Viewport,
        dispatcher: Optional[ClickDispatcher] = None,
    ):
        """
        Initialize controller.

        Args:
            config: Application configuration
            viewport: Initial viewport size
            dispatcher: Receives dwell clicks (None records them only)
        """
        self._config = config
        self._viewport = viewport
        self._dispatcher = dispatcher

        self._state_machine = StateMachine(initial_state=ScreenState.PERMISSION)
        self._calibrator = Calibrator(config.calibration, viewport)
        self._session: Optional[TrackingSession] = None

        self._throttle = TickThrottle(config.loop.min_tick_interval_ms)
        self._fps_counter = FPSCounter()

        self._last_result: Optional[TickResult] = None

        logger.info(
            f"Controller initialized for {viewport.width:.0f}x{viewport.height:.0f}"
        )

    # Tracking lifecycle

    def start_tracking(self, viewport: Optional[Viewport] = None) -> bool:
        """
        Start a tracking session and begin calibration.

        Args:
            viewport: Current viewport (used for calibration targets)

        Returns:
            True if started
        """
        if self._session is not None:
            logger.warning("Tracking already started")
            return False

        if not self._state_machine.can_transition_to(ScreenState.CALIBRATING):
            logger.warning(
                f"Cannot start tracking from state {self._state_machine.current_state}"
            )
            return False

        if viewport is not None:
            self._viewport = viewport

        self._session = TrackingSession(
            self._config.smoothing, self._config.dwell, self._dispatcher
        )
        self._throttle.reset()
        self._fps_counter.reset()

        self._calibrator.start(self._viewport)
        self._state_machine.transition_to(ScreenState.CALIBRATING)

        logger.info("Tracking started")
        return True

    def stop_tracking(self) -> bool:
        """
        Stop tracking and discard all in-flight state.

        No click can fire after this returns.

        Returns:
            True if a session was stopped
        """
        if self._session is None:
            return False

        self._teardown_session()
        self._calibrator.reset()
        self._state_machine.transition_to(ScreenState.PERMISSION)

        logger.info("Tracking stopped")
        return True

    def _teardown_session(self):
        if self._session is not None:
            self._session.close()
            self._session = None
        self._last_result = None

    def report_error(self, error_type: str, message: str, recoverable: bool = True):
        """
        Record an adapter failure (camera, tracker) and stop the session.

        Args:
            error_type: Short error category
            message: Human-readable description
            recoverable: Whether returning to PERMISSION can recover
        """
        logger.error(f"{error_type}: {message}")
        self._teardown_session()
        self._calibrator.reset()
        self._state_machine.set_error(
            ErrorInfo(error_type=error_type, message=message, recoverable=recoverable)
        )

    def clear_error(self) -> bool:
        """Leave the ERROR state."""
        if self._state_machine.current_state != ScreenState.ERROR:
            return False
        return self._state_machine.transition_to(ScreenState.PERMISSION)

    # Calibration

    def confirm_calibration_point(self) -> bool:
        """
        Record the current smoothed gaze for the active calibration target.

        Moves to the dashboard once the last target is recorded.

        Returns:
            True if a point was recorded
        """
        if self._session is None:
            return False

        gaze = self._session.smoothed_gaze
        if gaze is None:
            logger.debug("No gaze sample yet, calibration point not recorded")
            return False

        recorded = self._calibrator.record_point(gaze.average.x, gaze.average.y)

        if recorded and self._calibrator.is_complete:
            self._state_machine.transition_to(ScreenState.DASHBOARD)
            logger.info(
                "Calibration complete: "
                f"{'calibrated' if self._calibrator.is_calibrated else 'fallback'} mapping"
            )

        return recorded

    def skip_calibration(self) -> bool:
        """Abandon calibration and use the uncalibrated mapping."""
        if self._state_machine.current_state != ScreenState.CALIBRATING:
            return False

        self._calibrator.reset()
        self._state_machine.transition_to(ScreenState.DASHBOARD)
        logger.info("Calibration skipped, using uncalibrated mapping")
        return True

    def recalibrate(self, viewport: Optional[Viewport] = None) -> bool:
        """
        Discard the current model and start a new calibration session.

        Args:
            viewport: Current viewport (used for calibration targets)

        Returns:
            True if calibration restarted
        """
        if self._session is None or not self._state_machine.can_transition_to(
            ScreenState.CALIBRATING
        ):
            return False

        if viewport is not None:
            self._viewport = viewport

        self._calibrator.reset()
        self._session.reset_smoothing()
        self._calibrator.start(self._viewport)
        self._state_machine.transition_to(ScreenState.CALIBRATING)
        return True

    # Tracker input

    def submit_sample(self, sample: GazeSample):
        """Deliver a raw tracker sample (any thread)."""
        session = self._session
        if session is not None:
            session.slot.put(sample)

    def submit_no_face(self):
        """Signal that the tracker currently sees no face (any thread)."""
        session = self._session
        if session is not None:
            session.slot.mark_no_face()

    # Tick

    def tick(self, now_ms: float, viewport: Optional[Viewport] = None) -> Optional[TickResult]:
        """
        Run one pipeline step.

        Args:
            now_ms: Monotonic time in milliseconds
            viewport: Current viewport, if it changed

        Returns:
            TickResult, or None if throttled (too soon after the last tick)
        """
        if viewport is not None:
            self._viewport = viewport

        if self._session is None:
            return self._idle_result()

        if not self._throttle.should_run(now_ms):
            return None

        fps = self._fps_counter.tick(now_ms)
        session = self._session
        reading = session.read_gaze()

        if not reading.face_detected or reading.sample is None:
            # Hold the last pointer; dwell does not advance without a sample
            result = TickResult(
                screen_state=self.state,
                calibration=self._calibrator.snapshot(),
                face_detected=False,
                gaze=session.smoothed_gaze,
                pointer=session.pointer,
                dwell_progress=session.dwell_detector.progress,
                is_dwelling=session.dwell_detector.is_dwelling,
                fps=fps,
            )
            self._last_result = result
            return result

        gaze = reading.sample
        target = self._calibrator.map_to_screen(gaze.average.x, gaze.average.y, self._viewport)
        pointer = session.smooth_pointer(target)

        if reading.fresh or not self.dwell_enabled:
            update = session.update_dwell(pointer, now_ms, self.dwell_enabled)
        else:
            # Dwell only advances on a new tracker sample
            detector = session.dwell_detector
            update = DwellUpdate(progress=detector.progress, is_dwelling=detector.is_dwelling)

        result = TickResult(
            screen_state=self.state,
            calibration=self._calibrator.snapshot(),
            face_detected=True,
            gaze=gaze,
            pointer=pointer,
            dwell_progress=update.progress,
            is_dwelling=update.is_dwelling,
            clicked_at=update.clicked_at,
            fps=fps,
        )
        self._last_result = result
        return result

    def _idle_result(self) -> TickResult:
        return TickResult(
            screen_state=self.state,
            calibration=self._calibrator.snapshot(),
        )

    # Configuration

    def update_smoothing(self, smoothing: SmoothingConfig):
        """
        Change either smoothing factor at runtime.

        Raises:
            ValueError: If a factor is outside (0, 1]
        """
        smoothing.validate()
        self._config.smoothing = smoothing
        if self._session is not None:
            self._session.gaze_smoother.update_alpha(smoothing.gaze_alpha)
            self._session.pointer_smoother.update_alpha(smoothing.pointer_alpha)
        logger.debug(
            f"Smoothing updated: gaze={smoothing.gaze_alpha:.2f}, "
            f"pointer={smoothing.pointer_alpha:.2f}"
        )

    def update_dwell(self, dwell: DwellConfig):
        """
        Change dwell radius/duration/cooldown at runtime.

        Raises:
            ValueError: If a value is out of range; the current settings stay
        """
        dwell.validate()
        self._config.dwell = dwell
        if self._session is not None:
            self._session.dwell_detector.update_config(dwell)

    def update_viewport(self, viewport: Viewport):
        """Record a window resize; used for mapping from the next tick."""
        self._viewport = viewport
        logger.debug(f"Viewport updated: {viewport.width:.0f}x{viewport.height:.0f}")

    def shutdown(self):
        """Clean shutdown."""
        logger.info("Shutting down controller")
        self._teardown_session()
        self._calibrator.reset()
        self._state_machine.reset()

    # Properties

    @property
    def state(self) -> ScreenState:
        """Get current screen state."""
        return self._state_machine.current_state

    @property
    def error(self) -> Optional[ErrorInfo]:
        """Get error information if in ERROR state."""
        return self._state_machine.error

    @property
    def calibrator(self) -> Calibrator:
        """Get calibrator (for the UI to draw targets)."""
        return self._calibrator

    @property
    def is_tracking(self) -> bool:
        return self._session is not None

    @property
    def dwell_enabled(self) -> bool:
        """Dwell clicks only on the dashboard with a completed calibration."""
        return self.state == ScreenState.DASHBOARD and self._calibrator.is_complete

    @property
    def viewport(self) -> Viewport:
        return self._viewport

    @property
    def last_result(self) -> Optional[TickResult]:
        return self._last_result

    @property
    def fps(self) -> float:
        """Get current tick rate."""
        return self._fps_counter.fps
