"""
Dwell-click detection.

Holding gaze within a small radius for long enough fires a click at the
dwell centre. A cooldown after each click suppresses accidental repeats.
"""

from dataclasses import dataclass
from typing import Optional

from gazedwell.core.config import DwellConfig
from gazedwell.os_control.click_dispatcher import ClickDispatcher
from gazedwell.vision.gaze_estimator import Point2
from gazedwell.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class DwellState:
    """Mutable dwell state; ``center is None`` means Idle."""

    center: Optional[Point2] = None
    start_time: Optional[float] = None
    progress: float = 0.0
    is_dwelling: bool = False
    last_click_time: Optional[float] = None

    def clear(self):
        """Return to Idle, keeping the last click time."""
        self.center = None
        self.start_time = None
        self.progress = 0.0
        self.is_dwelling = False


@dataclass(frozen=True)
class DwellUpdate:
    """Outcome of one detector tick."""

    progress: float  # Progress reached this tick (1.0 on the click tick)
    is_dwelling: bool
    clicked_at: Optional[Point2] = None
    in_cooldown: bool = False

    @property
    def clicked(self) -> bool:
        return self.clicked_at is not None


class DwellClickDetector:
    """
    Dwell-click state machine.

    States:
        Idle -> Dwelling(center, start_time) -> (click) -> Idle

    Per tick:
    1. Disabled: force Idle
    2. Inside cooldown: ignore the sample entirely
    3. Idle: start dwelling at the sample
    4. Dwelling: restart if the sample left the radius, otherwise advance
       progress and click once it reaches 1
    """

    def __init__(
        self,
        config: Optional[DwellConfig] = None,
        dispatcher: Optional[ClickDispatcher] = None,
    ):
        """
        Initialize detector.

        Args:
            config: Dwell configuration (defaults: 50px, 800ms, 500ms cooldown)
            dispatcher: Receives the click; None only records it
        """
        self._config = config or DwellConfig()
        self._dispatcher = dispatcher
        self._state = DwellState()
        self._click_count = 0

        logger.info(
            f"DwellClickDetector initialized: radius={self._config.radius_px:.0f}px, "
            f"duration={self._config.duration_ms:.0f}ms, "
            f"cooldown={self._config.cooldown_ms:.0f}ms"
        )

    def update(self, x: float, y: float, now: float, enabled: bool = True) -> DwellUpdate:
        """
        Feed one pointer position.

        Args:
            x: Pointer x (pixels)
            y: Pointer y (pixels)
            now: Monotonic time (milliseconds)
            enabled: Whether dwell clicking is currently allowed

        Returns:
            DwellUpdate for this tick
        """
        state = self._state

        if not enabled:
            state.clear()
            return DwellUpdate(progress=0.0, is_dwelling=False)

        if (
            state.last_click_time is not None
            and now - state.last_click_time < self._config.cooldown_ms
        ):
            return DwellUpdate(
                progress=state.progress, is_dwelling=state.is_dwelling, in_cooldown=True
            )

        point = Point2(x, y)

        if state.center is None:
            self._begin(point, now)
            return DwellUpdate(progress=0.0, is_dwelling=False)

        if point.distance_to(state.center) > self._config.radius_px:
            # Gaze moved away: restart from scratch at the new point
            self._begin(point, now)
            return DwellUpdate(progress=0.0, is_dwelling=False)

        progress = min(1.0, (now - state.start_time) / self._config.duration_ms)
        state.progress = max(state.progress, progress)
        state.is_dwelling = state.progress > self._config.hysteresis

        if state.progress >= 1.0:
            return self._fire(now)

        return DwellUpdate(progress=state.progress, is_dwelling=state.is_dwelling)

    def _begin(self, point: Point2, now: float):
        self._state.center = point
        self._state.start_time = now
        self._state.progress = 0.0
        self._state.is_dwelling = False

    def _fire(self, now: float) -> DwellUpdate:
        center = self._state.center
        self._state.last_click_time = now
        self._state.clear()
        self._click_count += 1

        logger.debug(f"Dwell complete at ({center.x:.0f}, {center.y:.0f})")

        if self._dispatcher is not None:
            self._dispatcher.dispatch_click(center)

        return DwellUpdate(progress=1.0, is_dwelling=True, clicked_at=center)

    def reset(self):
        """Discard dwell progress and cooldown."""
        self._state = DwellState()
        logger.debug("Dwell detector reset")

    def update_config(self, config: DwellConfig):
        """Replace the configuration, keeping the current state."""
        config.validate()
        self._config = config
        logger.debug(
            f"Dwell config updated: radius={config.radius_px:.0f}px, "
            f"duration={config.duration_ms:.0f}ms"
        )

    @property
    def state(self) -> DwellState:
        """Get a copy of the current state."""
        s = self._state
        return DwellState(
            center=s.center,
            start_time=s.start_time,
            progress=s.progress,
            is_dwelling=s.is_dwelling,
            last_click_time=s.last_click_time,
        )

    @property
    def progress(self) -> float:
        return self._state.progress

    @property
    def is_dwelling(self) -> bool:
        return self._state.is_dwelling

    @property
    def center(self) -> Optional[Point2]:
        return self._state.center

    @property
    def click_count(self) -> int:
        return self._click_count
