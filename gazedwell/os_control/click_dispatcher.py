"""
Click dispatch capability.

The dwell detector only knows "click at this screen point"; resolving what
lives at that point and delivering the click belongs to an implementation
of this interface (desktop pointer, widget tree, ...).
"""

from gazedwell.vision.gaze_estimator import Point2
from gazedwell.utils.logger import get_logger

logger = get_logger(__name__)


class ClickDispatchError(Exception):
    """Click delivery errors."""

    pass


class ClickDispatcher:
    """
    Deliver a click-equivalent signal to whatever occupies a screen point.

    Subclasses implement ``_deliver``. Delivery failures are logged and
    reported as False, never raised to the caller.
    """

    def __init__(self):
        self._enabled = True
        self._total_clicks = 0
        self._failed_clicks = 0

    def dispatch_click(self, point: Point2) -> bool:
        """
        Click at a screen position.

        Args:
            point: Screen position in pixels

        Returns:
            True if a target received the click
        """
        if not self._enabled:
            logger.debug(f"Click at ({point.x:.0f}, {point.y:.0f}) skipped: disabled")
            return False

        try:
            delivered = self._deliver(point)
        except ClickDispatchError as e:
            self._failed_clicks += 1
            logger.error(f"Failed to dispatch click: {e}")
            return False

        if delivered:
            self._total_clicks += 1
            logger.info(f"Dwell click dispatched at ({point.x:.0f}, {point.y:.0f})")
        else:
            logger.debug(f"No click target at ({point.x:.0f}, {point.y:.0f})")

        return delivered

    def _deliver(self, point: Point2) -> bool:
        raise NotImplementedError

    def enable(self):
        """Enable click delivery."""
        self._enabled = True
        logger.info("Click dispatch enabled")

    def disable(self):
        """Disable click delivery (emergency stop)."""
        self._enabled = False
        logger.info("Click dispatch disabled")

    def is_enabled(self) -> bool:
        return self._enabled

    @property
    def statistics(self) -> dict:
        """Get click statistics."""
        return {
            "total_clicks": self._total_clicks,
            "failed_clicks": self._failed_clicks,
        }
