"""
Desktop click delivery using pynput.

Moves the system pointer to the dwell centre and clicks whatever window
is under it. Viewport coordinates are translated by the overlay's screen
origin.
"""

from typing import Tuple

from pynput.mouse import Button, Controller as MouseController

from gazedwell.os_control.click_dispatcher import ClickDispatcher, ClickDispatchError
from gazedwell.vision.gaze_estimator import Point2
from gazedwell.utils.logger import get_logger

logger = get_logger(__name__)


class DesktopClickDispatcher(ClickDispatcher):
    """
    Click on the desktop with bounds checking.

    Safety features:
    - Screen bounds clamping
    - Enable/disable switch inherited from ClickDispatcher
    """

    def __init__(
        self,
        screen_width: int,
        screen_height: int,
        origin: Tuple[int, int] = (0, 0),
    ):
        """
        Initialize desktop dispatcher.

        Args:
            screen_width: Screen width in pixels
            screen_height: Screen height in pixels
            origin: Screen position of the viewport's top-left corner
        """
        super().__init__()
        self._screen_width = screen_width
        self._screen_height = screen_height
        self._origin = origin
        self._mouse = MouseController()

        logger.info(
            f"DesktopClickDispatcher initialized: {screen_width}x{screen_height}, "
            f"origin={origin}"
        )

    def _deliver(self, point: Point2) -> bool:
        x = int(round(point.x)) + self._origin[0]
        y = int(round(point.y)) + self._origin[1]

        x_clamped = max(0, min(x, self._screen_width - 1))
        y_clamped = max(0, min(y, self._screen_height - 1))

        if x != x_clamped or y != y_clamped:
            logger.debug(f"Click position clamped: ({x},{y}) -> ({x_clamped},{y_clamped})")

        try:
            self._mouse.position = (x_clamped, y_clamped)
            self._mouse.click(Button.left, 1)
        except Exception as e:
            raise ClickDispatchError(f"pynput click failed: {e}") from e

        return True

    def update_origin(self, origin: Tuple[int, int]):
        """Record a move of the viewport on screen."""
        self._origin = origin
