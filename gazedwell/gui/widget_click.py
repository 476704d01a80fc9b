"""
Click delivery into the application's own Qt widget tree.
"""

from PyQt6.QtCore import QEvent, QPoint, QPointF, Qt
from PyQt6.QtGui import QMouseEvent
from PyQt6.QtWidgets import QApplication, QWidget

from gazedwell.os_control.click_dispatcher import ClickDispatcher
from gazedwell.vision.gaze_estimator import Point2
from gazedwell.utils.logger import get_logger

logger = get_logger(__name__)


class WidgetClickDispatcher(ClickDispatcher):
    """
    Resolve the topmost widget under a viewport point and click it.

    The overlay itself is transparent to mouse events, so the widget found
    is the one the user sees beneath the pointer.
    """

    def __init__(self, root: QWidget):
        """
        Args:
            root: Widget whose coordinate system the viewport uses
        """
        super().__init__()
        self._root = root

    def _deliver(self, point: Point2) -> bool:
        local = QPoint(int(round(point.x)), int(round(point.y)))
        global_pos = self._root.mapToGlobal(local)

        target = QApplication.widgetAt(global_pos)
        if target is None:
            return False

        target_pos = QPointF(target.mapFromGlobal(global_pos))
        global_posf = QPointF(global_pos)

        for event_type in (QEvent.Type.MouseButtonPress, QEvent.Type.MouseButtonRelease):
            buttons = (
                Qt.MouseButton.LeftButton
                if event_type == QEvent.Type.MouseButtonPress
                else Qt.MouseButton.NoButton
            )
            event = QMouseEvent(
                event_type,
                target_pos,
                global_posf,
                Qt.MouseButton.LeftButton,
                buttons,
                Qt.KeyboardModifier.NoModifier,
            )
            QApplication.sendEvent(target, event)

        if target.focusPolicy() != Qt.FocusPolicy.NoFocus:
            target.setFocus(Qt.FocusReason.MouseFocusReason)

        logger.debug(f"Clicked widget {type(target).__name__}")
        return True
