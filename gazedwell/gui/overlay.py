"""
Overlay widget drawing calibration targets and the gaze pointer.
"""

from typing import List, Optional

from PyQt6.QtCore import QRectF, Qt
from PyQt6.QtGui import QColor, QPainter, QPen
from PyQt6.QtWidgets import QWidget

from gazedwell.core.config import UIConfig
from gazedwell.core.controller import TickResult
from gazedwell.core.state import ScreenState
from gazedwell.vision.calibrator import CalibrationTarget

ACTIVE_COLOR = QColor(168, 85, 247)
COMPLETED_COLOR = QColor(34, 197, 94)
PENDING_COLOR = QColor(255, 255, 255, 60)
POINTER_COLOR = QColor(236, 72, 153)


class GazeOverlay(QWidget):
    """
    Transparent overlay on top of the main window content.

    Mouse events pass through to the widgets below so dwell clicks reach
    them.
    """

    def __init__(self, config: UIConfig, parent=None):
        super().__init__(parent)
        self._config = config

        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents)
        self.setAttribute(Qt.WidgetAttribute.WA_NoSystemBackground)

        self._result: Optional[TickResult] = None
        self._targets: List[CalibrationTarget] = []

    def show_result(self, result: TickResult, targets: List[CalibrationTarget]):
        """
        Update with the latest tick.

        Args:
            result: Latest pipeline snapshot
            targets: Calibration targets of the current session
        """
        self._result = result
        self._targets = targets
        self.update()

    def clear(self):
        self._result = None
        self._targets = []
        self.update()

    def paintEvent(self, event):
        """Paint calibration screen or pointer."""
        if self._result is None:
            return

        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        if self._result.screen_state == ScreenState.CALIBRATING:
            self._paint_calibration(painter)
        elif self._result.screen_state == ScreenState.DASHBOARD:
            self._paint_pointer(painter)

        if self._config.show_debug_overlay:
            self._paint_debug(painter)

    def _paint_calibration(self, painter: QPainter):
        snapshot = self._result.calibration
        painter.fillRect(self.rect(), QColor(0, 0, 0, 200))

        radius = self._config.target_radius
        for target in self._targets:
            if target.index in snapshot.completed_indices:
                color = COMPLETED_COLOR
            elif target.index == snapshot.current_index:
                color = ACTIVE_COLOR
            else:
                color = PENDING_COLOR

            painter.setPen(QPen(QColor(255, 255, 255), 2))
            painter.setBrush(color)
            painter.drawEllipse(
                QRectF(target.screen.x - radius, target.screen.y - radius, radius * 2, radius * 2)
            )

        painter.setPen(QColor(255, 255, 255))
        font = painter.font()
        font.setPointSize(16)
        painter.setFont(font)
        painter.drawText(
            0,
            40,
            self.width(),
            60,
            Qt.AlignmentFlag.AlignCenter,
            "Look at the glowing dot and press SPACE\nESC skips calibration (simple mapping)",
        )

        done = len(snapshot.completed_indices)
        painter.drawText(
            0,
            self.height() - 80,
            self.width(),
            40,
            Qt.AlignmentFlag.AlignCenter,
            f"Progress: {done} / {snapshot.total}",
        )

    def _paint_pointer(self, painter: QPainter):
        pointer = self._result.pointer
        if pointer is None:
            return

        ring = self._config.dwell_ring_radius
        ring_rect = QRectF(pointer.x - ring, pointer.y - ring, ring * 2, ring * 2)

        # Background ring
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.setPen(QPen(QColor(255, 255, 255, 70), 3))
        painter.drawEllipse(ring_rect)

        # Progress arc, clockwise from 12 o'clock (Qt angles are 1/16 degree)
        progress = self._result.dwell_progress
        if progress > 0:
            alpha = 255 if self._result.is_dwelling else 80
            arc_color = QColor(POINTER_COLOR)
            arc_color.setAlpha(alpha)
            painter.setPen(QPen(arc_color, 3))
            painter.drawArc(ring_rect, 90 * 16, int(-360 * 16 * progress))

        dot = self._config.pointer_radius
        if self._result.is_dwelling:
            dot = int(dot * 1.2)
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(POINTER_COLOR)
        painter.drawEllipse(QRectF(pointer.x - dot, pointer.y - dot, dot * 2, dot * 2))

    def _paint_debug(self, painter: QPainter):
        result = self._result
        lines = [f"Tick: {result.fps:.0f}/s", f"Face: {'yes' if result.face_detected else 'no'}"]
        if result.gaze is not None:
            lines.append(f"Eye: ({result.gaze.average.x:.4f}, {result.gaze.average.y:.4f})")
        if result.pointer is not None:
            lines.append(f"Screen: ({result.pointer.x:.0f}, {result.pointer.y:.0f})")
        lines.append(f"Dwell: {result.dwell_progress * 100:.0f}%")

        painter.setPen(QColor(200, 200, 200))
        font = painter.font()
        font.setPointSize(9)
        painter.setFont(font)
        painter.drawText(
            self.width() - 240,
            self.height() - 120,
            230,
            110,
            Qt.AlignmentFlag.AlignLeft,
            "\n".join(lines),
        )
