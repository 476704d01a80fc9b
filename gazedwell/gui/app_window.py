"""
Main application window.

Threading model:
- Main thread: UI event loop and the tick timer (all pipeline state)
- Worker thread: camera capture and iris tracking
- Communication: the controller's single-slot sample holder, Qt signals
"""

from typing import Optional

from PyQt6.QtWidgets import (
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)
from PyQt6.QtCore import QThread, QTimer, Qt, pyqtSignal
from PyQt6.QtGui import QFont, QKeySequence, QShortcut

from gazedwell.core.config import AppConfig
from gazedwell.core.controller import Controller, TickResult
from gazedwell.core.state import ScreenState
from gazedwell.gui.overlay import GazeOverlay
from gazedwell.gui.widget_click import WidgetClickDispatcher
from gazedwell.os_control.click_dispatcher import ClickDispatcher
from gazedwell.vision.camera import Camera, CameraError
from gazedwell.vision.face_tracker import IrisTracker
from gazedwell.vision.mapper import Viewport
from gazedwell.utils.timing import monotonic_ms
from gazedwell.utils.logger import get_logger

logger = get_logger(__name__)


class TrackerWorker(QThread):
    """
    Worker thread for camera capture and iris tracking.

    Writes samples into the controller's slot; NEVER touches the UI or the
    pipeline state directly.
    """

    error_occurred = pyqtSignal(str)

    def __init__(self, controller: Controller, config: AppConfig, parent=None):
        super().__init__(parent)
        self._controller = controller
        self._config = config
        self._running = False

    def run(self):
        """Capture loop."""
        logger.info("Tracker worker started")
        self._running = True

        tracker: Optional[IrisTracker] = None

        try:
            with Camera(self._config.camera) as camera:
                tracker = IrisTracker(self._config.camera)

                while self._running:
                    image = camera.read_rgb()
                    if image is None:
                        self._controller.submit_no_face()
                        self.msleep(10)
                        continue

                    sample = tracker.process_frame(image)
                    if sample is None:
                        self._controller.submit_no_face()
                    else:
                        self._controller.submit_sample(sample)

        except CameraError as e:
            self.error_occurred.emit(str(e))

        except Exception as e:
            logger.error(f"Tracker worker error: {e}")
            self.error_occurred.emit(str(e))

        finally:
            if tracker is not None:
                tracker.close()
            logger.info("Tracker worker stopped")

    def stop(self):
        """Ask the capture loop to finish."""
        self._running = False


def join_worker(worker: TrackerWorker):
    """
    Stop a tracker thread and block until it has exited.

    No timeout: a QThread must not be destroyed while its thread runs.
    """
    worker.stop()
    worker.wait()


class MainWindow(QMainWindow):
    """
    Main application window.

    Screens: permission -> calibration overlay -> dashboard.
    """

    def __init__(self, config: AppConfig, dispatcher: Optional[ClickDispatcher] = None):
        """
        Initialize main window.

        Args:
            config: Application configuration
            dispatcher: Click delivery; defaults to clicking this window's widgets
        """
        super().__init__()

        self._config = config
        self._worker: Optional[TrackerWorker] = None
        self._click_count = 0

        self._init_ui()

        self._dispatcher = dispatcher or WidgetClickDispatcher(self._stack)
        self._controller = Controller(config, self._viewport(), self._dispatcher)

        # Display callback, throttled further inside the controller
        self._tick_timer = QTimer(self)
        self._tick_timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._tick_timer.setInterval(config.loop.timer_interval_ms)
        self._tick_timer.timeout.connect(self._on_tick)

        self._setup_keyboard_shortcuts()
        self._show_screen(ScreenState.PERMISSION)

    def _setup_keyboard_shortcuts(self):
        """Space confirms a calibration point, Esc skips calibration."""
        self._confirm_shortcut = QShortcut(QKeySequence(Qt.Key.Key_Space), self)
        self._confirm_shortcut.activated.connect(self._on_confirm_point)

        self._skip_shortcut = QShortcut(QKeySequence(Qt.Key.Key_Escape), self)
        self._skip_shortcut.activated.connect(self._on_skip_calibration)

    def _init_ui(self):
        """Initialize UI components."""
        self.setWindowTitle(self._config.ui.window_title)
        self.resize(self._config.ui.window_width, self._config.ui.window_height)

        self._stack = QStackedWidget()
        self._stack.addWidget(self._create_permission_page())
        self._stack.addWidget(self._create_dashboard_page())
        self.setCentralWidget(self._stack)

        self._overlay = GazeOverlay(self._config.ui, self._stack)
        self._overlay.setGeometry(self._stack.rect())
        self._overlay.raise_()

    def _create_permission_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.setSpacing(16)

        title = QLabel("Eye Control")
        title_font = QFont()
        title_font.setPointSize(22)
        title_font.setBold(True)
        title.setFont(title_font)
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)

        text = QLabel(
            "Control this window using only your eyes.\n"
            "Your camera feed is processed locally and never stored or sent anywhere."
        )
        text.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._error_label = QLabel("")
        self._error_label.setStyleSheet("color: #c0392b;")
        self._error_label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._start_btn = QPushButton("Enable Eye Tracking")
        self._start_btn.setMinimumHeight(40)
        self._start_btn.clicked.connect(self._on_start_clicked)

        layout.addWidget(title)
        layout.addWidget(text)
        layout.addWidget(self._error_label)
        layout.addWidget(self._start_btn)
        return page

    def _create_dashboard_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)

        header = QHBoxLayout()
        self._status_label = QLabel("Dwell on a tile to click it")
        self._status_label.setStyleSheet("color: #555;")
        self._recalibrate_btn = QPushButton("Recalibrate")
        self._recalibrate_btn.clicked.connect(self._on_recalibrate_clicked)
        self._stop_btn = QPushButton("Stop Tracking")
        self._stop_btn.clicked.connect(self._on_stop_clicked)
        header.addWidget(self._status_label)
        header.addStretch()
        header.addWidget(self._recalibrate_btn)
        header.addWidget(self._stop_btn)
        layout.addLayout(header)

        grid = QGridLayout()
        grid.setSpacing(24)
        for i, name in enumerate(("Messages", "Music", "Browser", "Photos", "Notes", "Settings")):
            tile = QPushButton(name)
            tile.setMinimumSize(160, 120)
            tile.clicked.connect(lambda _checked=False, n=name: self._on_tile_clicked(n))
            grid.addWidget(tile, i // 3, i % 3)
        layout.addLayout(grid)

        return page

    def _viewport(self) -> Viewport:
        size = self._stack.size()
        return Viewport(max(1, size.width()), max(1, size.height()))

    def _show_screen(self, state: ScreenState):
        if state in (ScreenState.PERMISSION, ScreenState.ERROR):
            self._stack.setCurrentIndex(0)
            self._overlay.clear()
        else:
            self._stack.setCurrentIndex(1)

        error = self._controller.error
        self._error_label.setText(f"Error: {error.message}" if error else "")

    # Slots

    def _on_start_clicked(self):
        self._controller.clear_error()
        if not self._controller.start_tracking(self._viewport()):
            return

        self._worker = TrackerWorker(self._controller, self._config)
        self._worker.error_occurred.connect(self._on_worker_error)
        self._worker.start()

        self._tick_timer.start()
        self._show_screen(self._controller.state)

    def _on_stop_clicked(self):
        self._stop_tracking()
        self._show_screen(self._controller.state)

    def _stop_tracking(self):
        self._tick_timer.stop()
        self._controller.stop_tracking()
        self._join_worker()

    def _join_worker(self):
        """Stop the tracker thread and keep it referenced until it has exited."""
        if self._worker is None:
            return

        join_worker(self._worker)
        self._worker = None

    def _on_recalibrate_clicked(self):
        self._controller.recalibrate(self._viewport())

    def _on_confirm_point(self):
        self._controller.confirm_calibration_point()

    def _on_skip_calibration(self):
        self._controller.skip_calibration()

    def _on_tile_clicked(self, name: str):
        self._click_count += 1
        self._status_label.setText(f"Opened {name} ({self._click_count} clicks)")
        logger.info(f"Tile activated: {name}")

    def _on_worker_error(self, message: str):
        self._tick_timer.stop()
        self._controller.report_error("CameraError", message)
        self._join_worker()
        self._show_screen(self._controller.state)

    def _on_tick(self):
        result: Optional[TickResult] = self._controller.tick(monotonic_ms(), self._viewport())
        if result is None:
            return

        if self._stack.currentIndex() == 0 and result.screen_state in (
            ScreenState.CALIBRATING,
            ScreenState.DASHBOARD,
        ):
            self._show_screen(result.screen_state)

        self._overlay.show_result(result, self._controller.calibrator.targets)

    # Qt events

    def resizeEvent(self, event):
        super().resizeEvent(event)
        if hasattr(self, "_overlay"):
            self._overlay.setGeometry(self._stack.rect())
        if hasattr(self, "_controller"):
            self._controller.update_viewport(self._viewport())

    def closeEvent(self, event):
        """Stop tracking before closing."""
        self._stop_tracking()
        self._controller.shutdown()
        event.accept()
