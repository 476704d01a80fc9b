"""
GazeDwell - Hands-free pointer control with dwell clicking

Main entry point.

Privacy & Security:
- No data sent over network
- All processing local
- No video recording

Usage:
    python -m gazedwell.main [--dwell-duration 1500] [--desktop-clicks]
"""

import argparse
import sys
from typing import List, Optional

from PyQt6.QtWidgets import QApplication

from gazedwell.core.config import AppConfig, get_default_config
from gazedwell.gui.app_window import MainWindow
from gazedwell.utils.logger import setup_logger, get_logger


def _build_arg_parser() -> argparse.ArgumentParser:
    defaults = get_default_config()

    parser = argparse.ArgumentParser(description="Control a pointer and click with your eyes")
    parser.add_argument("--camera-index", type=int, default=defaults.camera.camera_index, help="Camera index for OpenCV")
    parser.add_argument(
        "--gaze-alpha",
        type=float,
        default=defaults.smoothing.gaze_alpha,
        help="Gaze-space smoothing factor (lower is smoother)",
    )
    parser.add_argument(
        "--pointer-alpha",
        type=float,
        default=defaults.smoothing.pointer_alpha,
        help="Screen-space pointer smoothing factor (lower is smoother)",
    )
    parser.add_argument(
        "--dwell-radius",
        type=float,
        default=defaults.dwell.radius_px,
        help="Pixels the gaze may wander while dwelling",
    )
    parser.add_argument(
        "--dwell-duration",
        type=float,
        default=defaults.dwell.duration_ms,
        help="Dwell time before a click fires (ms)",
    )
    parser.add_argument(
        "--cooldown",
        type=float,
        default=defaults.dwell.cooldown_ms,
        help="Refractory time after a click (ms)",
    )
    parser.add_argument(
        "--desktop-clicks",
        action="store_true",
        help="Click on the desktop with the system pointer instead of inside the window",
    )
    parser.add_argument("--debug-overlay", action="store_true", help="Show gaze readout on the overlay")
    parser.add_argument("--log-level", default=defaults.log_level, help="DEBUG, INFO, WARNING or ERROR")
    return parser


def _config_from_args(args: argparse.Namespace) -> AppConfig:
    config = get_default_config()
    config.camera.camera_index = args.camera_index
    config.smoothing.gaze_alpha = args.gaze_alpha
    config.smoothing.pointer_alpha = args.pointer_alpha
    config.dwell.radius_px = args.dwell_radius
    config.dwell.duration_ms = args.dwell_duration
    config.dwell.cooldown_ms = args.cooldown
    config.ui.show_debug_overlay = args.debug_overlay
    config.log_level = args.log_level

    # Re-run validation on the overridden values
    return AppConfig(
        camera=config.camera,
        smoothing=config.smoothing,
        dwell=config.dwell,
        calibration=config.calibration,
        loop=config.loop,
        storage=config.storage,
        ui=config.ui,
        version=config.version,
        log_level=config.log_level,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = _build_arg_parser().parse_args(argv)

    try:
        config = _config_from_args(args)
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    setup_logger(
        name="gazedwell",
        level=config.log_level,
        log_file=config.storage.log_path,
        enable_file_logging=config.storage.enable_file_logging,
    )

    logger = get_logger(__name__)
    logger.info("=" * 60)
    logger.info("GazeDwell Starting")
    logger.info(f"Version: {config.version}")
    logger.info("=" * 60)

    app = QApplication(sys.argv[:1])
    app.setApplicationName("GazeDwell")
    app.setApplicationVersion(config.version)

    dispatcher = None
    if args.desktop_clicks:
        # pynput connects to the display on import
        from gazedwell.os_control.desktop_click import DesktopClickDispatcher

        geometry = app.primaryScreen().geometry()
        dispatcher = DesktopClickDispatcher(geometry.width(), geometry.height())

    window = MainWindow(config, dispatcher)
    window.show()

    if dispatcher is not None:
        origin = window.centralWidget().mapToGlobal(window.centralWidget().rect().topLeft())
        dispatcher.update_origin((origin.x(), origin.y()))

    logger.info("Application window created")

    exit_code = app.exec()

    logger.info("Application exiting")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
