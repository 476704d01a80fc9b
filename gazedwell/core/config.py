"""
Configuration management for GazeDwell.

All application configuration with sensible defaults.
Uses dataclasses for type safety and validation.
"""

from dataclasses import dataclass, field
from typing import Tuple
import os
from pathlib import Path


@dataclass
class CameraConfig:
    """Camera capture and face tracking configuration."""

    camera_index: int = 0  # Default camera
    frame_width: int = 640
    frame_height: int = 480
    target_fps: int = 30
    warmup_frames: int = 5  # Frames to skip after camera init

    # Front-facing cameras are mirrored; flip frames before landmark detection
    mirror: bool = False

    # MediaPipe Face Mesh thresholds
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5


@dataclass
class SmoothingConfig:
    """Two-stage exponential smoothing configuration."""

    # Gaze-space EMA (camera coordinates), lower = smoother but slower
    gaze_alpha: float = 0.3

    # Screen-space EMA for the rendered pointer; higher settles faster for dwell
    pointer_alpha: float = 0.35

    def __post_init__(self):
        self.validate()

    def validate(self):
        """Raise ValueError if a factor is outside (0, 1]."""
        if not 0.0 < self.gaze_alpha <= 1.0:
            raise ValueError("gaze_alpha must be in (0.0, 1.0]")

        if not 0.0 < self.pointer_alpha <= 1.0:
            raise ValueError("pointer_alpha must be in (0.0, 1.0]")


@dataclass
class DwellConfig:
    """Dwell-click configuration."""

    radius_px: float = 50.0  # How far gaze may wander and still count as dwelling
    duration_ms: float = 800.0  # Dwell time before a click fires
    cooldown_ms: float = 500.0  # Refractory period after a click

    # Progress above which the pointer is reported as dwelling (avoids flicker)
    hysteresis: float = 0.1

    def __post_init__(self):
        self.validate()

    def validate(self):
        """Raise ValueError if a value is out of range."""
        if self.radius_px <= 0:
            raise ValueError("dwell radius must be positive")

        if self.duration_ms <= 0:
            raise ValueError("dwell duration must be positive")

        if self.cooldown_ms < 0:
            raise ValueError("cooldown must be non-negative")

        if not 0.0 <= self.hysteresis < 1.0:
            raise ValueError("hysteresis must be in [0.0, 1.0)")


@dataclass
class CalibrationConfig:
    """Calibration grid configuration."""

    # Grid fractions of viewport width/height; targets are row-major
    grid_fractions: Tuple[float, ...] = (0.1, 0.5, 0.9)

    # |det(X^T X)| below this is treated as a failed fit
    singular_epsilon: float = 1e-10

    @property
    def target_count(self) -> int:
        return len(self.grid_fractions) ** 2


@dataclass
class LoopConfig:
    """Tick loop configuration."""

    target_fps: int = 60  # Display callback rate
    min_tick_interval_ms: float = 16.0  # At most one logical update per interval

    @property
    def timer_interval_ms(self) -> int:
        return max(1, int(1000 / self.target_fps))


@dataclass
class StorageConfig:
    """Local data configuration (logs only)."""

    data_dir: Path = field(default_factory=lambda: Path.home() / ".gazedwell")
    log_filename: str = "gazedwell.log"

    # Enable file logging (OFF by default for privacy)
    enable_file_logging: bool = False

    @property
    def log_path(self) -> Path:
        """Get full path to log file."""
        return Path(self.data_dir) / self.log_filename


@dataclass
class UIConfig:
    """User interface configuration."""

    window_title: str = "GazeDwell - Hands-free Pointer"
    window_width: int = 900
    window_height: int = 640

    # Calibration target dot radius (pixels)
    target_radius: int = 18

    # Pointer dot and dwell ring radii (pixels)
    pointer_radius: int = 8
    dwell_ring_radius: int = 16

    # Show raw/smoothed gaze readout on the overlay
    show_debug_overlay: bool = False


@dataclass
class AppConfig:
    """Main application configuration."""

    camera: CameraConfig = field(default_factory=CameraConfig)
    smoothing: SmoothingConfig = field(default_factory=SmoothingConfig)
    dwell: DwellConfig = field(default_factory=DwellConfig)
    calibration: CalibrationConfig = field(default_factory=CalibrationConfig)
    loop: LoopConfig = field(default_factory=LoopConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    ui: UIConfig = field(default_factory=UIConfig)

    # Application version
    version: str = "0.1.0"

    # Log level from environment or default to WARNING
    log_level: str = field(
        default_factory=lambda: os.getenv("GAZEDWELL_LOG_LEVEL", "WARNING")
    )

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self):
        """Validate configuration parameters."""
        # Fields may have been changed after construction
        self.smoothing.validate()
        self.dwell.validate()

        # Calibration
        if len(self.calibration.grid_fractions) < 2:
            raise ValueError("calibration grid needs at least 2 fractions per axis")

        if any(not 0.0 <= f <= 1.0 for f in self.calibration.grid_fractions):
            raise ValueError("calibration grid fractions must be in [0.0, 1.0]")

        # Loop
        if self.loop.target_fps < 1 or self.loop.target_fps > 240:
            raise ValueError("target_fps must be between 1 and 240")

        if self.loop.min_tick_interval_ms < 0:
            raise ValueError("min_tick_interval_ms must be non-negative")

        # Camera
        if self.camera.target_fps < 1 or self.camera.target_fps > 120:
            raise ValueError("camera target_fps must be between 1 and 120")


def get_default_config() -> AppConfig:
    """
    Get default application configuration.

    Returns:
        AppConfig instance with default values
    """
    return AppConfig()
