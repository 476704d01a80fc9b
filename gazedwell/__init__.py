"""
GazeDwell - Hands-free pointer control and dwell clicking from gaze.

A desktop application that turns per-frame iris landmarks from a webcam
into a stable on-screen pointer and a debounced click signal.

Pipeline:
- Exponential smoothing of raw gaze samples (camera space)
- Personalized 9-point affine calibration (least squares)
- Gaze-to-screen mapping with an uncalibrated fallback
- Second smoothing stage in screen space
- Dwell-click detection with hysteresis and cooldown

Privacy First:
- All processing happens locally
- No video recording
- Calibration lives in memory for the session only
"""

__version__ = "0.1.0"
__author__ = "GazeDwell Team"
__license__ = "MIT"
