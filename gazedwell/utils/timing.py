"""
Timing utilities: monotonic clock, tick throttling and rate monitoring.

All pipeline timing is elapsed-time comparison in milliseconds against a
monotonic clock supplied by the caller.
"""

import time
from typing import Optional


def monotonic_ms() -> float:
    """Current monotonic time in milliseconds."""
    return time.perf_counter() * 1000.0


class FPSCounter:
    """
    Track and calculate ticks per second.

    Used to report the effective update rate of the tick loop.
    """

    def __init__(self, window_size: int = 30):
        """
        Initialize FPS counter.

        Args:
            window_size: Number of ticks to average over
        """
        self._window_size = window_size
        self._frame_times: list[float] = []
        self._last_time: Optional[float] = None

    def tick(self, now_ms: Optional[float] = None) -> float:
        """
        Register a tick and return current rate.

        Args:
            now_ms: Tick timestamp in milliseconds (defaults to monotonic_ms())

        Returns:
            Current rate (ticks per second)
        """
        current_time = monotonic_ms() if now_ms is None else now_ms

        if self._last_time is not None:
            self._frame_times.append(current_time - self._last_time)

            # Keep only last N intervals
            if len(self._frame_times) > self._window_size:
                self._frame_times.pop(0)

        self._last_time = current_time

        return self.fps

    @property
    def fps(self) -> float:
        """Current rate, or 0.0 if fewer than two ticks were recorded."""
        if not self._frame_times:
            return 0.0

        avg_frame_time = sum(self._frame_times) / len(self._frame_times)
        if avg_frame_time <= 0:
            return 0.0

        return 1000.0 / avg_frame_time

    def reset(self):
        """Reset counter."""
        self._frame_times.clear()
        self._last_time = None


class TickThrottle:
    """
    Allow at most one logical update per minimum interval.

    The display callback may fire faster than the pipeline should run;
    calls arriving inside the interval are refused.
    """

    def __init__(self, min_interval_ms: float):
        """
        Initialize throttle.

        Args:
            min_interval_ms: Minimum time between accepted ticks (milliseconds)
        """
        if min_interval_ms < 0:
            raise ValueError("min_interval_ms must be non-negative")

        self._min_interval_ms = min_interval_ms
        self._last_accepted: Optional[float] = None

    def should_run(self, now_ms: float) -> bool:
        """
        Check whether a tick at ``now_ms`` may run, and record it if so.

        Args:
            now_ms: Current monotonic time in milliseconds

        Returns:
            True if the tick is accepted
        """
        if (
            self._last_accepted is not None
            and now_ms - self._last_accepted < self._min_interval_ms
        ):
            return False

        self._last_accepted = now_ms
        return True

    @property
    def min_interval_ms(self) -> float:
        """Get minimum interval."""
        return self._min_interval_ms

    def reset(self):
        """Forget the last accepted tick."""
        self._last_accepted = None
