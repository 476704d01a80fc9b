"""
Shared fixtures for GazeDwell tests.
"""

import pytest

from gazedwell.os_control.click_dispatcher import ClickDispatcher
from gazedwell.vision.gaze_estimator import GazeSample, Point2


class RecordingClickDispatcher(ClickDispatcher):
    """Dispatcher that remembers every click instead of delivering it."""

    def __init__(self):
        super().__init__()
        self.clicks = []

    def _deliver(self, point: Point2) -> bool:
        self.clicks.append(point)
        return True


def make_sample(x: float, y: float) -> GazeSample:
    """Gaze sample with both irises at the same point."""
    point = Point2(x, y)
    return GazeSample(left_iris=point, right_iris=point, average=point)


@pytest.fixture
def dispatcher():
    return RecordingClickDispatcher()
