"""
Tests for tracker thread shutdown.
"""

import pytest

pytest.importorskip("PyQt6.QtWidgets")

from gazedwell.gui.app_window import join_worker


class FakeWorker:
    """Records the calls made on a tracker thread."""

    def __init__(self):
        self.calls = []

    def stop(self):
        self.calls.append(("stop",))

    def wait(self, *args):
        self.calls.append(("wait",) + args)
        return True


class TestJoinWorker:
    """Tests for join_worker."""

    def test_stops_then_waits_without_timeout(self):
        worker = FakeWorker()

        join_worker(worker)

        assert worker.calls == [("stop",), ("wait",)]
