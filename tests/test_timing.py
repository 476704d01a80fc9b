"""
Tests for tick throttling, rate counting and the latest-sample slot.
"""

import threading

import pytest

from conftest import make_sample
from gazedwell.utils.timing import FPSCounter, TickThrottle
from gazedwell.vision.sample_slot import LatestSampleSlot


class TestTickThrottle:
    """Tests for TickThrottle."""

    def test_first_tick_runs(self):
        assert TickThrottle(16).should_run(0.0)

    def test_refuses_inside_interval(self):
        throttle = TickThrottle(16)
        throttle.should_run(100.0)

        assert not throttle.should_run(110.0)
        assert not throttle.should_run(115.9)
        assert throttle.should_run(116.0)
        assert not throttle.should_run(120.0)

    def test_refused_tick_does_not_move_window(self):
        throttle = TickThrottle(16)
        throttle.should_run(0.0)
        throttle.should_run(10.0)

        assert throttle.should_run(16.0)

    def test_reset(self):
        throttle = TickThrottle(16)
        throttle.should_run(100.0)
        throttle.reset()

        assert throttle.should_run(101.0)

    def test_negative_interval(self):
        with pytest.raises(ValueError):
            TickThrottle(-1)


class TestFPSCounter:
    """Tests for FPSCounter."""

    def test_no_intervals(self):
        counter = FPSCounter()

        assert counter.tick(0.0) == 0.0

    def test_rate(self):
        counter = FPSCounter()
        counter.tick(0.0)
        counter.tick(20.0)

        assert counter.tick(40.0) == pytest.approx(50.0)

    def test_window(self):
        counter = FPSCounter(window_size=2)
        for now in [0.0, 100.0, 110.0, 120.0]:
            counter.tick(now)

        assert counter.fps == pytest.approx(100.0)

    def test_reset(self):
        counter = FPSCounter()
        counter.tick(0.0)
        counter.tick(10.0)
        counter.reset()

        assert counter.fps == 0.0


class TestLatestSampleSlot:
    """Tests for LatestSampleSlot."""

    def test_last_write_wins(self):
        slot = LatestSampleSlot()
        slot.put(make_sample(0.1, 0.1))
        slot.put(make_sample(0.9, 0.9))

        reading = slot.read()

        assert reading.sample == make_sample(0.9, 0.9)
        assert reading.sequence == 2

    def test_read_does_not_consume(self):
        slot = LatestSampleSlot()
        slot.put(make_sample(0.5, 0.5))

        assert slot.read() == slot.read()

    def test_no_face(self):
        slot = LatestSampleSlot()
        slot.put(make_sample(0.5, 0.5))
        slot.mark_no_face()

        reading = slot.read()

        assert reading.sample is None
        assert not slot.has_sample
        assert reading.sequence == 2

    def test_concurrent_writers(self):
        slot = LatestSampleSlot()

        def writer():
            for i in range(500):
                slot.put(make_sample(i / 500, i / 500))

        threads = [threading.Thread(target=writer) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert slot.read().sequence == 2000
        assert slot.has_sample
