"""
Single-slot holder for the latest tracker sample.

The tracker may deliver samples from another thread at its own cadence;
the tick loop reads whatever is newest. No queue: the last write wins.
"""

import threading
from dataclasses import dataclass
from typing import Optional

from gazedwell.vision.gaze_estimator import GazeSample


@dataclass(frozen=True)
class SlotReading:
    """Snapshot of the slot at read time."""

    sample: Optional[GazeSample]  # None while no face is detected
    sequence: int  # Increments on every write, including "no face"


class LatestSampleSlot:
    """Thread-safe last-write-wins holder for one gaze sample."""

    def __init__(self):
        self._lock = threading.Lock()
        self._sample: Optional[GazeSample] = None
        self._sequence = 0

    def put(self, sample: GazeSample):
        """Store a new raw sample, replacing any unread one."""
        with self._lock:
            self._sample = sample
            self._sequence += 1

    def mark_no_face(self):
        """Record that the tracker currently sees no face."""
        with self._lock:
            self._sample = None
            self._sequence += 1

    def read(self) -> SlotReading:
        """Read the current sample without consuming it."""
        with self._lock:
            return SlotReading(sample=self._sample, sequence=self._sequence)

    def clear(self):
        """Drop the held sample."""
        with self._lock:
            self._sample = None
            self._sequence += 1

    @property
    def has_sample(self) -> bool:
        with self._lock:
            return self._sample is not None
