"""Clocks that tell simulation components what time it is.

Clock is the virtual clock owned by a Simulation: the event loop advances it
to each event's timestamp. WallClock reads the host's monotonic clock and is
used when clients run as real threads sleeping real delays.

Both expose the same ``now`` property, so a CapacityServer can classify
requests without knowing which substrate drives it.
"""

from __future__ import annotations

import time

from herdsim.core.temporal import Instant


class Clock:
    """Virtual time, advanced explicitly by the simulation loop."""

    def __init__(self, start_time: Instant = Instant.Epoch):
        self._current_time = start_time

    @property
    def now(self) -> Instant:
        return self._current_time

    def update(self, time: Instant) -> None:
        self._current_time = time


class WallClock:
    """Monotonic wall-clock time, reported relative to construction."""

    def __init__(self):
        self._origin_ns = time.monotonic_ns()

    @property
    def now(self) -> Instant:
        return Instant(time.monotonic_ns() - self._origin_ns)
