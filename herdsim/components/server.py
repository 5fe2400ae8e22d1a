"""A capacity-limited service recovering from an outage.

CapacityServer admits at most ``capacity`` requests in each one-second window
measured from its start instant, and rejects everything during the initial
``outage``. It is a fixed-window admission policy in the spirit of
FixedWindowPolicy, but it also keeps the per-second request and acceptance
counts that the recovery report is built from.

Clients call attempt() concurrently (from simulated processes or from real
threads), so the classification and both counter updates happen inside a
single critical section. Holding one lock for the whole decision is what keeps
``accepted[s] <= capacity`` under concurrent access.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

import pandas as pd

from herdsim.core.temporal import Duration, Instant

if TYPE_CHECKING:
    from herdsim.core.clock import Clock, WallClock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServerStats:
    """Immutable per-second view of a server's counters.

    ``requests[s]`` and ``accepted[s]`` count calls made during whole second
    ``s`` after start. Seconds past the end of the tuples had no requests.
    """
    capacity: int
    outage: Duration
    requests: tuple[int, ...] = ()
    accepted: tuple[int, ...] = ()

    @property
    def outage_seconds(self) -> int:
        return self.outage.whole_seconds()

    @property
    def last_second(self) -> int:
        """Last second with a recorded request, or -1 when nothing was recorded."""
        for s in range(len(self.requests) - 1, -1, -1):
            if self.requests[s] > 0:
                return s
        return -1

    @property
    def total_requests(self) -> int:
        return sum(self.requests)

    @property
    def total_accepted(self) -> int:
        return sum(self.accepted)

    def requests_at(self, second: int) -> int:
        if 0 <= second < len(self.requests):
            return self.requests[second]
        return 0

    def accepted_at(self, second: int) -> int:
        if 0 <= second < len(self.accepted):
            return self.accepted[second]
        return 0

    def rejected_at(self, second: int) -> int:
        return self.requests_at(second) - self.accepted_at(second)

    def to_dataframe(self) -> pd.DataFrame:
        """Per-second counters as a DataFrame, one row per second up to the last request."""
        seconds = list(range(self.last_second + 1))
        requests = [self.requests_at(s) for s in seconds]
        accepted = [self.accepted_at(s) for s in seconds]
        return pd.DataFrame(
            {
                "second": seconds,
                "requests": requests,
                "accepted": accepted,
                "rejected": [r - a for r, a in zip(requests, accepted)],
                "down": [s < self.outage_seconds for s in seconds],
            }
        )


class CapacityServer:
    """Service with a per-second admission limit and an initial outage.

    The server reads time from an injected clock: the Simulation's virtual
    clock when driven by the event loop, or a WallClock when clients run as
    threads. Its start instant is the clock reading at injection time.

    Args:
        capacity: Maximum accepted requests per one-second window.
        outage: Requests made before this much time has elapsed are rejected.
        clock: Optional clock to attach immediately.
        name: Identifier for logging.

    Raises:
        ValueError: If capacity < 1 or outage is negative.
    """

    def __init__(
        self,
        capacity: int,
        outage: Duration,
        clock: Clock | WallClock | None = None,
        name: str = "Server",
    ):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        if outage < Duration.ZERO:
            raise ValueError(f"outage must be >= 0, got {outage!r}")

        self.name = name
        self._capacity = capacity
        self._outage = outage
        self._lock = threading.Lock()
        self._clock: Clock | WallClock | None = None
        self._start: Instant | None = None

        # Indexed by whole second since start; grown on demand.
        self._requests: list[int] = []
        self._accepted: list[int] = []

        if clock is not None:
            self.set_clock(clock)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def outage(self) -> Duration:
        return self._outage

    @property
    def start(self) -> Instant | None:
        return self._start

    def set_clock(self, clock: Clock | WallClock) -> None:
        """Attach a clock and anchor the start instant at its current reading."""
        with self._lock:
            self._clock = clock
            self._start = clock.now
        logger.debug("[%s] Clock injected, start=%r", self.name, self._start)

    def elapsed(self) -> Duration:
        """Time since the server started.

        Raises:
            RuntimeError: If no clock has been attached.
        """
        if self._clock is None or self._start is None:
            logger.error("[%s] Attempted to access time before clock injection", self.name)
            raise RuntimeError(
                f"Server {self.name} is not attached to a clock."
            )
        return self._clock.now - self._start

    def attempt(self) -> bool:
        """Classify one incoming request as accepted (True) or rejected (False).

        Every call is counted in the current second's request total. During
        the outage the request is rejected outright; afterwards it is accepted
        only while the current second still has capacity left.
        """
        with self._lock:
            elapsed = self.elapsed()
            second = elapsed.whole_seconds()
            self._grow_to(second)
            self._requests[second] += 1

            if elapsed < self._outage:
                return False
            if self._accepted[second] >= self._capacity:
                return False
            self._accepted[second] += 1
            return True

    def _grow_to(self, second: int) -> None:
        missing = second + 1 - len(self._requests)
        if missing > 0:
            self._requests.extend([0] * missing)
            self._accepted.extend([0] * missing)

    def stats(self) -> ServerStats:
        """Snapshot the per-second counters."""
        with self._lock:
            return ServerStats(
                capacity=self._capacity,
                outage=self._outage,
                requests=tuple(self._requests),
                accepted=tuple(self._accepted),
            )

    def __repr__(self) -> str:
        return f"CapacityServer(name={self.name!r}, capacity={self._capacity}, outage={self._outage!r})"
