"""Run-wide retry metrics shared by every client.

Each client reports exactly once, when its request is finally accepted, with
its end-to-end latency and the number of rejected attempts it made before
that. All bookkeeping for one report happens under one lock so the totals
stay consistent when many clients finish at once.
"""

from __future__ import annotations

import threading

from herdsim.core.temporal import Duration


class RetryMetrics:
    """Totals accumulated across all clients of one run.

    Invariant: ``total_attempts == wasted + completed_clients``.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._total_attempts = 0
        self._wasted = 0
        self._latencies: list[Duration] = []
        self._attempts_per_client: list[int] = []

    def record(self, latency: Duration, wasted_attempts: int) -> None:
        """Record one client's successful completion.

        Args:
            latency: Time from the client's start to its accepted request.
            wasted_attempts: Rejected attempts before the accepted one.
        """
        with self._lock:
            self._total_attempts += wasted_attempts + 1
            self._wasted += wasted_attempts
            self._latencies.append(latency)
            self._attempts_per_client.append(wasted_attempts + 1)

    @property
    def total_attempts(self) -> int:
        with self._lock:
            return self._total_attempts

    @property
    def wasted(self) -> int:
        with self._lock:
            return self._wasted

    @property
    def completed_clients(self) -> int:
        with self._lock:
            return len(self._latencies)

    @property
    def latencies(self) -> list[Duration]:
        """Latencies in completion order (a copy)."""
        with self._lock:
            return list(self._latencies)

    @property
    def attempts_per_client(self) -> list[int]:
        with self._lock:
            return list(self._attempts_per_client)

    def sorted_latencies(self) -> list[Duration]:
        with self._lock:
            return sorted(self._latencies)

    def __repr__(self) -> str:
        return (
            f"RetryMetrics(total_attempts={self.total_attempts}, wasted={self.wasted}, "
            f"completed_clients={self.completed_clients})"
        )
