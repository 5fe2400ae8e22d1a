"""A client that retries against a CapacityServer until it is accepted.

The client is a two-state machine (RETRYING -> DONE) written as a generator:
each rejection yields the strategy's delay, and whatever drives the generator
suspends this client for that long. The discrete-event engine resumes it via a
ProcessContinuation; the threaded runner resumes it after ``time.sleep``.
Either way only the rejected client waits.

There is no attempt limit and no timeout. A client keeps retrying until the
server accepts it, then reports once to the shared RetryMetrics.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from typing import TYPE_CHECKING

from herdsim.components.strategies import BASE_DELAY, RetryStrategy
from herdsim.core.entity import Entity
from herdsim.core.event import Event
from herdsim.core.temporal import Duration

if TYPE_CHECKING:
    from herdsim.components.server import CapacityServer
    from herdsim.core.clock import Clock, WallClock
    from herdsim.instrumentation.metrics import RetryMetrics

logger = logging.getLogger(__name__)


def retry_process(
    server: CapacityServer,
    strategy: RetryStrategy,
    metrics: RetryMetrics,
    clock: Clock | WallClock,
    name: str = "client",
) -> Generator[Duration, None, None]:
    """Run one client until its request is accepted.

    Yields the delay to wait after each rejection. Returns (StopIteration)
    once the server accepts, after recording the latency and the number of
    rejected attempts into ``metrics``.
    """
    start = clock.now
    attempt = 0
    previous_delay = BASE_DELAY

    while not server.attempt():
        delay = strategy(attempt, previous_delay)
        yield delay
        attempt += 1
        previous_delay = delay

    latency = clock.now - start
    metrics.record(latency, attempt)
    logger.debug("[%s] Accepted after %d rejections (latency %s)", name, attempt, latency)


class RetryingClient(Entity):
    """Entity wrapper that lets the event loop drive a retry_process.

    Schedule one ``start_event()`` per client; the resulting process yields
    its back-off delays to the simulation until the server accepts it.
    """

    def __init__(
        self,
        name: str,
        *,
        server: CapacityServer,
        strategy: RetryStrategy,
        metrics: RetryMetrics,
    ):
        super().__init__(name)
        self.server = server
        self.strategy = strategy
        self.metrics = metrics

    def start_event(self) -> Event:
        return Event(time=self.now, event_type="ClientStart", target=self)

    def handle_event(self, event: Event) -> Generator[Duration, None, None]:
        return retry_process(
            self.server,
            self.strategy,
            self.metrics,
            self._clock,
            name=self.name,
        )
