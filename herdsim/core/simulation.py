"""Discrete-event simulation loop.

The Simulation owns a virtual Clock and an EventHeap. Each iteration pops the
earliest event, advances the clock to its timestamp and invokes it; any events
the invocation produces (including continuations of generator processes) are
pushed back onto the heap. The run ends when the heap drains or the next event
lies beyond ``end_time``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from typing import TYPE_CHECKING, Union

from herdsim.core.clock import Clock
from herdsim.core.event import Event
from herdsim.core.event_heap import EventHeap
from herdsim.core.temporal import Instant
from herdsim.instrumentation.summary import SimulationSummary

if TYPE_CHECKING:
    from herdsim.core.entity import Entity

logger = logging.getLogger(__name__)


class Simulation:
    """Runs events in timestamp order against a shared virtual clock.

    Args:
        entities: Actors (and any other objects exposing ``set_clock``) that
            need the simulation clock injected.
        end_time: Optional horizon; events scheduled after it are not run.
        start_time: Initial clock reading.
    """

    def __init__(
        self,
        entities: Iterable[Entity] | None = None,
        *,
        end_time: Instant | None = None,
        start_time: Instant = Instant.Epoch,
    ):
        self._clock = Clock(start_time)
        self._end_time = end_time
        self._event_heap = EventHeap()
        self._events_processed = 0

        self._entities = list(entities) if entities else []
        for entity in self._entities:
            entity.set_clock(self._clock)

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def now(self) -> Instant:
        return self._clock.now

    @property
    def events_processed(self) -> int:
        return self._events_processed

    def schedule(self, events: Union[Event, Iterable[Event]]) -> None:
        self._event_heap.push(events)

    def run(self) -> SimulationSummary:
        """Process events until the heap drains or the horizon is reached."""
        start_time = self._clock.now
        wall_start = time.perf_counter()
        logger.info(
            "Simulation starting with %d entities and %d scheduled events",
            len(self._entities),
            len(self._event_heap),
        )

        heap = self._event_heap
        clock = self._clock
        processed = 0

        while heap.has_events():
            if self._end_time is not None and heap.peek().time > self._end_time:
                logger.info("Reached end time %r with %d events pending", self._end_time, len(heap))
                break

            event = heap.pop()
            clock.update(event.time)
            new_events = event.invoke()
            processed += 1
            if new_events:
                heap.push(new_events)

        self._events_processed += processed
        wall_seconds = time.perf_counter() - wall_start
        duration_s = (self._clock.now - start_time).to_seconds()
        summary = SimulationSummary(
            duration_s=duration_s,
            total_events_processed=processed,
            events_per_second=processed / duration_s if duration_s > 0 else 0.0,
            wall_clock_seconds=wall_seconds,
        )
        logger.info(
            "Simulation finished at %.3fs after %d events (%.3fs wall)",
            duration_s,
            processed,
            wall_seconds,
        )
        return summary
