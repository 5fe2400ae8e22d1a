"""Event types that form the fundamental units of simulation work.

Events drive the simulation forward. Each event represents something that
happens at a specific point in simulation time. When invoked, an event calls
its target entity's handle_event() method.

This module also provides ProcessContinuation for generator-based multi-step
processes, enabling entities to yield delays and resume execution later. A
retrying client is exactly such a process: it yields its back-off delay after
every rejection and is resumed when that delay has elapsed.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from itertools import count
from typing import TYPE_CHECKING, Any, Optional

from herdsim.core.temporal import Duration, Instant

if TYPE_CHECKING:
    from herdsim.core.entity import Entity

logger = logging.getLogger(__name__)

_global_event_counter = count()


class Event:
    """The fundamental unit of simulation work.

    Events are scheduled onto the EventHeap and processed in chronological
    order. Each event targets an Entity whose handle_event() method processes
    it. When handle_event() returns a generator, the event wraps it as a
    ProcessContinuation so the process can yield delays between steps.

    Sorting uses (time, insertion_order) to ensure deterministic FIFO ordering
    for events scheduled at the same instant.

    Attributes:
        time: When this event should be processed.
        event_type: Human-readable label for debugging.
        target: Entity to receive this event.
    """

    __slots__ = ("_sort_index", "event_type", "target", "time")

    def __init__(self, time: Instant, event_type: str, target: Optional[Entity] = None):
        if target is None:
            raise ValueError(f"Event '{event_type}' must have a 'target'.")

        self.time = time
        self.event_type = event_type
        self.target = target
        self._sort_index = next(_global_event_counter)

    def __repr__(self) -> str:
        target_name = getattr(self.target, "name", None) or type(self.target).__name__
        return f"Event({self.time!r}, {self.event_type!r}, target={target_name})"

    def invoke(self) -> list[Event]:
        """Execute this event and return any resulting events.

        Dispatches to the target entity's handle_event() method. If the handler
        returns a generator, it's automatically wrapped as a ProcessContinuation
        and advanced to its first yield.
        """
        result = self.target.handle_event(self)

        if isinstance(result, Generator):
            continuation = ProcessContinuation(self.time, self.event_type, self.target, process=result)
            return continuation.invoke()
        return self._normalize_return(result)

    @staticmethod
    def _normalize_return(value: Any) -> list[Event]:
        """Standardizes return values into list[Event]."""
        if value is None:
            return []
        if isinstance(value, list):
            return value
        if isinstance(value, Event):
            return [value]
        return []

    def __lt__(self, other: Event) -> bool:
        """
        1. Time (Primary)
        2. Insert Order (Secondary - guarantees FIFO for simultaneous events)
        """
        if self.time != other.time:
            return self.time < other.time
        return self._sort_index < other._sort_index


class ProcessContinuation(Event):
    """Internal event that resumes a paused generator-based process.

    Each invocation advances the generator to its next yield point and
    schedules another continuation after the yielded delay, given either as a
    Duration or as float seconds. When the generator returns, whatever events
    it returned are scheduled instead.

    Attributes:
        process: The Python generator being executed incrementally.
    """

    __slots__ = ("process",)

    def __init__(
        self,
        time: Instant,
        event_type: str,
        target: Optional[Entity] = None,
        *,
        process: Generator | None = None,
    ):
        super().__init__(time, event_type, target)
        self.process = process

    def invoke(self) -> list[Event]:
        """Advance the generator to its next yield and schedule the continuation."""
        try:
            yielded_val = next(self.process)
        except StopIteration as e:
            return self._normalize_return(e.value)

        resume_time = self.time + self._as_delay(yielded_val)
        return [ProcessContinuation(resume_time, self.event_type, self.target, process=self.process)]

    @staticmethod
    def _as_delay(value: Any) -> Duration:
        if isinstance(value, Duration):
            return value
        if isinstance(value, (int, float)):
            return Duration.from_seconds(value)
        logger.warning("Generator yielded unknown type %s; assuming 0 delay.", type(value))
        return Duration.ZERO
