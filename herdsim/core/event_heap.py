"""Pending-event queue for the simulation loop.

A binary heap of Events, earliest first. Events order themselves by
(time, insertion order), so two clients retrying at the same instant are
resumed in the order their continuations were scheduled.
"""

import heapq
from collections.abc import Iterable
from typing import Union

from herdsim.core.event import Event


class EventHeap:
    def __init__(self, events: Iterable[Event] = ()):
        self._heap = list(events)
        heapq.heapify(self._heap)

    def push(self, events: Union[Event, Iterable[Event]]) -> None:
        if isinstance(events, Event):
            heapq.heappush(self._heap, events)
            return
        for event in events:
            heapq.heappush(self._heap, event)

    def pop(self) -> Event:
        return heapq.heappop(self._heap)

    def peek(self) -> Event:
        """Earliest pending event, left on the heap."""
        return self._heap[0]

    def has_events(self) -> bool:
        return bool(self._heap)

    def __len__(self) -> int:
        return len(self._heap)
