"""Core discrete-event engine: time, events, entities and the event loop."""

from herdsim.core.clock import Clock, WallClock
from herdsim.core.entity import Entity, SimReturn, SimYield
from herdsim.core.event import Event, ProcessContinuation
from herdsim.core.event_heap import EventHeap
from herdsim.core.simulation import Simulation
from herdsim.core.temporal import Duration, Instant

__all__ = [
    "Clock",
    "Duration",
    "Entity",
    "Event",
    "EventHeap",
    "Instant",
    "ProcessContinuation",
    "SimReturn",
    "SimYield",
    "Simulation",
    "WallClock",
]
