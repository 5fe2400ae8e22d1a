"""Tests for the discrete-event engine: event ordering, processes and the loop."""

from __future__ import annotations

from typing import Generator

import pytest

from herdsim.core.clock import Clock
from herdsim.core.entity import Entity
from herdsim.core.event import Event, ProcessContinuation
from herdsim.core.event_heap import EventHeap
from herdsim.core.simulation import Simulation
from herdsim.core.temporal import Duration, Instant


class _Recorder(Entity):
    """Records the simulation time of every event it receives."""

    def __init__(self, name: str = "Recorder"):
        super().__init__(name)
        self.seen: list[tuple[str, Instant]] = []

    def handle_event(self, event: Event) -> list[Event]:
        self.seen.append((event.event_type, self.now))
        return []


class _Sleeper(Entity):
    """Process that wakes up after each of the given delays."""

    def __init__(self, delays: list, name: str = "Sleeper"):
        super().__init__(name)
        self.delays = delays
        self.wakeups: list[Instant] = []

    def handle_event(self, event: Event) -> Generator:
        for delay in self.delays:
            yield delay
            self.wakeups.append(self.now)


class TestEventHeap:
    def test_pops_in_time_order(self):
        target = _Recorder()
        heap = EventHeap()
        heap.push([
            Event(Instant.from_seconds(3), "c", target),
            Event(Instant.from_seconds(1), "a", target),
            Event(Instant.from_seconds(2), "b", target),
        ])
        assert [heap.pop().event_type for _ in range(3)] == ["a", "b", "c"]
        assert not heap.has_events()

    def test_simultaneous_events_are_fifo(self):
        target = _Recorder()
        heap = EventHeap()
        for name in ["first", "second", "third"]:
            heap.push(Event(Instant.Epoch, name, target))
        assert len(heap) == 3
        assert heap.peek().event_type == "first"
        assert [heap.pop().event_type for _ in range(3)] == ["first", "second", "third"]

    def test_built_from_any_iterable(self):
        target = _Recorder()
        heap = EventHeap(Event(Instant.from_seconds(s), f"t{s}", target) for s in (2, 0, 1))
        assert len(heap) == 3
        heap.push(Event(Instant.from_seconds(s), f"t{s}", target) for s in (4, 3))
        assert [heap.pop().event_type for _ in range(len(heap))] == ["t0", "t1", "t2", "t3", "t4"]


class TestEvent:
    def test_requires_target(self):
        with pytest.raises(ValueError):
            Event(Instant.Epoch, "orphan", None)

    def test_generator_result_becomes_continuation(self):
        sleeper = _Sleeper([Duration.from_millis(5)])
        sleeper.set_clock(Clock())
        produced = Event(Instant.Epoch, "go", sleeper).invoke()

        assert len(produced) == 1
        assert isinstance(produced[0], ProcessContinuation)
        assert produced[0].time == Instant(5_000_000)

    def test_float_yield_is_seconds(self):
        sleeper = _Sleeper([0.25])
        sleeper.set_clock(Clock())
        produced = Event(Instant.Epoch, "go", sleeper).invoke()
        assert produced[0].time == Instant.from_seconds(0.25)

    def test_unknown_yield_resumes_immediately(self, caplog):
        sleeper = _Sleeper([(Duration.from_seconds(1), [])])
        sleeper.set_clock(Clock())
        with caplog.at_level("WARNING", logger="herdsim.core.event"):
            produced = Event(Instant.from_seconds(3), "go", sleeper).invoke()
        assert produced[0].time == Instant.from_seconds(3)
        assert "unknown type" in caplog.text


class TestEntity:
    def test_now_without_clock_raises(self):
        with pytest.raises(RuntimeError):
            _ = _Recorder().now


class TestSimulation:
    def test_runs_events_at_their_time(self):
        recorder = _Recorder()
        sim = Simulation(entities=[recorder])
        sim.schedule([
            Event(Instant.from_seconds(2), "late", recorder),
            Event(Instant.from_seconds(1), "early", recorder),
        ])
        summary = sim.run()

        assert recorder.seen == [("early", Instant.from_seconds(1)), ("late", Instant.from_seconds(2))]
        assert summary.total_events_processed == 2
        assert summary.duration_s == pytest.approx(2.0)

    def test_process_resumes_after_each_delay(self):
        sleeper = _Sleeper([Duration.from_millis(100), Duration.from_millis(250), 1.0])
        sim = Simulation(entities=[sleeper])
        sim.schedule(Event(Instant.Epoch, "start", sleeper))
        sim.run()

        assert sleeper.wakeups == [
            Instant.from_seconds(0.1),
            Instant.from_seconds(0.35),
            Instant.from_seconds(1.35),
        ]
        assert sim.now == Instant.from_seconds(1.35)

    def test_end_time_stops_loop(self):
        recorder = _Recorder()
        sim = Simulation(entities=[recorder], end_time=Instant.from_seconds(5))
        sim.schedule([
            Event(Instant.from_seconds(1), "in", recorder),
            Event(Instant.from_seconds(10), "out", recorder),
        ])
        sim.run()
        assert [name for name, _ in recorder.seen] == ["in"]

    def test_empty_simulation(self):
        summary = Simulation().run()
        assert summary.total_events_processed == 0
        assert summary.events_per_second == 0.0
        assert "Events processed: 0" in str(summary)
        assert summary.to_dict()["total_events_processed"] == 0
