"""Tests for the client retry state machine."""

from __future__ import annotations

from herdsim.components.client import RetryingClient, retry_process
from herdsim.components.strategies import BASE_DELAY, ConstantRetry, ExponentialBackoff
from herdsim.core.event import ProcessContinuation
from herdsim.core.temporal import Duration, Instant
from herdsim.instrumentation.metrics import RetryMetrics


class _RecordingStrategy:
    """Returns fixed delays and remembers the arguments it saw."""

    def __init__(self, delays):
        self.delays = list(delays)
        self.calls = []

    def __call__(self, attempt, previous_delay):
        self.calls.append((attempt, previous_delay))
        return self.delays[len(self.calls) - 1]


def test_accepted_immediately(clock, make_server):
    server = make_server(capacity=1, outage_s=0)
    metrics = RetryMetrics()

    process = retry_process(server, ConstantRetry(), metrics, clock)
    assert list(process) == []

    assert metrics.completed_clients == 1
    assert metrics.wasted == 0
    assert metrics.total_attempts == 1
    assert metrics.latencies == [Duration.ZERO]


def test_yields_delay_after_each_rejection(clock, make_server):
    server = make_server(capacity=5, outage_s=1)
    metrics = RetryMetrics()
    strategy = _RecordingStrategy([Duration.from_millis(400), Duration.from_millis(700)])

    process = retry_process(server, strategy, metrics, clock)
    first = next(process)
    assert first == Duration.from_millis(400)

    clock.update(Instant.from_seconds(0.4))
    second = next(process)
    assert second == Duration.from_millis(700)

    clock.update(Instant.from_seconds(1.1))
    assert list(process) == []

    # attempt counts rejections; previous delay starts at the base delay
    assert strategy.calls == [(0, BASE_DELAY), (1, Duration.from_millis(400))]
    assert metrics.wasted == 2
    assert metrics.total_attempts == 3
    assert metrics.latencies == [Duration.from_seconds(1.1)]


def test_backoff_sequence_during_outage(clock, make_server):
    server = make_server(capacity=5, outage_s=2)
    metrics = RetryMetrics()
    process = retry_process(server, ExponentialBackoff(), metrics, clock)

    delays = []
    for delay in process:
        delays.append(delay)
        clock.update(clock.now + delay)

    assert [d.to_millis() for d in delays] == [100, 200, 400, 800, 1600]
    assert metrics.latencies == [Duration.from_seconds(3.1)]


def test_retrying_client_entity_starts_process(clock, make_server):
    server = make_server(capacity=5, outage_s=1)
    metrics = RetryMetrics()
    client = RetryingClient("Client-0", server=server, strategy=ConstantRetry(), metrics=metrics)
    client.set_clock(clock)

    start = client.start_event()
    assert start.time == Instant.Epoch
    produced = start.invoke()

    assert len(produced) == 1
    assert isinstance(produced[0], ProcessContinuation)
    assert produced[0].time == Instant.from_seconds(0.001)
