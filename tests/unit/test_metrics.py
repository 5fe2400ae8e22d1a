"""Tests for RetryMetrics bookkeeping."""

import threading

from herdsim.core.temporal import Duration
from herdsim.instrumentation.metrics import RetryMetrics


def test_starts_empty():
    metrics = RetryMetrics()
    assert metrics.total_attempts == 0
    assert metrics.wasted == 0
    assert metrics.completed_clients == 0
    assert metrics.latencies == []


def test_record_counts_success_and_waste():
    metrics = RetryMetrics()
    metrics.record(Duration.from_millis(300), 2)
    metrics.record(Duration.from_millis(10), 0)

    assert metrics.total_attempts == 4
    assert metrics.wasted == 2
    assert metrics.completed_clients == 2
    assert metrics.attempts_per_client == [3, 1]
    assert metrics.latencies == [Duration.from_millis(300), Duration.from_millis(10)]
    assert metrics.sorted_latencies() == [Duration.from_millis(10), Duration.from_millis(300)]


def test_latencies_returns_copy():
    metrics = RetryMetrics()
    metrics.record(Duration.ZERO, 0)
    metrics.latencies.append(Duration(1))
    assert metrics.completed_clients == 1


def test_concurrent_records_are_exact():
    metrics = RetryMetrics()

    def finish(i: int):
        metrics.record(Duration.from_millis(i), i % 7)

    threads = [threading.Thread(target=finish, args=(i,)) for i in range(200)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    expected_wasted = sum(i % 7 for i in range(200))
    assert metrics.completed_clients == 200
    assert metrics.wasted == expected_wasted
    assert metrics.total_attempts == metrics.wasted + metrics.completed_clients
