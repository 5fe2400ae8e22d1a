"""Wall-clock runs with one thread per client."""

from __future__ import annotations

from herdsim.components.server import CapacityServer
from herdsim.components.strategies import ConstantRetry, get_strategy
from herdsim.config import SimulationConfig
from herdsim.core.temporal import Duration
from herdsim.runner import run_threaded, simulate


def test_constant_strategy_threads():
    server = CapacityServer(5, Duration.from_seconds(1))
    metrics = run_threaded(20, server, ConstantRetry())
    stats = server.stats()

    assert metrics.completed_clients == 20
    assert metrics.total_attempts == metrics.wasted + 20
    assert stats.accepted_at(0) == 0
    assert all(stats.accepted_at(s) <= 5 for s in range(len(stats.accepted)))
    assert stats.total_accepted == 20
    # Each client reads its own start after its thread runs, so only the
    # server's lifetime bounds a latency from above.
    run_length = server.elapsed()
    assert all(Duration.ZERO <= latency <= run_length for latency in metrics.latencies)


def test_decorrelated_threads():
    server = CapacityServer(10, Duration.from_millis(500))
    metrics = run_threaded(30, server, get_strategy("decorrelated", seed=2))
    assert metrics.completed_clients == 30
    assert server.stats().total_requests == metrics.total_attempts


def test_simulate_realtime_has_no_engine_summary():
    config = SimulationConfig(num_clients=10, capacity=10, outage=Duration.ZERO)
    result = simulate("constant", config, realtime=True)
    assert result.engine_summary is None
    assert result.metrics.completed_clients == 10
