"""herdsim: thundering-herd recovery simulator.

Models a population of clients retrying against a capacity-limited service
that is recovering from an outage, and compares how different retry-delay
strategies shape the load on the service and the latency seen by clients.

    from herdsim import SimulationConfig, render_report, simulate

    result = simulate("jitter", SimulationConfig(num_clients=200), seed=1)
    print(render_report(result))

The library is silent by default; see herdsim.logging_config.
"""

import logging

logging.getLogger("herdsim").addHandler(logging.NullHandler())

__version__ = "0.1.0"

from herdsim.components import (
    BASE_DELAY,
    CONSTANT_DELAY,
    MAX_DELAY,
    STRATEGY_NAMES,
    CapacityServer,
    ConstantRetry,
    DecorrelatedJitter,
    ExponentialBackoff,
    FullJitter,
    RetryingClient,
    RetryStrategy,
    ServerStats,
    get_strategy,
    retry_process,
)
from herdsim.config import DEFAULT_CONFIG, STABLE_WINDOW_S, SimulationConfig
from herdsim.core import Clock, Duration, Entity, Event, Instant, Simulation, WallClock
from herdsim.errors import HerdSimError, UnknownStrategyError
from herdsim.instrumentation import RetryMetrics, SimulationSummary
from herdsim.logging_config import (
    configure_from_env,
    disable_logging,
    enable_console_logging,
    enable_file_logging,
    enable_json_logging,
    set_level,
    set_module_level,
)
from herdsim.reporting import (
    RecoverySummary,
    p99_latency,
    peak_overshoot,
    percentile,
    plot_histogram,
    render_histogram,
    render_report,
    summarize,
    time_to_stable,
    write_csv,
)
from herdsim.runner import RunResult, run_simulation, run_threaded, simulate

__all__ = [
    "__version__",
    # Components
    "BASE_DELAY",
    "CONSTANT_DELAY",
    "MAX_DELAY",
    "STRATEGY_NAMES",
    "CapacityServer",
    "ConstantRetry",
    "DecorrelatedJitter",
    "ExponentialBackoff",
    "FullJitter",
    "RetryStrategy",
    "RetryingClient",
    "ServerStats",
    "get_strategy",
    "retry_process",
    # Config
    "DEFAULT_CONFIG",
    "STABLE_WINDOW_S",
    "SimulationConfig",
    # Core
    "Clock",
    "Duration",
    "Entity",
    "Event",
    "Instant",
    "Simulation",
    "WallClock",
    # Errors
    "HerdSimError",
    "UnknownStrategyError",
    # Instrumentation
    "RetryMetrics",
    "SimulationSummary",
    # Logging
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "enable_file_logging",
    "enable_json_logging",
    "set_level",
    "set_module_level",
    # Reporting
    "RecoverySummary",
    "p99_latency",
    "peak_overshoot",
    "percentile",
    "plot_histogram",
    "render_histogram",
    "render_report",
    "summarize",
    "time_to_stable",
    "write_csv",
    # Runners
    "RunResult",
    "run_simulation",
    "run_threaded",
    "simulate",
]
