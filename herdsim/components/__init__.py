"""Simulation components: the capacity-limited server, retry strategies and clients."""

from herdsim.components.client import RetryingClient, retry_process
from herdsim.components.server import CapacityServer, ServerStats
from herdsim.components.strategies import (
    BASE_DELAY,
    CONSTANT_DELAY,
    MAX_DELAY,
    STRATEGY_NAMES,
    ConstantRetry,
    DecorrelatedJitter,
    ExponentialBackoff,
    FullJitter,
    RetryStrategy,
    get_strategy,
)

__all__ = [
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
]
