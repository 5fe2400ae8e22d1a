"""Run-time measurement: retry metrics and the engine summary."""

from herdsim.instrumentation.metrics import RetryMetrics
from herdsim.instrumentation.summary import SimulationSummary

__all__ = [
    "RetryMetrics",
    "SimulationSummary",
]
