"""Fixed parameters of a recovery run.

A run always models the same incident: every client starts at once, the
service is down for the first ``outage`` of the run and afterwards admits at
most ``capacity`` requests per one-second window. SimulationConfig bundles
those numbers so tests and callers can shrink the scenario without touching
the engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from herdsim.core.temporal import Duration

STABLE_WINDOW_S = 60
"""Seconds after the outage scanned for time-to-stable and peak overshoot."""

DEFAULT_BAR_WIDTH = 60


@dataclass(frozen=True)
class SimulationConfig:
    """Parameters of one simulated recovery.

    Attributes:
        num_clients: Clients that start retrying at t=0.
        capacity: Maximum accepted requests per second once the service is up.
        outage: How long after start every request is rejected.
        stable_window_s: Length of the post-outage window used by reporting.
        bar_width: Width of the text histogram bars.
    """
    num_clients: int = 1000
    capacity: int = 200
    outage: Duration = field(default_factory=lambda: Duration.from_seconds(10))
    stable_window_s: int = STABLE_WINDOW_S
    bar_width: int = DEFAULT_BAR_WIDTH

    def __post_init__(self) -> None:
        if self.num_clients < 0:
            raise ValueError(f"num_clients must be >= 0, got {self.num_clients}")
        if self.capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {self.capacity}")
        if self.outage < Duration.ZERO:
            raise ValueError(f"outage must be >= 0, got {self.outage!r}")
        if self.stable_window_s < 1:
            raise ValueError(f"stable_window_s must be >= 1, got {self.stable_window_s}")
        if self.bar_width < 1:
            raise ValueError(f"bar_width must be >= 1, got {self.bar_width}")


DEFAULT_CONFIG = SimulationConfig()
