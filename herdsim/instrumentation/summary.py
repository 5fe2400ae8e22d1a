"""Engine summary generated after a discrete-event run completes.

SimulationSummary describes what the event loop did (how far simulated time
advanced, how many events it processed, how long that took on the host). It
is returned by Simulation.run(). The recovery statistics an engineer cares
about live in herdsim.reporting.RecoverySummary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class SimulationSummary:
    """Auto-generated summary of a simulation run."""
    duration_s: float
    total_events_processed: int
    events_per_second: float
    wall_clock_seconds: float

    def __str__(self) -> str:
        lines = [
            "Simulation Summary",
            f"  Duration: {self.duration_s:.2f}s (sim) / {self.wall_clock_seconds:.3f}s (wall)",
            f"  Events processed: {self.total_events_processed}",
            f"  Events/sec (sim): {self.events_per_second:.1f}",
        ]
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "duration_s": self.duration_s,
            "total_events_processed": self.total_events_processed,
            "events_per_second": self.events_per_second,
            "wall_clock_seconds": self.wall_clock_seconds,
        }
