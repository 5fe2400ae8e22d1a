"""Reports derived from a finished run.

Everything here is a read-only function of a ServerStats snapshot and the
RetryMetrics of a completed run:

- render_histogram: per-second request volume as a text bar chart, with the
  server's capacity marked on every row and outage seconds labelled DOWN.
- RecoverySummary / summarize: time-to-stable, peak overshoot, attempt totals
  and p99 client latency.
- plot_histogram / write_csv: the same per-second data as a matplotlib figure
  or a CSV file.

Time-to-stable and peak overshoot only look at a fixed window after the
outage (STABLE_WINDOW_S seconds); a run that has not settled by then is
reported as unresolved rather than scanned further.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

from herdsim.config import DEFAULT_BAR_WIDTH, STABLE_WINDOW_S
from herdsim.core.temporal import Duration

if TYPE_CHECKING:
    from herdsim.components.server import ServerStats
    from herdsim.instrumentation.metrics import RetryMetrics
    from herdsim.runner import RunResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

BAR_CHAR = "█"
CAPACITY_MARK = "|"


# =============================================================================
# Histogram
# =============================================================================


def render_histogram(stats: ServerStats, bar_width: int = DEFAULT_BAR_WIDTH) -> str:
    """Render requests per second as a text bar chart.

    Bars are scaled so the busiest second spans ``bar_width`` characters. The
    capacity marker sits at the same scale, unless capacity is beyond the
    widest bar.
    """
    if bar_width < 1:
        raise ValueError(f"bar_width must be >= 1, got {bar_width}")

    last_second = stats.last_second
    if last_second < 0:
        return "  (no data)"

    max_count = max(stats.requests_at(s) for s in range(last_second + 1))
    cap_mark = min(stats.capacity * bar_width // max_count, bar_width)
    outage_s = stats.outage_seconds

    lines = [
        f"  Requests per second (capacity={stats.capacity} req/s marked with {CAPACITY_MARK})",
        "",
    ]
    for s in range(last_second + 1):
        count = stats.requests_at(s)
        width = count * bar_width // max_count
        bar = list(BAR_CHAR * width + " " * (bar_width - width))
        if cap_mark < bar_width:
            bar[cap_mark] = CAPACITY_MARK

        label = " DOWN" if s < outage_s else "     "
        lines.append(f"  {s:3d}s{label} {''.join(bar)} {count}")
    return "\n".join(lines)


# =============================================================================
# Summary statistics
# =============================================================================


def time_to_stable(stats: ServerStats, window: int = STABLE_WINDOW_S) -> int | None:
    """Seconds after the outage until the first second with no rejections.

    Only seconds that actually saw traffic count. Returns None when no such
    second occurs within ``window`` seconds of the outage ending.
    """
    outage_s = stats.outage_seconds
    for s in range(outage_s, outage_s + window):
        requests = stats.requests_at(s)
        if requests > 0 and requests == stats.accepted_at(s):
            return s - outage_s
    return None


def peak_overshoot(stats: ServerStats, window: int = STABLE_WINDOW_S) -> int:
    """Largest excess of requests over capacity in one post-outage second."""
    outage_s = stats.outage_seconds
    peak = 0
    for s in range(outage_s, outage_s + window):
        over = stats.requests_at(s) - stats.capacity
        if over > peak:
            peak = over
    return peak


def percentile(sorted_values: Sequence[T], p: float) -> T | None:
    """Nearest-rank percentile over already sorted values.

    Returns the smallest value with at least ``p`` of the sample at or below
    it, i.e. zero-based index ``ceil(p * n) - 1`` clamped to ``[0, n-1]``.
    p=0.99 over 1..100 gives 99; over 1..10 it gives 10. Returns None for an
    empty sequence.
    """
    n = len(sorted_values)
    if n == 0:
        return None
    idx = math.ceil(n * p) - 1
    return sorted_values[min(max(idx, 0), n - 1)]


def p99_latency(metrics: RetryMetrics) -> Duration:
    value = percentile(metrics.sorted_latencies(), 0.99)
    return value if value is not None else Duration.ZERO


@dataclass
class RecoverySummary:
    """Headline numbers for one recovery run."""
    time_to_stable_s: int | None
    peak_overshoot: int
    total_attempts: int
    wasted_attempts: int
    clients_served: int
    p99_latency: Duration
    stable_window_s: int = STABLE_WINDOW_S

    @property
    def resolved(self) -> bool:
        return self.time_to_stable_s is not None

    def __str__(self) -> str:
        if self.time_to_stable_s is not None:
            stable = f"{self.time_to_stable_s}s"
        else:
            stable = f">{self.stable_window_s}s"
        lines = [
            "  Summary",
            "  -------",
            f"  Time to stable             : {stable}",
            f"  Peak overshoot (reqs/s)    : {self.peak_overshoot} over capacity",
            f"  Total requests             : {self.total_attempts}",
            f"  Wasted (rejected) requests : {self.wasted_attempts}",
            f"  Clients served             : {self.clients_served}",
            f"  p99 client latency         : {self.p99_latency}",
        ]
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "time_to_stable_s": self.time_to_stable_s,
            "peak_overshoot": self.peak_overshoot,
            "total_attempts": self.total_attempts,
            "wasted_attempts": self.wasted_attempts,
            "clients_served": self.clients_served,
            "p99_latency_s": self.p99_latency.to_seconds(),
        }


def summarize(
    stats: ServerStats,
    metrics: RetryMetrics,
    window: int = STABLE_WINDOW_S,
) -> RecoverySummary:
    return RecoverySummary(
        time_to_stable_s=time_to_stable(stats, window),
        peak_overshoot=peak_overshoot(stats, window),
        total_attempts=metrics.total_attempts,
        wasted_attempts=metrics.wasted,
        clients_served=metrics.completed_clients,
        p99_latency=p99_latency(metrics),
        stable_window_s=window,
    )


# =============================================================================
# Full text report
# =============================================================================


def render_header(strategy_name: str, num_clients: int, capacity: int, outage: Duration) -> str:
    return (
        f"  Strategy: {strategy_name} | Clients: {num_clients} | "
        f"Server capacity: {capacity} req/s | Outage: {outage}"
    )


def render_report(result: RunResult) -> str:
    """Header, histogram and summary for a finished run."""
    config = result.config
    summary = summarize(result.server_stats, result.metrics, config.stable_window_s)
    parts = [
        render_header(result.strategy_name, config.num_clients, config.capacity, config.outage),
        "",
        render_histogram(result.server_stats, config.bar_width),
        "",
        str(summary),
        "",
    ]
    return "\n".join(parts)


# =============================================================================
# Exports
# =============================================================================


def write_csv(stats: ServerStats, path: str | Path) -> Path:
    """Write the per-second counters to ``path`` as CSV."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    stats.to_dataframe().to_csv(path, index=False)
    logger.info("Wrote per-second counters to %s", path)
    return path


def plot_histogram(stats: ServerStats, path: str | Path, title: str | None = None) -> Path:
    """Save a bar chart of requests and acceptances per second."""
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df = stats.to_dataframe()

    fig, ax = plt.subplots(figsize=(12, 5))
    ax.bar(df["second"], df["requests"], color="lightgray", edgecolor="gray", label="Requests")
    ax.bar(df["second"], df["accepted"], color="tab:green", alpha=0.8, label="Accepted")
    ax.axhline(y=stats.capacity, color="r", linestyle="--", label=f"Capacity ({stats.capacity} req/s)")
    if stats.outage_seconds > 0:
        ax.axvspan(-0.5, stats.outage_seconds - 0.5, color="red", alpha=0.08, label="Outage")
    ax.set_xlabel("Time (s)")
    ax.set_ylabel("Requests / second")
    ax.set_title(title or "Requests per second during recovery")
    ax.legend()
    ax.grid(True, alpha=0.3, axis="y")

    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)
    logger.info("Saved histogram plot to %s", path)
    return path
