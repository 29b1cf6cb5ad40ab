"""
Metrics collection for poll cycles.

Tracks per-endpoint fetch latencies and success/failure counters
with bounded in-memory storage.
"""

import time
from collections import deque
from dataclasses import dataclass

from arbview.config.constants import POLL_LATENCY_WINDOW


@dataclass
class LatencyStats:
    """Aggregated latency statistics in milliseconds."""

    min_ms: float = 0.0
    max_ms: float = 0.0
    avg_ms: float = 0.0
    p50_ms: float = 0.0
    p95_ms: float = 0.0
    count: int = 0


@dataclass
class PollCounters:
    """Outcome counters for one poller."""

    succeeded: int = 0
    failed: int = 0
    discarded: int = 0

    @property
    def total(self) -> int:
        return self.succeeded + self.failed

    @property
    def success_rate(self) -> float:
        """Fraction of completed cycles that succeeded."""
        return self.succeeded / self.total if self.total > 0 else 0.0


class PollMetrics:
    """
    Collects fetch metrics keyed by poller name.

    Features:
    - Rolling window latency tracking
    - Success / failure / discarded counters
    """

    def __init__(self, latency_window_size: int = POLL_LATENCY_WINDOW) -> None:
        """
        Initialize metrics collector.

        Args:
            latency_window_size: Number of samples to keep per poller.
        """
        self._window_size = latency_window_size
        self._latencies: dict[str, deque[float]] = {}
        self._counters: dict[str, PollCounters] = {}
        self._start_time = time.time()

    def _counter(self, name: str) -> PollCounters:
        if name not in self._counters:
            self._counters[name] = PollCounters()
        return self._counters[name]

    def record_success(self, name: str, latency_ms: float) -> None:
        """
        Record a successful fetch.

        Args:
            name: Poller name.
            latency_ms: Fetch duration in milliseconds.
        """
        if name not in self._latencies:
            self._latencies[name] = deque(maxlen=self._window_size)
        self._latencies[name].append(latency_ms)
        self._counter(name).succeeded += 1

    def record_failure(self, name: str) -> None:
        """Record a failed fetch."""
        self._counter(name).failed += 1

    def record_discarded(self, name: str) -> None:
        """Record a response dropped because a newer one already won."""
        self._counter(name).discarded += 1

    def get_counters(self, name: str) -> PollCounters:
        """Get counters for a poller."""
        return self._counters.get(name, PollCounters())

    def get_latency_stats(self, name: str) -> LatencyStats:
        """
        Get latency statistics for a poller.

        Returns:
            LatencyStats with aggregated values.
        """
        samples = self._latencies.get(name)
        if not samples:
            return LatencyStats()

        sorted_samples = sorted(samples)
        n = len(sorted_samples)

        return LatencyStats(
            min_ms=sorted_samples[0],
            max_ms=sorted_samples[-1],
            avg_ms=sum(sorted_samples) / n,
            p50_ms=sorted_samples[n // 2],
            p95_ms=sorted_samples[int(n * 0.95)] if n > 1 else sorted_samples[-1],
            count=n,
        )

    @property
    def poller_names(self) -> list[str]:
        """Names of every poller seen so far, sorted."""
        return sorted(self._counters)

    @property
    def uptime_seconds(self) -> float:
        """Get uptime in seconds."""
        return time.time() - self._start_time

    def to_dict(self) -> dict[str, object]:
        """Export all metrics as a dict."""
        return {
            "uptime_seconds": self.uptime_seconds,
            "pollers": {
                name: {
                    "succeeded": counters.succeeded,
                    "failed": counters.failed,
                    "discarded": counters.discarded,
                    "avg_latency_ms": self.get_latency_stats(name).avg_ms,
                }
                for name, counters in self._counters.items()
            },
        }

    def reset(self) -> None:
        """Reset all metrics."""
        self._latencies.clear()
        self._counters.clear()
        self._start_time = time.time()
