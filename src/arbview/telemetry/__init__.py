"""Telemetry module for logging and poll metrics."""

from arbview.telemetry.logger import AsyncLogger, setup_logging
from arbview.telemetry.metrics import LatencyStats, PollCounters, PollMetrics


__all__ = [
    "AsyncLogger",
    "LatencyStats",
    "PollCounters",
    "PollMetrics",
    "setup_logging",
]
