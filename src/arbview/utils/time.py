"""
Time utilities.

Animation windows are measured on the monotonic clock so that wall-clock
adjustments never stall or skip a transition.
"""

import time
from datetime import UTC, datetime


def monotonic_ms() -> float:
    """
    Get the monotonic clock reading in milliseconds.

    Returns:
        Milliseconds from an arbitrary fixed origin.
    """
    return time.monotonic_ns() / 1_000_000


def parse_timestamp(value: str) -> datetime | None:
    """
    Parse an ISO-8601 timestamp as returned by the backend.

    A trailing ``Z`` is accepted; naive values are assumed to be UTC.

    Returns:
        Aware datetime, or None if the value cannot be parsed.
    """
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


def format_time_ago(timestamp: str | datetime, now: datetime | None = None) -> str:
    """
    Format a timestamp relative to now.

    Examples:
        >>> from datetime import timedelta
        >>> ref = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
        >>> format_time_ago(ref - timedelta(seconds=42), now=ref)
        '42s ago'
        >>> format_time_ago(ref - timedelta(hours=3), now=ref)
        '3h ago'
    """
    moment = parse_timestamp(timestamp) if isinstance(timestamp, str) else timestamp
    if moment is None:
        return "unknown"

    now = now or datetime.now(tz=UTC)
    seconds = max(0, int((now - moment).total_seconds()))

    if seconds < 60:
        return f"{seconds}s ago"
    elif seconds < 3600:
        return f"{seconds // 60}m ago"
    elif seconds < 86400:
        return f"{seconds // 3600}h ago"
    return f"{seconds // 86400}d ago"


def format_uptime(seconds: float) -> str:
    """Format a duration as HH:MM:SS."""
    hours, remainder = divmod(int(seconds), 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
