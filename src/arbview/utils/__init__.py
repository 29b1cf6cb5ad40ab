"""Utility functions for the dashboard."""

from arbview.utils.formatting import (
    format_currency,
    format_integer,
    format_number,
    format_percentage,
)
from arbview.utils.math import (
    clamp,
    ease_out_cubic,
    ease_out_quad,
    is_finite_number,
    lerp,
    linear,
    safe_divide,
)
from arbview.utils.time import format_time_ago, monotonic_ms


__all__ = [
    "clamp",
    "ease_out_cubic",
    "ease_out_quad",
    "format_currency",
    "format_integer",
    "format_number",
    "format_percentage",
    "format_time_ago",
    "is_finite_number",
    "lerp",
    "linear",
    "monotonic_ms",
    "safe_divide",
]
