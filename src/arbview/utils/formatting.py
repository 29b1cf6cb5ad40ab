"""
Presentation formatters for metric values.

Formatting is applied to the displayed value only at render time; the
numeric state behind it stays unrounded between frames.
"""

import math
from collections.abc import Callable


ValueFormatter = Callable[[float], str]

PLACEHOLDER = "---"


def _guard(value: float) -> str | None:
    if not math.isfinite(value):
        return PLACEHOLDER
    return None


def format_currency(value: float, symbol: str = "$", max_decimals: int = 2) -> str:
    """
    Format a value as currency with thousand separators.

    Examples:
        >>> format_currency(1234.5)
        '$1,234.50'
        >>> format_currency(-12.0)
        '-$12.00'
    """
    if (guarded := _guard(value)) is not None:
        return guarded
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.{max_decimals}f}"


def format_percentage(value: float, decimals: int = 3) -> str:
    """
    Format a value already expressed in percent.

    Example:
        >>> format_percentage(0.12345)
        '0.123%'
    """
    if (guarded := _guard(value)) is not None:
        return guarded
    return f"{value:.{decimals}f}%"


def format_number(value: float, max_decimals: int = 2) -> str:
    """
    Format a number with thousand separators and trimmed decimals.

    Examples:
        >>> format_number(1234.5)
        '1,234.5'
        >>> format_number(10.0)
        '10'
    """
    if (guarded := _guard(value)) is not None:
        return guarded
    text = f"{value:,.{max_decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_integer(value: float) -> str:
    """
    Round to the nearest integer for counters.

    Example:
        >>> format_integer(41.6)
        '42'
    """
    if (guarded := _guard(value)) is not None:
        return guarded
    return f"{round(value):,}"
