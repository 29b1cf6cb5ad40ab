"""
Mathematical utilities for value interpolation.

Provides easing curves and NaN-safe numeric helpers used by the
animated metric displays.
"""

import math
from collections.abc import Callable
from numbers import Real
from typing import Final


# Epsilon for floating point comparisons
EPSILON: Final[float] = 1e-10

# Maps elapsed fraction t in [0, 1] onto eased progress in [0, 1]
EasingFunction = Callable[[float], float]


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """
    Safely divide two numbers, returning default on division by zero.

    Args:
        numerator: The dividend.
        denominator: The divisor.
        default: Value to return if denominator is zero.

    Returns:
        Result of division or default value.
    """
    if abs(denominator) < EPSILON:
        return default
    return numerator / denominator


def is_finite_number(value: object) -> bool:
    """
    Check whether a value is a usable real number.

    Booleans, None, strings, NaN and infinities are all rejected.

    Example:
        >>> is_finite_number(1.5)
        True
        >>> is_finite_number(float("nan"))
        False
        >>> is_finite_number(True)
        False
    """
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return math.isfinite(value)


def clamp(value: float, lower: float, upper: float) -> float:
    """
    Clamp a value to the closed interval [lower, upper].

    Example:
        >>> clamp(1.5, 0.0, 1.0)
        1.0
    """
    if value < lower:
        return lower
    if value > upper:
        return upper
    return value


def lerp(start: float, end: float, fraction: float) -> float:
    """
    Linear interpolation between start and end.

    Weighted form: stays finite whenever start and end are finite, even
    when end - start would overflow.

    Example:
        >>> lerp(0.0, 100.0, 0.75)
        75.0
    """
    return start * (1.0 - fraction) + end * fraction


def linear(t: float) -> float:
    """Identity easing."""
    return t


def ease_out_quad(t: float) -> float:
    """
    Quadratic ease-out: fast start, decelerating towards the end.

    Example:
        >>> ease_out_quad(0.5)
        0.75
    """
    return 1.0 - (1.0 - t) ** 2


def ease_out_cubic(t: float) -> float:
    """Cubic ease-out."""
    return 1.0 - (1.0 - t) ** 3
