"""Bound enforcement shared by every score calculator"""

import math


def clamp(value: float, lower: float = 0.0, upper: float = 100.0) -> float:
    """Bound a value to [lower, upper]

    NaN collapses to the lower bound so a broken input can never leak
    out of a score range.

    Args:
        value: Raw value
        lower: Lower bound (inclusive)
        upper: Upper bound (inclusive)

    Returns:
        float: Bounded value

    Examples:
        >>> clamp(120)
        100.0
        >>> clamp(0.4, 0.1, 1.0)
        0.4
    """
    if value is None or math.isnan(value):
        return float(lower)
    return float(min(max(value, lower), upper))
