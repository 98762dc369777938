"""Winsorization and robust statistics

Bounds a fresh observation against the history it is compared with.
Used by the score normalizer for outlier handling and by the volume
calculator for rolling-window consistency.
"""

import numpy as np
from numpy.typing import ArrayLike

# Scale factor turning MAD into a normal-consistent standard deviation
MAD_TO_STD = 1.4826


def winsorize_value(
    value: float,
    history: ArrayLike,
    lower_percentile: float = 5.0,
    upper_percentile: float = 95.0,
) -> float:
    """Replace a value beyond the history's percentile bounds with that bound

    Args:
        value: Observation to bound
        history: Reference samples
        lower_percentile: Lower percentile (0-100)
        upper_percentile: Upper percentile (0-100)

    Returns:
        float: Winsorized value (unchanged when history is empty)
    """
    data = np.asarray(history, dtype=float)
    if data.size == 0:
        return float(value)

    lower_bound = np.percentile(data, lower_percentile)
    upper_bound = np.percentile(data, upper_percentile)

    return float(np.clip(value, lower_bound, upper_bound))


def clip_by_std(value: float, history: ArrayLike, n_std: float = 2.5) -> float:
    """Clip a value to mean ± n_std * std of the history

    Args:
        value: Observation to bound
        history: Reference samples
        n_std: Standard deviation multiple

    Returns:
        float: Clipped value
    """
    data = np.asarray(history, dtype=float)
    if data.size < 2:
        return float(value)

    mean = np.mean(data)
    std = np.std(data)

    return float(np.clip(value, mean - n_std * std, mean + n_std * std))


def robust_location_scale(history: ArrayLike) -> tuple[float, float]:
    """Median and MAD-based scale

    MAD is far less sensitive to a single extreme sample than std,
    which matters for heavy-tailed token volumes.

    Returns:
        tuple[float, float]: (median, MAD * 1.4826); (0, 0) for empty input
    """
    data = np.asarray(history, dtype=float)
    if data.size == 0:
        return 0.0, 0.0

    median = np.median(data)
    mad = np.median(np.abs(data - median))

    return float(median), float(mad * MAD_TO_STD)


def iqr_fences(history: ArrayLike, k: float = 1.5) -> tuple[float, float]:
    """Tukey fences Q1 - k*IQR and Q3 + k*IQR"""
    data = np.asarray(history, dtype=float)
    if data.size == 0:
        return float("-inf"), float("inf")

    q1, q3 = np.percentile(data, [25, 75])
    iqr = q3 - q1
    return float(q1 - k * iqr), float(q3 + k * iqr)


def coefficient_of_variation(samples: ArrayLike) -> float:
    """std / mean, 0 for empty or zero-mean samples"""
    data = np.asarray(samples, dtype=float)
    if data.size == 0:
        return 0.0

    mean = np.mean(data)
    if mean == 0:
        return 0.0
    return float(np.std(data) / abs(mean))
