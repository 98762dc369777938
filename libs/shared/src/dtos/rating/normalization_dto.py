"""Normalization DTOs"""

from typing import TypedDict


class NormalizationConfigDTO(TypedDict, total=False):
    """Per-call normalization settings; missing keys use the defaults"""

    method: str
    """z_score/min_max/percentile/sigmoid/tanh"""

    outlier_handling: str
    """clip/winsorize/remove/none"""

    outlier_threshold: float
    target_range: tuple[float, float]
    robust_scaling: bool


class NormalizationResultDTO(TypedDict):
    """Normalized value plus advisory metadata"""

    normalized_value: float
    original_value: float
    is_outlier: bool
    confidence: float  # 0.1-1.0
    method: str


class BatchItemDTO(TypedDict):
    """One value of a batch normalization"""

    value: float
    series_key: str


class NormalizerStatisticsDTO(TypedDict):
    """Summary of the stored series"""

    series_count: int
    total_values: int
    average_values_per_series: float
    series_keys: list[str]
